"""The denormalized model of the installation that adapters read from."""

from dataclasses import dataclass, field

from arealink.const import (
    CARBON_DIOXIDE_UNIT,
    CELSIUS,
    HUMIDITY_UNIT,
    UNAVAILABLE,
    LightStateValue,
    SensorStateValue,
    TemperatureUnit,
)


@dataclass(slots=True)
class Light:
    area_id: str
    area_name: str
    device_id: str | None
    device_name: str | None
    entity_id: str
    state: LightStateValue = UNAVAILABLE
    brightness_percentage: int | None = None
    rgb_color: tuple[int, int, int] | None = None


@dataclass(slots=True)
class _Sensor:
    area_id: str
    area_name: str
    device_id: str | None
    device_name: str | None
    entity_id: str
    state: SensorStateValue = UNAVAILABLE

    def format_reading(self) -> str:
        """Return the reading as 'value unit', or the unavailable sentinel."""
        if self.state == UNAVAILABLE:
            return UNAVAILABLE
        return f"{format_number(self.state)} {self.unit_of_measurement}"  # pyright: ignore[reportAttributeAccessIssue]


@dataclass(slots=True)
class HumiditySensor(_Sensor):
    unit_of_measurement: str = HUMIDITY_UNIT


@dataclass(slots=True)
class TemperatureSensor(_Sensor):
    unit_of_measurement: TemperatureUnit = CELSIUS
    """Display unit, readings are converted into it."""

    source_unit_of_measurement: TemperatureUnit | None = None
    """Unit the hub last reported the reading in."""


@dataclass(slots=True)
class CarbonDioxideSensor(_Sensor):
    unit_of_measurement: str = CARBON_DIOXIDE_UNIT


@dataclass(slots=True)
class Area:
    id: str
    name: str
    floor_id: str | None = None
    lights: list[Light] = field(default_factory=list)
    humidity_sensor: HumiditySensor | None = None
    temperature_sensor: TemperatureSensor | None = None
    carbon_dioxide_sensor: CarbonDioxideSensor | None = None

    def find_light(self, entity_id: str) -> Light | None:
        return next((light for light in self.lights if light.entity_id == entity_id), None)

    def upsert_light(self, light: Light) -> None:
        """Replace the light with the same entity id, or append it."""
        for index, existing in enumerate(self.lights):
            if existing.entity_id == light.entity_id:
                self.lights[index] = light
                return
        self.lights.append(light)


def format_number(value: int | float) -> str:
    """Format a reading without a trailing '.0' for whole numbers."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
