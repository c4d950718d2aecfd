from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from arealink.const import CELSIUS, FAHRENHEIT, TemperatureUnit


def _normalize_temperature_unit(value: Any) -> Any:
    if isinstance(value, str) and value.strip().upper() in ("C", "F"):
        return CELSIUS if value.strip().upper() == "C" else FAHRENHEIT
    return value


class AreaConfig(BaseModel):
    """Static dashboard configuration for a single area.

    Sensor entity ids are matched against the hub's entity states to populate the area's
    sensors; areas without a configured sensor simply never report a reading for it.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", use_attribute_docstrings=True)

    area_id: str = Field(..., min_length=1)
    """Hub-assigned area id, e.g. 'living_room'."""

    temperature_sensor_entity_id: str | None = Field(default=None)
    """Entity id of the temperature sensor for this area."""

    humidity_sensor_entity_id: str | None = Field(default=None)
    """Entity id of the humidity sensor for this area."""

    carbon_dioxide_sensor_entity_id: str | None = Field(default=None)
    """Entity id of the carbon dioxide sensor for this area."""

    temperature_unit_of_measurement: Annotated[TemperatureUnit, BeforeValidator(_normalize_temperature_unit)] = Field(
        default=CELSIUS
    )
    """Unit that temperature readings are displayed in, readings in the other unit are converted."""

    @property
    def sensor_entity_ids(self) -> set[str]:
        """Return all sensor entity ids configured for this area."""
        candidates = (
            self.temperature_sensor_entity_id,
            self.humidity_sensor_entity_id,
            self.carbon_dioxide_sensor_entity_id,
        )
        return {c for c in candidates if c}
