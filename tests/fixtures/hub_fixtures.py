"""Factories for hub registry records, compressed states and typed events."""

from typing import Any

from arealink.events import AreasEvent, DevicesEvent, EntitiesEvent, EntityStateChangeEvent, EntityStatesEvent
from arealink.models.hass import HassArea, HassDevice, HassEntity, HassEntityState, HassEntityStateChange


def make_area(area_id: str, name: str | None = None, floor_id: str | None = None) -> HassArea:
    return HassArea(area_id=area_id, name=name or area_id.replace("_", " ").title(), floor_id=floor_id)


def make_device(device_id: str, area_id: str | None, name: str | None = None) -> HassDevice:
    return HassDevice(id=device_id, area_id=area_id, name=name or device_id)


def make_entity(entity_id: str, device_id: str | None) -> HassEntity:
    return HassEntity(entity_id=entity_id, device_id=device_id)


def make_state(state: Any = None, **attributes: Any) -> HassEntityState:
    """Build a full compressed state with both `s` and `a` set."""
    return HassEntityState(s=state, a=attributes)


def make_patch(state: Any = None, **attributes: Any) -> HassEntityStateChange:
    """Build a change entry carrying only the given fields."""
    additions: dict[str, Any] = {}
    if state is not None:
        additions["s"] = state
    if attributes:
        additions["a"] = attributes
    return HassEntityStateChange.model_validate({"+": additions})


class OfficeRegistry:
    """Registry with an 'office' area holding a desk light and three sensors on one device."""

    def __init__(self, light_state: str = "on", brightness: Any = 128, temperature: Any = "21.5") -> None:
        self.areas = [make_area("office", "Office", floor_id="ground")]
        self.devices = [
            make_device("dev-desk", "office", name="Desk Lamp"),
            make_device("dev-climate", "office", name="Climate Sensor"),
        ]
        self.entities = [
            make_entity("light.desk", "dev-desk"),
            make_entity("sensor.office_temperature", "dev-climate"),
            make_entity("sensor.office_humidity", "dev-climate"),
            make_entity("sensor.office_co2", "dev-climate"),
        ]
        self.states = {
            "light.desk": make_state(light_state, brightness=brightness, rgb_color=[255, 200, 100]),
            "sensor.office_temperature": make_state(temperature, unit_of_measurement="°C"),
            "sensor.office_humidity": make_state("45", unit_of_measurement="%"),
            "sensor.office_co2": make_state("800", unit_of_measurement="ppm"),
        }

    def areas_event(self) -> AreasEvent:
        return AreasEvent(areas=tuple(self.areas))

    def devices_event(self) -> DevicesEvent:
        return DevicesEvent(devices=tuple(self.devices))

    def entities_event(self) -> EntitiesEvent:
        return EntitiesEvent(entities=tuple(self.entities))

    def states_event(self) -> EntityStatesEvent:
        return EntityStatesEvent(states={k: v.model_copy(deep=True) for k, v in self.states.items()})

    def events(self) -> list:
        return [self.areas_event(), self.devices_event(), self.entities_event(), self.states_event()]


def change_event(**changes: HassEntityStateChange) -> EntityStateChangeEvent:
    """Build a change event, keyword names use '__' in place of '.' in entity ids."""
    return EntityStateChangeEvent(changes={k.replace("__", "."): v for k, v in changes.items()})
