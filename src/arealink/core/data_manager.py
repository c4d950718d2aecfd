"""Data manager that keeps the area model in sync with the hub.

The hub answers the area, device and entity registry requests and the entity state subscription
independently and in any order. The data manager buffers the latest copy of each and rebuilds the
model once all four are present, then clears the buffers so that a rebuild fires at most once per
complete set. A periodic refresh on the client starts a new set.

Between rebuilds, entity state patches are applied directly to the live model. While a state
snapshot is buffered the patches are merged into the buffer instead, so they are reflected by the
rebuild that consumes it.

Usage:
    ```python
    client = HubWebSocketClient.from_config(config)
    data_manager = DataManager.from_config(client, config)
    await data_manager.start()

    # later, once synced
    for light in data_manager.get_lights("office"):
        print(light.entity_id, light.state, light.brightness_percentage)
    ```
"""

import typing
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, replace

from arealink.config.area_config import AreaConfig
from arealink.const import (
    CARBON_DIOXIDE_DANGER_THRESHOLD_PPM,
    LOG_LEVELS,
    UNAVAILABLE,
    DangerLevel,
    EntityDomain,
    TemperatureUnit,
)
from arealink.conversion import (
    calc_temperature_value,
    get_brightness_percentage,
    get_light_state,
    get_numeric_sensor_state,
    get_rgb_color,
    get_temperature_unit_of_measurement,
)
from arealink.core.base import _LoggerMixin
from arealink.events import (
    AreasEvent,
    DevicesEvent,
    EntitiesEvent,
    EntityStateChangeEvent,
    EntityStatesEvent,
    HubEvent,
)
from arealink.exceptions import AreaNotFoundError, DeviceNotFoundError, EntityNotFoundError, RegistryLookupError
from arealink.models.domain import Area, CarbonDioxideSensor, HumiditySensor, Light, TemperatureSensor
from arealink.models.hass import HassArea, HassDevice, HassEntity, HassEntityState, HassEntityStateChange

if typing.TYPE_CHECKING:
    from arealink.client import HubWebSocketClient
    from arealink.config import ArealinkConfig

LIGHT_PREFIX = f"{EntityDomain.LIGHT}."


@dataclass(slots=True)
class IncomingData:
    """Latest registry results that have not been consumed by a rebuild yet."""

    areas: list[HassArea] | None = None
    devices: list[HassDevice] | None = None
    entities: list[HassEntity] | None = None
    entity_states: dict[str, HassEntityState] | None = None

    def is_complete(self) -> bool:
        return (
            self.areas is not None
            and self.devices is not None
            and self.entities is not None
            and self.entity_states is not None
        )

    def clear(self) -> None:
        self.areas = None
        self.devices = None
        self.entities = None
        self.entity_states = None


class _Registry:
    """Id-indexed view of one set of registry results."""

    def __init__(self, devices: Iterable[HassDevice], entities: Iterable[HassEntity]) -> None:
        self.devices = {d.id: d for d in devices}
        self.entities = {e.entity_id: e for e in entities}

    def get_entity_and_device(self, entity_id: str) -> tuple[HassEntity, HassDevice]:
        entity = self.entities.get(entity_id)
        if entity is None:
            raise EntityNotFoundError(entity_id)
        device = self.devices.get(entity.device_id) if entity.device_id else None
        if device is None:
            raise DeviceNotFoundError(entity.device_id, entity_id)
        return entity, device


class DataManager(_LoggerMixin):
    """Owns the area model and keeps it in sync with the events of a `HubWebSocketClient`."""

    areas: list[Area]
    """The live model, replaced on each rebuild and patched in place between rebuilds."""

    area_configs: list[AreaConfig]
    """Static dashboard configuration, used to find each area's sensors."""

    sync_count: int
    """Number of completed rebuilds."""

    def __init__(
        self,
        client: "HubWebSocketClient",
        area_configs: Sequence[AreaConfig] = (),
        *,
        log_level: LOG_LEVELS | None = None,
    ) -> None:
        super().__init__()
        self._client = client
        self.area_configs = list(area_configs)
        self.areas = []
        self.incoming = IncomingData()
        self.sync_count = 0

        if log_level:
            self.set_logger_to_level(log_level)

    @classmethod
    def from_config(cls, client: "HubWebSocketClient", config: "ArealinkConfig"):
        return cls(client, config.areas, log_level=config.data_manager_log_level)

    @property
    def has_synced(self) -> bool:
        """Whether at least one rebuild has completed."""
        return self.sync_count > 0

    @property
    def available_area_ids(self) -> list[str]:
        return [config.area_id for config in self.area_configs]

    async def start(self) -> None:
        """Route the client's events to this data manager and connect the client."""
        self._client.set_event_sink(self.handle_event)
        await self._client.connect()

    async def close(self) -> None:
        await self._client.close()

    def handle_event(self, event: HubEvent) -> None:
        """Entry point for every event emitted by the client."""
        match event:
            case AreasEvent(areas=areas):
                self.incoming.areas = list(areas)
                self._try_sync()
            case DevicesEvent(devices=devices):
                self.incoming.devices = list(devices)
                self._try_sync()
            case EntitiesEvent(entities=entities):
                self.incoming.entities = list(entities)
                self._try_sync()
            case EntityStatesEvent(states=states):
                self.incoming.entity_states = dict(states or {})
                self._try_sync()
            case EntityStateChangeEvent(changes=changes):
                self.apply_changes(changes or {})
            case _:
                self.logger.warning("Ignoring unknown event: %r", event)

    def _try_sync(self) -> None:
        try:
            self.sync_data()
        except RegistryLookupError:
            self.logger.exception("Rebuild aborted, keeping the previous model")

    # rebuild

    def sync_data(self) -> bool:
        """Rebuild the model if all four registry results are buffered.

        The new model is built next to the live one and only swapped in once it is complete.

        Returns:
            True if a rebuild ran, False if results are still missing.

        Raises:
            RegistryLookupError: If the registries are inconsistent. The live model and the
                buffers are left untouched.
        """
        incoming = self.incoming
        if not incoming.is_complete():
            return False

        if typing.TYPE_CHECKING:
            assert incoming.areas is not None
            assert incoming.devices is not None
            assert incoming.entities is not None
            assert incoming.entity_states is not None

        registry = _Registry(incoming.devices, incoming.entities)
        areas = self._build_areas(incoming.areas)
        self._build_lights(areas, registry, incoming.entity_states)
        self._build_sensors(areas, registry, incoming.entity_states)

        self.areas = areas
        incoming.clear()
        self.sync_count += 1

        self.logger.info(
            "Synced %d areas with %d lights", len(areas), sum(len(area.lights) for area in areas)
        )
        return True

    def _build_areas(self, hass_areas: Sequence[HassArea]) -> list[Area]:
        stale_areas = {area.id: area for area in self.areas}
        areas: list[Area] = []
        for hass_area in hass_areas:
            stale = stale_areas.get(hass_area.area_id)
            if stale is None:
                areas.append(Area(id=hass_area.area_id, name=hass_area.name, floor_id=hass_area.floor_id))
                continue
            areas.append(
                replace(
                    stale,
                    id=hass_area.area_id,
                    name=hass_area.name,
                    floor_id=hass_area.floor_id,
                    lights=list(stale.lights),
                )
            )
        return areas

    def _build_lights(self, areas: list[Area], registry: _Registry, entity_states: dict[str, HassEntityState]) -> None:
        areas_by_id = {area.id: area for area in areas}
        for entity_id, state in entity_states.items():
            if not entity_id.startswith(LIGHT_PREFIX):
                continue
            _, device = registry.get_entity_and_device(entity_id)
            area = areas_by_id.get(device.area_id) if device.area_id else None
            if area is None:
                raise AreaNotFoundError(device.area_id, entity_id)

            attributes = state.a or {}
            light = Light(
                area_id=area.id,
                area_name=area.name,
                device_id=device.id,
                device_name=device.name,
                entity_id=entity_id,
                state=get_light_state(state.s),
                brightness_percentage=get_brightness_percentage(attributes.get("brightness")),
                rgb_color=get_rgb_color(attributes.get("rgb_color")),
            )

            # a light that moved to another area must not stay behind in the old one
            for other in areas:
                if other is not area:
                    other.lights = [existing for existing in other.lights if existing.entity_id != entity_id]
            area.upsert_light(light)

    def _build_sensors(
        self, areas: list[Area], registry: _Registry, entity_states: dict[str, HassEntityState]
    ) -> None:
        areas_by_id = {area.id: area for area in areas}
        for config in self.area_configs:
            for entity_id in config.sensor_entity_ids:
                state = entity_states.get(entity_id)
                if state is None:
                    self.logger.debug("No state for sensor %s configured for area %s", entity_id, config.area_id)
                    continue

                area = areas_by_id.get(config.area_id)
                if area is None:
                    raise AreaNotFoundError(config.area_id, entity_id)
                _, device = registry.get_entity_and_device(entity_id)

                common = dict(
                    area_id=area.id,
                    area_name=area.name,
                    device_id=device.id,
                    device_name=device.name,
                    entity_id=entity_id,
                )
                if entity_id == config.humidity_sensor_entity_id:
                    area.humidity_sensor = HumiditySensor(**common, state=get_numeric_sensor_state(state.s))
                if entity_id == config.temperature_sensor_entity_id:
                    source_unit = self._resolve_temperature_unit(state, config, None)
                    area.temperature_sensor = TemperatureSensor(
                        **common,
                        state=calc_temperature_value(
                            get_numeric_sensor_state(state.s), source_unit, config.temperature_unit_of_measurement
                        ),
                        unit_of_measurement=config.temperature_unit_of_measurement,
                        source_unit_of_measurement=source_unit,
                    )
                if entity_id == config.carbon_dioxide_sensor_entity_id:
                    area.carbon_dioxide_sensor = CarbonDioxideSensor(
                        **common, state=get_numeric_sensor_state(state.s)
                    )

    @staticmethod
    def _resolve_temperature_unit(
        state: HassEntityState, config: AreaConfig, previous: TemperatureUnit | None
    ) -> TemperatureUnit:
        reported = get_temperature_unit_of_measurement((state.a or {}).get("unit_of_measurement"))
        return reported or previous or config.temperature_unit_of_measurement

    # patches

    def apply_changes(self, changes: dict[str, HassEntityStateChange]) -> None:
        """Apply a state patch, to the buffered snapshot if one is held, otherwise to the live model."""
        buffered = self.incoming.entity_states
        if buffered is not None:
            for entity_id, change in changes.items():
                if change.additions is None:
                    continue
                current = buffered.get(entity_id)
                buffered[entity_id] = (
                    current.merged_with(change.additions) if current else change.additions.model_copy()
                )
            return

        for entity_id, change in changes.items():
            patch = change.additions
            if patch is None:
                continue
            if entity_id.startswith(LIGHT_PREFIX):
                self.update_light_state(entity_id, patch)
                continue
            if not self.has_synced:
                self.logger.debug("Dropping patch for %s received before the first sync", entity_id)
                continue
            self._update_sensor_state(entity_id, patch)

    def update_light_state(self, entity_id: str, patch: HassEntityState) -> str | None:
        """Patch a light in place.

        Only the fields present in the patch are touched.

        Returns:
            The id of the area containing the light, or None if the light is unknown.
        """
        for area in self.areas:
            light = area.find_light(entity_id)
            if light is None:
                continue
            if "s" in patch.model_fields_set:
                light.state = get_light_state(patch.s)
            if patch.a is not None:
                if "brightness" in patch.a:
                    light.brightness_percentage = get_brightness_percentage(patch.a["brightness"])
                if "rgb_color" in patch.a:
                    light.rgb_color = get_rgb_color(patch.a["rgb_color"])
            return area.id

        self.logger.debug("No light found for %s", entity_id)
        return None

    def _update_sensor_state(self, entity_id: str, patch: HassEntityState) -> None:
        for config in self.area_configs:
            try:
                if entity_id == config.carbon_dioxide_sensor_entity_id:
                    self.update_carbon_dioxide_sensor(config.area_id, patch)
                elif entity_id == config.humidity_sensor_entity_id:
                    self.update_humidity_sensor(config.area_id, patch)
                elif entity_id == config.temperature_sensor_entity_id:
                    self.update_temperature_sensor(config.area_id, patch)
            except AreaNotFoundError as e:
                self.logger.warning("Skipping patch for %s: %s", entity_id, e)

    def update_carbon_dioxide_sensor(self, area_id: str, patch: HassEntityState) -> None:
        area = self.get_area(area_id)
        if area.carbon_dioxide_sensor is None:
            self.logger.error("Carbon dioxide sensor not found for area %s", area_id)
            return
        if "s" in patch.model_fields_set:
            area.carbon_dioxide_sensor.state = get_numeric_sensor_state(patch.s)

    def update_humidity_sensor(self, area_id: str, patch: HassEntityState) -> None:
        area = self.get_area(area_id)
        if area.humidity_sensor is None:
            self.logger.error("Humidity sensor not found for area %s", area_id)
            return
        if "s" in patch.model_fields_set:
            area.humidity_sensor.state = get_numeric_sensor_state(patch.s)

    def update_temperature_sensor(self, area_id: str, patch: HassEntityState) -> None:
        config = self._get_area_config(area_id)
        area = self.get_area(area_id)
        sensor = area.temperature_sensor
        if sensor is None:
            self.logger.error("Temperature sensor not found for area %s", area_id)
            return

        sensor.source_unit_of_measurement = self._resolve_temperature_unit(
            patch, config, sensor.source_unit_of_measurement
        )
        if "s" in patch.model_fields_set:
            sensor.state = calc_temperature_value(
                get_numeric_sensor_state(patch.s),
                sensor.source_unit_of_measurement,
                config.temperature_unit_of_measurement,
            )

    def _get_area_config(self, area_id: str) -> AreaConfig:
        config = next((c for c in self.area_configs if c.area_id == area_id), None)
        if config is None:
            raise AreaNotFoundError(area_id)
        return config

    # reads

    def get_area(self, area_id: str) -> Area:
        """Return the area with the given id.

        Raises:
            AreaNotFoundError: If the area is not part of the model.
        """
        area = next((area for area in self.areas if area.id == area_id), None)
        if area is None:
            raise AreaNotFoundError(area_id)
        return area

    def get_lights(self, area_id: str) -> list[Light]:
        return self.get_area(area_id).lights

    def get_average_brightness(self, area_id: str) -> float:
        """Return the mean brightness percentage of an area's lights, counting unknown brightness as 0."""
        lights = self.get_lights(area_id)
        if not lights:
            return 0
        return sum(light.brightness_percentage or 0 for light in lights) / len(lights)

    def get_humidity_inside_reading(self, area_id: str) -> str | None:
        sensor = self.get_area(area_id).humidity_sensor
        return sensor.format_reading() if sensor else None

    def get_temperature_inside_reading(self, area_id: str) -> str | None:
        sensor = self.get_area(area_id).temperature_sensor
        return sensor.format_reading() if sensor else None

    def get_carbon_dioxide_inside_reading(self, area_id: str) -> str | None:
        sensor = self.get_area(area_id).carbon_dioxide_sensor
        return sensor.format_reading() if sensor else None

    def get_carbon_dioxide_danger_level(self, area_id: str) -> DangerLevel:
        """Classify the area's carbon dioxide reading, readings above 1000 ppm are dangerous."""
        sensor = self.get_area(area_id).carbon_dioxide_sensor
        if sensor is None or sensor.state == UNAVAILABLE:
            return "unknown"
        if int(sensor.state) > CARBON_DIOXIDE_DANGER_THRESHOLD_PPM:
            return "danger"
        return "safe"
