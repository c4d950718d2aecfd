"""Typed events emitted by the websocket client.

All events travel over a single channel: the client calls one sink with a `HubEvent` and the
consumer dispatches on the event type.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Literal

from arealink.models.hass import HassArea, HassDevice, HassEntity, HassEntityState, HassEntityStateChange


@dataclass(frozen=True, slots=True)
class AreasEvent:
    kind: Literal["areas"] = "areas"
    areas: tuple[HassArea, ...] = ()


@dataclass(frozen=True, slots=True)
class DevicesEvent:
    kind: Literal["devices"] = "devices"
    devices: tuple[HassDevice, ...] = ()


@dataclass(frozen=True, slots=True)
class EntitiesEvent:
    kind: Literal["entities"] = "entities"
    entities: tuple[HassEntity, ...] = ()


@dataclass(frozen=True, slots=True)
class EntityStatesEvent:
    """Full snapshot of entity states, keyed by entity id."""

    kind: Literal["entity_states"] = "entity_states"
    states: dict[str, HassEntityState] | None = None


@dataclass(frozen=True, slots=True)
class EntityStateChangeEvent:
    """Sparse patch of entity states, keyed by entity id."""

    kind: Literal["entity_state_change"] = "entity_state_change"
    changes: dict[str, HassEntityStateChange] | None = None


HubEvent = AreasEvent | DevicesEvent | EntitiesEvent | EntityStatesEvent | EntityStateChangeEvent

EventSink = Callable[[HubEvent], None]
