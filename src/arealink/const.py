from typing import Literal

LOG_LEVELS = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

WEBSOCKET_PATH = "/api/websocket"

DEFAULT_REFRESH_INTERVAL_SECONDS = 3 * 60
"""Interval between full registry refreshes, used to recover from missed events."""

MAX_MESSAGE_ID = 2**53 - 1
"""Message ids wrap back to 1 before reaching this value."""


class ClientMessageType:
    """Message types that the client sends to the hub."""

    AUTH = "auth"
    SUBSCRIBE_ENTITIES = "subscribe_entities"
    CALL_SERVICE = "call_service"
    GET_AREA_REGISTRY = "config/area_registry/list"
    GET_DEVICE_REGISTRY = "config/device_registry/list"
    GET_ENTITY_REGISTRY = "config/entity_registry/list"


class EntityDomain:
    LIGHT = "light"


class LightService:
    TOGGLE = "toggle"
    TURN_ON = "turn_on"
    TURN_OFF = "turn_off"


UNAVAILABLE: Literal["unavailable"] = "unavailable"
"""Sentinel for a light or sensor whose value could not be determined."""

LightStateValue = Literal["on", "off", "unavailable"]
SensorStateValue = int | float | Literal["unavailable"]

CELSIUS = "°C"
FAHRENHEIT = "°F"
TemperatureUnit = Literal["°C", "°F"]
TEMPERATURE_UNITS: tuple[TemperatureUnit, ...] = (CELSIUS, FAHRENHEIT)

HUMIDITY_UNIT: Literal["%"] = "%"
CARBON_DIOXIDE_UNIT: Literal["ppm"] = "ppm"

MAX_BRIGHTNESS = 255

CARBON_DIOXIDE_DANGER_THRESHOLD_PPM = 1000
"""Readings above this value are classified as dangerous."""

DangerLevel = Literal["unknown", "safe", "danger"]
