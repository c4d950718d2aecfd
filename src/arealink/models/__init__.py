from .domain import Area, CarbonDioxideSensor, HumiditySensor, Light, TemperatureSensor
from .hass import HassArea, HassDevice, HassEntity, HassEntityState, HassEntityStateChange
from .messages import HubMessage, parse_message

__all__ = [
    "Area",
    "CarbonDioxideSensor",
    "HassArea",
    "HassDevice",
    "HassEntity",
    "HassEntityState",
    "HassEntityStateChange",
    "HubMessage",
    "HumiditySensor",
    "Light",
    "TemperatureSensor",
    "parse_message",
]
