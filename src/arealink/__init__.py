import logging

from .client import HubWebSocketClient
from .config import AreaConfig, ArealinkConfig
from .core import CommandDispatcher, DataManager
from .core.core import Arealink
from .models import Area, CarbonDioxideSensor, HumiditySensor, Light, TemperatureSensor

logging.getLogger("arealink").addHandler(logging.NullHandler())

__all__ = [
    "Area",
    "AreaConfig",
    "Arealink",
    "ArealinkConfig",
    "CarbonDioxideSensor",
    "CommandDispatcher",
    "DataManager",
    "HubWebSocketClient",
    "HumiditySensor",
    "Light",
    "TemperatureSensor",
]
