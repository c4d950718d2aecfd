from .area_config import AreaConfig
from .core_config import ArealinkConfig

__all__ = ["AreaConfig", "ArealinkConfig"]
