from .commands import CommandDispatcher
from .data_manager import DataManager

__all__ = ["CommandDispatcher", "DataManager"]
