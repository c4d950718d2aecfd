import copy
import uuid
from logging import Handler, Logger, getLogger

from arealink.const import LOG_LEVELS


def _nearest_handlers(logger: Logger) -> list[Handler]:
    """Handlers of the closest ancestor of `logger` that has any."""
    parent = logger.parent
    while parent is not None and not parent.handlers:
        parent = parent.parent
    return list(parent.handlers) if parent is not None else []


class _LoggerMixin:
    """Gives each hub component its own child of the `arealink` logger.

    The logger name carries a short random suffix, so two clients in one process log separately.
    """

    unique_id: str
    unique_name: str
    logger: Logger

    def __init__(self, unique_name_prefix: str | None = None) -> None:
        self.unique_id = uuid.uuid4().hex
        self.unique_name = f"{unique_name_prefix or type(self).__name__}.{self.unique_id[:8]}"
        self.logger = getLogger(f"arealink.{self.unique_name}")

    def __repr__(self) -> str:
        return f"<{type(self).__name__} unique_name={self.unique_name}>"

    def set_logger_to_level(self, level: LOG_LEVELS) -> None:
        """Detach this component's logger and let it log at `level`.

        The logger stops propagating and gets copies of the nearest ancestor's handlers set to
        `level`, so e.g. a DEBUG client still prints while the package logger stays at INFO.
        """
        self.logger.setLevel(level)
        self.logger.propagate = False
        if self.logger.handlers:
            return

        for inherited in _nearest_handlers(self.logger):
            handler = copy.copy(inherited)
            handler.setLevel(level)
            self.logger.addHandler(handler)
