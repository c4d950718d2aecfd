import logging
import sys
import threading
from contextlib import suppress

import coloredlogs

from arealink.const import LOG_LEVELS

FORMAT_DATE = "%Y-%m-%d"
FORMAT_TIME = "%H:%M:%S"
FORMAT_DATETIME = f"{FORMAT_DATE} {FORMAT_TIME}"
FMT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s.%(funcName)s:%(lineno)d ─ %(message)s"


def enable_logging(log_level: LOG_LEVELS) -> None:
    """Set up the logging"""

    logger = logging.getLogger("arealink")

    logger.setLevel(log_level)

    # keep our records out of anything configured on root
    logger.propagate = False

    logger.handlers.clear()

    # the handler has to stay at NOTSET, otherwise it clamps child loggers that
    # set a lower level than the package logger
    coloredlogs.install(level=logging.NOTSET, logger=logger, fmt=FMT, datefmt=FORMAT_DATETIME)

    # coloredlogs.install resets the logger level to WARNING
    logger.setLevel(log_level)

    # coloredlogs also attaches a handler to root
    with suppress(IndexError):
        logging.getLogger().handlers.pop(0)

    logging.captureWarnings(True)

    logging.getLogger("aiohttp.access").setLevel(logging.WARNING)
    logging.getLogger("aiohttp.client").setLevel(logging.WARNING)

    sys.excepthook = lambda *args: logging.getLogger().exception("Uncaught exception", exc_info=args)
    threading.excepthook = lambda args: logging.getLogger().exception(
        "Uncaught thread exception",
        exc_info=(args.exc_type, args.exc_value, args.exc_traceback),  # pyright: ignore[reportArgumentType]
    )
