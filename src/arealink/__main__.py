import asyncio
import logging
from contextlib import suppress

from arealink.config import ArealinkConfig
from arealink.core.core import Arealink
from arealink.exceptions import FatalError

LOGGER = logging.getLogger("arealink")


def main() -> None:
    config = ArealinkConfig()  # pyright: ignore[reportCallIssue]
    try:
        with suppress(KeyboardInterrupt):
            asyncio.run(Arealink(config).run_forever())
    except FatalError as e:
        LOGGER.critical("Stopping: %s", e)
        raise SystemExit(1) from e


if __name__ == "__main__":
    main()
