import asyncio
import typing
from logging import getLogger

import aiohttp

from arealink.client import HubWebSocketClient
from arealink.core.commands import CommandDispatcher
from arealink.core.data_manager import DataManager

if typing.TYPE_CHECKING:
    from arealink.config import ArealinkConfig

LOGGER = getLogger(__name__)

SUMMARY_INTERVAL_SECONDS = 60


class Arealink:
    """Wires the websocket client, the data manager and the command dispatcher together.

    Adapters get the model through `data_manager` and issue commands through `commands`.
    """

    def __init__(self, config: "ArealinkConfig", session: "aiohttp.ClientSession | None" = None) -> None:
        self.config = config
        self.client = HubWebSocketClient.from_config(config, session)
        self.data_manager = DataManager.from_config(self.client, config)
        self.commands = CommandDispatcher(self.data_manager, self.client)

    async def __aenter__(self) -> "Arealink":
        await self.start()
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()

    async def start(self) -> None:
        await self.data_manager.start()

    async def close(self) -> None:
        await self.data_manager.close()

    def summarize_areas(self) -> list[str]:
        """Return a one-line summary of each configured area that is part of the model."""
        lines: list[str] = []
        model_ids = {area.id for area in self.data_manager.areas}
        for area_id in self.config.available_area_ids:
            if area_id not in model_ids:
                continue
            dm = self.data_manager
            lights = dm.get_lights(area_id)
            on = sum(1 for light in lights if light.state == "on")
            parts = [f"{area_id}: {on}/{len(lights)} lights on ({dm.get_average_brightness(area_id):.0f}%)"]
            for label, reading in (
                ("temperature", dm.get_temperature_inside_reading(area_id)),
                ("humidity", dm.get_humidity_inside_reading(area_id)),
                ("co2", dm.get_carbon_dioxide_inside_reading(area_id)),
            ):
                if reading is not None:
                    parts.append(f"{label} {reading}")
            lines.append(", ".join(parts))
        return lines

    async def run_forever(self, summary_interval_seconds: float = SUMMARY_INTERVAL_SECONDS) -> None:
        """Keep the model in sync and log a summary periodically until cancelled or the token is rejected."""
        async with self:
            while True:
                await asyncio.sleep(summary_interval_seconds)
                if self.client.auth_error is not None:
                    raise self.client.auth_error
                if not self.client.connected:
                    LOGGER.warning("Connection to Home Assistant lost, reconnecting")
                    try:
                        await self.client.close()
                        await self.client.connect()
                    except (aiohttp.ClientError, OSError) as e:
                        LOGGER.warning("Reconnect failed, retrying in %ss: %s", summary_interval_seconds, e)
                    continue
                for line in self.summarize_areas():
                    LOGGER.info(line)
