"""Translate area and light intents into hub commands.

Commands are fire-and-forget: the hub's confirmation arrives later as a state patch and is
applied by the data manager, so the model may still show the old state right after a command
returns.
"""

import typing
from logging import getLogger

from arealink.conversion import get_brightness_value
from arealink.exceptions import AreaNotConfiguredError

if typing.TYPE_CHECKING:
    from arealink.client import HubWebSocketClient
    from arealink.core.data_manager import DataManager

LOGGER = getLogger(__name__)


class CommandDispatcher:
    """Issue light commands for single lights or whole areas, skipping lights already in the target state."""

    def __init__(self, data_manager: "DataManager", client: "HubWebSocketClient") -> None:
        self.data_manager = data_manager
        self.client = client

    def _check_area(self, area_id: str) -> None:
        available = self.data_manager.available_area_ids
        if available and area_id not in available:
            raise AreaNotConfiguredError(area_id, available)

    async def turn_on_light(self, entity_id: str) -> None:
        await self.client.turn_on_light(entity_id)

    async def turn_off_light(self, entity_id: str) -> None:
        await self.client.turn_off_light(entity_id)

    async def toggle_light(self, entity_id: str) -> None:
        await self.client.toggle_light(entity_id)

    async def dim_light(self, entity_id: str, brightness_percentage: int | float | None) -> None:
        """Set a light's brightness, a brightness that rounds to 0 turns the light off instead."""
        brightness = get_brightness_value(brightness_percentage)
        if brightness == 0:
            await self.turn_off_light(entity_id)
        else:
            await self.client.turn_on_light(entity_id, brightness=brightness)

    async def turn_on_area(self, area_id: str) -> int:
        """Turn on every light in the area that is currently off.

        Returns:
            The number of commands sent.
        """
        self._check_area(area_id)
        sent = 0
        for light in list(self.data_manager.get_lights(area_id)):
            if light.state == "off":
                await self.turn_on_light(light.entity_id)
                sent += 1
        LOGGER.debug("Turned on %d lights in %s", sent, area_id)
        return sent

    async def turn_off_area(self, area_id: str) -> int:
        """Turn off every light in the area that is currently on.

        Returns:
            The number of commands sent.
        """
        self._check_area(area_id)
        sent = 0
        for light in list(self.data_manager.get_lights(area_id)):
            if light.state == "on":
                await self.turn_off_light(light.entity_id)
                sent += 1
        LOGGER.debug("Turned off %d lights in %s", sent, area_id)
        return sent

    async def dim_area(self, area_id: str, brightness_percentage: int | float | None) -> int:
        """Dim every light in the area regardless of its current state.

        Returns:
            The number of commands sent.
        """
        self._check_area(area_id)
        lights = list(self.data_manager.get_lights(area_id))
        for light in lights:
            await self.dim_light(light.entity_id, brightness_percentage)
        return len(lights)
