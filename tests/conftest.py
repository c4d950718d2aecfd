import pytest
from aiohttp import ClientWebSocketResponse
from fixtures.ws_fixtures import TEST_HOST, TEST_TOKEN, build_fake_ws

from arealink.client import HubWebSocketClient
from arealink.config import AreaConfig
from arealink.core.commands import CommandDispatcher
from arealink.core.data_manager import DataManager


@pytest.fixture
def office_area_config() -> AreaConfig:
    return AreaConfig(
        area_id="office",
        temperature_sensor_entity_id="sensor.office_temperature",
        humidity_sensor_entity_id="sensor.office_humidity",
        carbon_dioxide_sensor_entity_id="sensor.office_co2",
        temperature_unit_of_measurement="°C",
    )


@pytest.fixture
def client() -> HubWebSocketClient:
    """A client with no connection."""
    return HubWebSocketClient(TEST_HOST, TEST_TOKEN, cancellation_timeout_seconds=0.5)


@pytest.fixture
def fake_ws() -> ClientWebSocketResponse:
    return build_fake_ws()


@pytest.fixture
def connected_client(client: HubWebSocketClient, fake_ws: ClientWebSocketResponse) -> HubWebSocketClient:
    """A client whose transport is a fake websocket, without receive loop or refresh timer."""
    client._ws = fake_ws
    return client


@pytest.fixture
def data_manager(connected_client: HubWebSocketClient, office_area_config: AreaConfig) -> DataManager:
    dm = DataManager(connected_client, [office_area_config])
    connected_client.set_event_sink(dm.handle_event)
    return dm


@pytest.fixture
def commands(data_manager: DataManager, connected_client: HubWebSocketClient) -> CommandDispatcher:
    return CommandDispatcher(data_manager, connected_client)
