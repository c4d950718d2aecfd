"""WebSocket client for the Home Assistant hub.

The client owns a single websocket connection. It authenticates, requests the area, device and
entity registries, subscribes to compressed entity state updates and periodically re-issues the
same requests so that missed events heal themselves. Every inbound frame is decoded into a typed
message and, where relevant, forwarded as a `HubEvent` to a single event sink.

The client has no knowledge of the domain model, see `arealink.core.data_manager` for that.
"""

import asyncio
import json
import typing
from dataclasses import dataclass
from typing import Any

import aiohttp
from aiohttp import ClientWebSocketResponse, WSMsgType
from aiohttp.client_exceptions import ClientConnectionResetError
from pydantic import TypeAdapter, ValidationError

from arealink.const import (
    DEFAULT_REFRESH_INTERVAL_SECONDS,
    LOG_LEVELS,
    MAX_MESSAGE_ID,
    ClientMessageType,
    EntityDomain,
    LightService,
)
from arealink.core.base import _LoggerMixin
from arealink.core.tasks import TaskBucket
from arealink.events import (
    AreasEvent,
    DevicesEvent,
    EntitiesEvent,
    EntityStateChangeEvent,
    EntityStatesEvent,
    EventSink,
    HubEvent,
)
from arealink.exceptions import (
    AlreadyConnectedError,
    ConnectionClosedError,
    FailedMessageError,
    InvalidAuthError,
    NotConnectedError,
)
from arealink.models.hass import HassArea, HassDevice, HassEntity
from arealink.models.messages import (
    AuthInvalidMessage,
    AuthOkMessage,
    AuthRequiredMessage,
    EventMessage,
    ResultMessage,
    parse_message,
)
from arealink.utils.url_utils import build_ws_url

if typing.TYPE_CHECKING:
    from arealink.config import ArealinkConfig

_AREAS_ADAPTER = TypeAdapter(list[HassArea])
_DEVICES_ADAPTER = TypeAdapter(list[HassDevice])
_ENTITIES_ADAPTER = TypeAdapter(list[HassEntity])

CLOSED_MESSAGE_TYPES = (WSMsgType.CLOSE, WSMsgType.CLOSING, WSMsgType.CLOSED)


@dataclass(slots=True)
class RequestIds:
    """Most recently issued message id for each registry request, 0 if never issued."""

    areas: int = 0
    devices: int = 0
    entities: int = 0
    entity_states: int = 0


class HubWebSocketClient(_LoggerMixin):
    """Single-connection client for the Home Assistant websocket API."""

    url: str
    """WebSocket URL of the hub."""

    refresh_interval_seconds: float
    """Interval between full registry refreshes."""

    auth_error: InvalidAuthError | None
    """Set when the hub rejected the token on the current connection."""

    authenticated: asyncio.Event
    """Set once the hub accepted the token on the current connection."""

    def __init__(
        self,
        host: str,
        token: str,
        *,
        secure: bool = False,
        refresh_interval_seconds: float = DEFAULT_REFRESH_INTERVAL_SECONDS,
        connection_timeout_seconds: float = 5,
        heartbeat_interval_seconds: float | None = 30,
        cancellation_timeout_seconds: float | None = None,
        session: aiohttp.ClientSession | None = None,
        log_level: LOG_LEVELS | None = None,
    ) -> None:
        super().__init__()
        self.url = build_ws_url(host, secure)
        self._token = token
        self.refresh_interval_seconds = refresh_interval_seconds
        self._connection_timeout_seconds = connection_timeout_seconds
        self._heartbeat_interval_seconds = heartbeat_interval_seconds

        self._session = session
        self._owns_session = session is None
        self._ws: ClientWebSocketResponse | None = None

        self._running_id = 1
        self._ids = RequestIds()
        self._sink: EventSink | None = None

        self.auth_error = None
        self.authenticated = asyncio.Event()
        self.task_bucket = TaskBucket(self.unique_name, cancellation_timeout_seconds)

        if log_level:
            self.set_logger_to_level(log_level)

    @classmethod
    def from_config(cls, config: "ArealinkConfig", session: aiohttp.ClientSession | None = None):
        """Create a client from the connection settings in `config`."""
        return cls(
            config.host,
            config.token,
            secure=config.secure,
            refresh_interval_seconds=config.refresh_interval_seconds,
            connection_timeout_seconds=config.websocket_connection_timeout_seconds,
            heartbeat_interval_seconds=config.websocket_heartbeat_interval_seconds,
            cancellation_timeout_seconds=config.task_cancellation_timeout_seconds,
            session=session,
            log_level=config.websocket_log_level,
        )

    def set_event_sink(self, sink: EventSink | None) -> None:
        """Set the callable that receives every `HubEvent`, replacing any previous sink."""
        self._sink = sink

    @property
    def connected(self) -> bool:
        """Whether the client currently owns an open websocket."""
        return self._ws is not None and not self._ws.closed

    @property
    def request_ids(self) -> RequestIds:
        """Return a copy of the correlation table."""
        ids = self._ids
        return RequestIds(ids.areas, ids.devices, ids.entities, ids.entity_states)

    def get_next_message_id(self) -> int:
        """Return the next message id, wrapping back to 1 before the id range is exhausted."""
        message_id = self._running_id
        self._running_id = 1 if self._running_id + 1 >= MAX_MESSAGE_ID else self._running_id + 1
        return message_id

    async def connect(self) -> None:
        """Open the websocket and start the receive loop and the refresh timer.

        Authentication and the initial registry requests happen on the receive loop, so this
        returns as soon as the transport is open. Use `authenticated` to wait for the handshake.

        Raises:
            AlreadyConnectedError: If this client already owns a connection, call `close()` first.
        """
        self.logger.info("Connecting to Home Assistant at %s", self.url)
        if self._ws is not None:
            raise AlreadyConnectedError("Socket unexpectedly already connected")

        self._running_id = 1
        self._ids = RequestIds()
        self.auth_error = None
        self.authenticated.clear()

        if self._session is None:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=None, sock_connect=self._connection_timeout_seconds)
            )

        self._ws = await self._session.ws_connect(self.url, heartbeat=self._heartbeat_interval_seconds)
        self.logger.debug("Connected to server")

        self.task_bucket.spawn(self._recv_loop(), name=f"{self.unique_name}.recv")
        self.task_bucket.spawn(self._refresh_loop(), name=f"{self.unique_name}.refresh")

    async def close(self) -> None:
        """Stop the refresh timer and the receive loop and close the connection. Safe to call repeatedly."""
        await self.task_bucket.cancel_all()

        if self._ws is not None:
            await self._ws.close()
            self._ws = None
            self.logger.info("Disconnected from server")

        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

        self.authenticated.clear()

    async def send(self, message_type: str, payload: dict[str, Any] | None = None) -> int:
        """Send a message with a freshly allocated id.

        Args:
            message_type: The `type` of the message.
            payload: Additional fields, `type` and `id` always take precedence.

        Returns:
            The id assigned to the message.

        Raises:
            NotConnectedError: If there is no live connection.
            FailedMessageError: If the message could not be written to the socket.
        """
        if self._ws is None or not self.connected:
            raise NotConnectedError("Socket is not connected")

        message_id = self.get_next_message_id()
        message = {**(payload or {}), "type": message_type, "id": message_id}
        self.logger.debug("Sending message to Home Assistant: %s", message)

        try:
            await self._ws.send_json(message)
        except ClientConnectionResetError:
            self.logger.error("Connection was reset while sending %s", message_type)
            raise
        except Exception as e:
            raise FailedMessageError(f"Failed to send message {message}") from e

        return message_id

    async def send_data_requests(self) -> None:
        """Request the three registries and (re)subscribe to entity states, recording each id."""
        if not self.connected:
            raise NotConnectedError("Attempting to send data requests but socket is not connected")

        self._ids.areas = await self.send(ClientMessageType.GET_AREA_REGISTRY)
        self._ids.devices = await self.send(ClientMessageType.GET_DEVICE_REGISTRY)
        self._ids.entities = await self.send(ClientMessageType.GET_ENTITY_REGISTRY)
        self._ids.entity_states = await self.send(ClientMessageType.SUBSCRIBE_ENTITIES)

    async def authenticate(self) -> None:
        """Send the access token. Auth messages carry no id."""
        if self._ws is None:
            raise NotConnectedError("Socket is not connected")
        await self._ws.send_json({"type": ClientMessageType.AUTH, "access_token": self._token})

    # commands

    async def toggle_light(self, entity_id: str) -> int:
        self.logger.debug("Sending toggle light for %s", entity_id)
        return await self._call_light_service(LightService.TOGGLE, entity_id)

    async def turn_on_light(self, entity_id: str, brightness: int | None = None) -> int:
        """Turn a light on, optionally at a raw 0..255 brightness."""
        self.logger.debug("Sending turn on light for %s (brightness=%s)", entity_id, brightness)
        if brightness is None:
            return await self._call_light_service(LightService.TURN_ON, entity_id)
        return await self._call_light_service(LightService.TURN_ON, entity_id, brightness=brightness)

    async def turn_off_light(self, entity_id: str) -> int:
        self.logger.debug("Sending turn off light for %s", entity_id)
        return await self._call_light_service(LightService.TURN_OFF, entity_id)

    async def _call_light_service(self, service: str, entity_id: str, **service_data: Any) -> int:
        return await self.send(
            ClientMessageType.CALL_SERVICE,
            {
                "domain": EntityDomain.LIGHT,
                "service": service,
                "service_data": {"entity_id": entity_id, **service_data},
            },
        )

    # receiving

    async def _recv_loop(self) -> None:
        try:
            while True:
                await self._raw_recv()
        except ConnectionClosedError as e:
            self.logger.info("Receive loop stopped: %s", e)

    async def _refresh_loop(self) -> None:
        while True:
            await asyncio.sleep(self.refresh_interval_seconds)
            if not self.connected:
                self.logger.debug("Connection is gone, stopping refresh timer")
                return
            if not self.authenticated.is_set():
                self.logger.debug("Not authenticated yet, skipping refresh")
                continue
            self.logger.debug("Refreshing registries")
            await self.send_data_requests()

    async def _raw_recv(self) -> None:
        """Receive a single frame and dispatch it.

        Raises:
            ConnectionClosedError: If the websocket is closed or receives a closing frame.
        """
        if self._ws is None or self._ws.closed:
            raise ConnectionClosedError("WebSocket connection is closed")

        msg = await self._ws.receive()

        if msg.type in CLOSED_MESSAGE_TYPES:
            raise ConnectionClosedError(f"WebSocket closed by server ({msg.type.name})")

        if msg.type == WSMsgType.ERROR:
            raise ConnectionClosedError(f"WebSocket error: {self._ws.exception()}")

        if msg.type not in (WSMsgType.TEXT, WSMsgType.BINARY):
            self.logger.debug("Ignoring websocket frame of type %s", msg.type)
            return

        try:
            data = json.loads(msg.data)
        except (TypeError, ValueError):
            self.logger.warning("Received frame that is not valid JSON: %r", msg.data)
            return

        frames = data if isinstance(data, list) else [data]
        for frame in frames:
            await self._dispatch(frame)

    async def _dispatch(self, data: Any) -> None:
        message = parse_message(data)
        if message is None:
            self.logger.debug("Ignoring unexpected message: %s", data)
            return

        self.logger.debug("Received message from Home Assistant: %s", message.type)

        match message:
            case AuthRequiredMessage():
                await self.authenticate()
            case AuthInvalidMessage():
                self.logger.error("Authentication failed. Closing connection.")
                self.auth_error = InvalidAuthError(message.message or "Invalid access token")
                if self._ws is not None:
                    await self._ws.close()
            case AuthOkMessage():
                self.logger.info("Authentication successful.")
                self.authenticated.set()
                await self.send_data_requests()
            case ResultMessage():
                self._handle_result(message)
            case EventMessage():
                self._handle_event(message)

    def _handle_result(self, message: ResultMessage) -> None:
        if message.error:
            self.logger.error("Error result for message %d: %s", message.id, message.error)
            return

        try:
            if message.id == self._ids.areas:
                areas = _AREAS_ADAPTER.validate_python(message.result)
                self.logger.debug("Received areas result (%d)", len(areas))
                self._emit(AreasEvent(areas=tuple(areas)))
            elif message.id == self._ids.devices:
                devices = _DEVICES_ADAPTER.validate_python(message.result)
                self.logger.debug("Received devices result (%d)", len(devices))
                self._emit(DevicesEvent(devices=tuple(devices)))
            elif message.id == self._ids.entities:
                entities = _ENTITIES_ADAPTER.validate_python(message.result)
                self.logger.debug("Received entities result (%d)", len(entities))
                self._emit(EntitiesEvent(entities=tuple(entities)))
            elif message.id == self._ids.entity_states:
                self.logger.debug("Successfully subscribed to entities")
            else:
                self.logger.debug("Ignoring result for stale or unknown message id %d", message.id)
        except ValidationError:
            self.logger.exception("Malformed registry result for message %d", message.id)

    def _handle_event(self, message: EventMessage) -> None:
        body = message.event
        if body.a is not None:
            self.logger.debug("Received entities event (%d)", len(body.a))
            self._emit(EntityStatesEvent(states=dict(body.a)))
        elif body.c is not None:
            self.logger.debug("Received entities change event: %s", list(body.c))
            self._emit(EntityStateChangeEvent(changes=dict(body.c)))

    def _emit(self, event: HubEvent) -> None:
        if self._sink is None:
            self.logger.debug("No event sink set, dropping %s event", event.kind)
            return
        try:
            self._sink(event)
        except Exception:
            self.logger.exception("Event sink failed to handle %s event", event.kind)
