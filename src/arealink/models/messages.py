"""Inbound frames from the hub, decoded into a closed tagged union at the boundary."""

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from arealink.models.hass import HassEntityState, HassEntityStateChange


class _Message(BaseModel):
    model_config = ConfigDict(extra="allow")


class AuthRequiredMessage(_Message):
    type: Literal["auth_required"]
    ha_version: str | None = Field(default=None)


class AuthOkMessage(_Message):
    type: Literal["auth_ok"]
    ha_version: str | None = Field(default=None)


class AuthInvalidMessage(_Message):
    type: Literal["auth_invalid"]
    message: str | None = Field(default=None)


class ResultMessage(_Message):
    type: Literal["result"]
    id: int
    success: bool | None = Field(default=None)
    error: Any = Field(default=None)
    result: Any = Field(default=None)


class EntitiesEventBody(_Message):
    """Body of a `subscribe_entities` event, either a full snapshot (`a`) or a patch (`c`)."""

    a: dict[str, HassEntityState] | None = Field(default=None)
    c: dict[str, HassEntityStateChange] | None = Field(default=None)


class EventMessage(_Message):
    type: Literal["event"]
    id: int | None = Field(default=None)
    event: EntitiesEventBody


HubMessage = Annotated[
    AuthRequiredMessage | AuthOkMessage | AuthInvalidMessage | ResultMessage | EventMessage,
    Field(discriminator="type"),
]

_HUB_MESSAGE_ADAPTER: TypeAdapter[HubMessage] = TypeAdapter(HubMessage)


def parse_message(data: Any) -> HubMessage | None:
    """Decode a raw frame into a `HubMessage`.

    Args:
        data: The JSON-decoded frame.

    Returns:
        The typed message, or None if the frame is not one of the known message kinds.
    """
    try:
        return _HUB_MESSAGE_ADAPTER.validate_python(data)
    except ValidationError:
        return None
