class ArealinkError(Exception):
    """Base exception for all arealink errors."""


class FatalError(ArealinkError):
    """Custom exception to indicate a programming or configuration error that should not be retried."""


class IPV6NotSupportedError(FatalError):
    """Custom exception to indicate that IPv6 addresses are not supported for the hub host."""


class HostRequiredError(FatalError):
    """Custom exception to indicate that the hub host configuration is required."""


class AlreadyConnectedError(FatalError):
    """Raised when connect() is called on a client that already owns a live connection."""


class NotConnectedError(FatalError):
    """Raised when attempting to send a message without a live connection."""


class ConnectionClosedError(ArealinkError):
    """Custom exception to indicate that the WebSocket connection was closed unexpectedly."""


class InvalidAuthError(FatalError):
    """Custom exception to indicate that the authentication token is invalid."""


class FailedMessageError(ArealinkError):
    """Custom exception to indicate that a message sent to the WebSocket failed."""


class RegistryLookupError(FatalError):
    """Base exception for a registry record that could not be resolved while rebuilding the model."""


class EntityNotFoundError(RegistryLookupError):
    """Raised when an entity id has no matching entry in the entity registry."""

    def __init__(self, entity_id: str) -> None:
        super().__init__(f"Entity not found: {entity_id}")
        self.entity_id = entity_id


class DeviceNotFoundError(RegistryLookupError):
    """Raised when an entity references a device that is missing from the device registry."""

    def __init__(self, device_id: str | None, entity_id: str) -> None:
        super().__init__(f"Device not found: {device_id} for entity {entity_id}")
        self.device_id = device_id
        self.entity_id = entity_id


class AreaNotFoundError(RegistryLookupError):
    """Raised when an area id is not part of the current model."""

    def __init__(self, area_id: str | None, entity_id: str | None = None) -> None:
        msg = f"Area not found: {area_id}"
        if entity_id:
            msg += f" for entity {entity_id}"
        super().__init__(msg)
        self.area_id = area_id
        self.entity_id = entity_id


class AreaNotConfiguredError(ValueError, ArealinkError):
    """Raised when a command targets an area id that is not in the configured list."""

    def __init__(self, area_id: str, available: list[str]) -> None:
        super().__init__(f"Area '{area_id}' is not configured, expected one of: {', '.join(available)}")
        self.area_id = area_id
        self.available = available
