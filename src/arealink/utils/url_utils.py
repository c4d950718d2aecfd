"""URL utilities for constructing Home Assistant endpoints."""

from yarl import URL

from arealink.const import WEBSOCKET_PATH
from arealink.exceptions import HostRequiredError, IPV6NotSupportedError


def build_ws_url(host: str, secure: bool = False) -> str:
    """Construct the WebSocket URL for Home Assistant.

    Args:
        host (str): Hostname with an optional port, e.g. 'homeassistant.local:8123'.
        secure (bool): Whether to use TLS.

    Returns:
        str: Complete WebSocket URL for the Home Assistant API

    Raises:
        HostRequiredError: If host is empty or has no hostname.
        IPV6NotSupportedError: If host is an IPv6 address.
    """
    if not host or not host.strip():
        raise HostRequiredError("host must be set in the configuration.")

    if "::" in host:
        raise IPV6NotSupportedError("IPv6 addresses are not supported for the host.")

    scheme = "wss" if secure else "ws"
    yurl = URL(f"{scheme}://{host.strip()}")

    if not yurl.host:
        raise HostRequiredError("host must include a valid hostname.")

    return str(URL.build(scheme=scheme, host=yurl.host, port=yurl.explicit_port, path=WEBSOCKET_PATH))
