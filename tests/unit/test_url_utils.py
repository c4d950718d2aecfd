"""Tests for websocket URL construction."""

import pytest

from arealink.exceptions import HostRequiredError, IPV6NotSupportedError
from arealink.utils import build_ws_url


def test_host_with_port():
    """Test URL construction for a host with an explicit port."""
    assert build_ws_url("localhost:8123") == "ws://localhost:8123/api/websocket"


def test_secure_uses_wss():
    """Test that TLS switches the scheme to wss."""
    assert build_ws_url("hass.example.com:8443", secure=True) == "wss://hass.example.com:8443/api/websocket"


@pytest.mark.parametrize(
    ("host", "expected"),
    [
        ("test.local", "ws://test.local/api/websocket"),
        ("192.168.1.1", "ws://192.168.1.1/api/websocket"),
        ("127.0.0.1:8000", "ws://127.0.0.1:8000/api/websocket"),
        (" homeassistant.local:8123 ", "ws://homeassistant.local:8123/api/websocket"),
    ],
)
def test_port_is_only_added_when_given(host: str, expected: str):
    """Test that no default port is injected."""
    assert build_ws_url(host) == expected


@pytest.mark.parametrize("host", ["", "   "])
def test_empty_host_raises(host: str):
    """Test that an empty host is rejected."""
    with pytest.raises(HostRequiredError):
        build_ws_url(host)


def test_ipv6_raises():
    """Test that IPv6 addresses are rejected."""
    with pytest.raises(IPV6NotSupportedError):
        build_ws_url("::1")
