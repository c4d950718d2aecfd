from .websocket_client import HubWebSocketClient, RequestIds

__all__ = ["HubWebSocketClient", "RequestIds"]
