from .url_utils import build_ws_url

__all__ = ["build_ws_url"]
