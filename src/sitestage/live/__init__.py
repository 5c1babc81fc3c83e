"""Live reload for the development server."""

from sitestage.live.reload import LiveReloadManager, create_live_reload_routes

__all__ = ["LiveReloadManager", "create_live_reload_routes"]
