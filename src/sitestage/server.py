"""aiohttp server for sitestage.

Application factory and route registration for the development server.
"""

import logging
from collections.abc import AsyncIterator

import httpx
from aiohttp import web

from sitestage.api.contact import CONTACT_RELAY_PATH, create_contact_routes
from sitestage.api.pages import create_pages_routes
from sitestage.api.sitemap import create_sitemap_routes
from sitestage.app_keys import (
    config_key,
    http_client_key,
    live_reload_key,
    public_dir_key,
    resolver_key,
)
from sitestage.config import Config
from sitestage.core.content import FileContentStore
from sitestage.core.resolver import PageResolver
from sitestage.live import LiveReloadManager, create_live_reload_routes

logger = logging.getLogger(__name__)

CONTACT_TIMEOUT = 30


def create_app(
    config: Config,
    *,
    http_client: httpx.AsyncClient | None = None,
) -> web.Application:
    """Create aiohttp application.

    Args:
        config: Application configuration
        http_client: Client for outbound CMS requests (created per app if None)

    Returns:
        Configured aiohttp application
    """
    app = web.Application()

    accessor = FileContentStore(
        config.content.content_dir,
        config.content.default_language,
    )
    resolver = PageResolver(
        accessor,
        contact_action=CONTACT_RELAY_PATH,
        live_reload=config.live_reload.enabled,
    )

    app[config_key] = config
    app[resolver_key] = resolver
    app[public_dir_key] = config.site.public_dir

    if http_client is not None:
        app[http_client_key] = http_client
    else:
        app.cleanup_ctx.append(_http_client_ctx)

    app.router.add_routes(create_sitemap_routes())
    app.router.add_routes(create_contact_routes())

    if config.live_reload.enabled:
        manager = LiveReloadManager(
            config.content.content_dir,
            watch_patterns=config.live_reload.watch_patterns,
        )
        app[live_reload_key] = manager
        app.router.add_routes(create_live_reload_routes(manager))
        app.on_startup.append(_start_live_reload)
        app.on_cleanup.append(_stop_live_reload)

    # Catch-all page route must be last
    app.router.add_routes(create_pages_routes())

    return app


async def _http_client_ctx(app: web.Application) -> AsyncIterator[None]:
    async with httpx.AsyncClient(timeout=CONTACT_TIMEOUT) as client:
        app[http_client_key] = client
        yield


async def _start_live_reload(app: web.Application) -> None:
    await app[live_reload_key].start()


async def _stop_live_reload(app: web.Application) -> None:
    await app[live_reload_key].stop()


def run_server(config: Config) -> None:
    """Run the server.

    Args:
        config: Application configuration
    """
    app = create_app(config)
    logger.info(f"Serving {config.content.content_dir} on {config.server.host}:{config.server.port}")
    web.run_app(app, host=config.server.host, port=config.server.port, print=None)
