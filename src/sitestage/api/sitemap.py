"""Sitemap endpoint."""

from aiohttp import web

from sitestage.app_keys import resolver_key
from sitestage.core.errors import SiteError
from sitestage.core.metadata import load_site_metadata
from sitestage.core.sitemap import generate_sitemap, render_sitemap_xml


def create_sitemap_routes() -> list[web.RouteDef]:
    return [
        web.get("/sitemap.xml", get_sitemap),
    ]


async def get_sitemap(request: web.Request) -> web.Response:
    resolver = request.app[resolver_key]

    try:
        site_metadata = load_site_metadata(resolver.accessor, resolver.locale)
    except SiteError as e:
        raise web.HTTPInternalServerError(text=str(e)) from e

    entries = generate_sitemap(
        resolver.accessor,
        resolver.locale,
        str(site_metadata.get("baseUrl", "")),
    )
    return web.Response(
        text=render_sitemap_xml(entries),
        content_type="application/xml",
    )
