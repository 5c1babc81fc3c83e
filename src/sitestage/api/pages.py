"""Page endpoints.

Renders full HTML documents for the home page and catch-all slugs.
Missing content falls back to the not-found page with status 404; any
other site error is logged and answered with 500.
"""

import logging
from collections.abc import Callable
from hashlib import md5
from pathlib import Path

from aiohttp import web

from sitestage.app_keys import public_dir_key, resolver_key
from sitestage.core.errors import ContentNotFoundError, SiteError
from sitestage.core.resolver import PageResolver, RenderedPage

logger = logging.getLogger(__name__)


def create_pages_routes() -> list[web.RouteDef]:
    return [
        web.get("/", get_home),
        web.get("/{slug:.+}", get_page),
    ]


async def get_home(request: web.Request) -> web.Response:
    resolver = request.app[resolver_key]
    return _page_response(request, resolver.resolve_home)


async def get_page(request: web.Request) -> web.StreamResponse:
    slug = request.match_info["slug"].strip("/")

    public_file = _find_public_file(request.app[public_dir_key], slug)
    if public_file is not None:
        return web.FileResponse(public_file)

    resolver = request.app[resolver_key]
    if not slug:
        return _page_response(request, resolver.resolve_home)
    return _page_response(request, lambda: resolver.resolve(slug))


def _page_response(request: web.Request, render: Callable[[], RenderedPage]) -> web.Response:
    resolver = request.app[resolver_key]
    status = 200

    try:
        page = render()
    except ContentNotFoundError as e:
        logger.info(str(e))
        page = _render_not_found(resolver)
        status = 404
    except SiteError as e:
        logger.error(f"Failed to render {request.path}: {e}")
        raise web.HTTPInternalServerError(text=str(e)) from e

    etag = _compute_etag(page.html)
    if status == 200 and request.headers.get("If-None-Match") == etag:
        return web.Response(status=304)

    return web.Response(
        text=page.html,
        status=status,
        content_type="text/html",
        headers={
            "ETag": etag,
            "Cache-Control": "no-cache",
        },
    )


def _render_not_found(resolver: PageResolver) -> RenderedPage:
    try:
        return resolver.resolve_not_found()
    except SiteError as e:
        logger.error(f"Failed to render not-found page: {e}")
        raise web.HTTPInternalServerError(text=str(e)) from e


def _find_public_file(public_dir: Path, slug: str) -> Path | None:
    if not slug or not public_dir.is_dir():
        return None

    root = public_dir.resolve()
    candidate = (root / slug).resolve()
    if not candidate.is_relative_to(root) or not candidate.is_file():
        return None
    return candidate


def _compute_etag(content: str) -> str:
    content_hash = md5(content.encode("utf-8"), usedforsecurity=False).hexdigest()[:16]
    return f'"{content_hash}"'
