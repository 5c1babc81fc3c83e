"""Application keys for type-safe app configuration access."""

from pathlib import Path

import httpx
from aiohttp import web

from sitestage.config import Config
from sitestage.core.resolver import PageResolver
from sitestage.live import LiveReloadManager

config_key = web.AppKey("config", Config)
resolver_key = web.AppKey("resolver", PageResolver)
http_client_key = web.AppKey("http_client", httpx.AsyncClient)
live_reload_key = web.AppKey("live_reload", LiveReloadManager)
public_dir_key = web.AppKey("public_dir", Path)
