from __future__ import annotations

import asyncio
import logging
from typing import AsyncIterator, Awaitable, Callable

import aiohttp
from aiohttp import web

from .cache import SnapshotCache, utcnow
from .dlna.models.didl import Folder
from .dlna.walker import get_folders
from .errors import WebDlnaError
from .render import render_page
from .settings import Settings, settings
from .utils import create_session

logger = logging.getLogger(__name__)

CONFIG_KEY = web.AppKey("config", Settings)
SESSION_KEY = web.AppKey("session", aiohttp.ClientSession)
CACHE_KEY = web.AppKey("cache", SnapshotCache)


async def index(request: web.Request) -> web.Response:
    config = request.app[CONFIG_KEY]
    cache = request.app[CACHE_KEY]

    now = utcnow()
    try:
        snapshot = await cache.get_or_refresh(now)
    except WebDlnaError as exc:
        logger.error("GET %s: %s", request.path, exc)
        return web.Response(status=502, text=str(exc))

    return web.Response(
        text=render_page(config.minidlna_url, snapshot.folders),
        content_type="text/html",
        charset="utf-8",
        headers={
            "Cache-Control": f"max-age={int(cache.interval.total_seconds())}",
            "Age": str(int(snapshot.age(now).total_seconds())),
        },
    )


async def not_found(request: web.Request) -> web.Response:
    return web.Response(status=404, text=f"{request.path} Not Found")


def create_app(
    config: Settings = settings,
    refresh: Callable[[], Awaitable[list[Folder]]] | None = None,
) -> web.Application:
    """Application serving the folder listing of ``config.minidlna_url``.

    ``refresh`` replaces the upstream walk, mostly for tests. The upstream
    walk is cancelled once it runs longer than ``config.walk_timeout``.
    """
    app = web.Application()
    app[CONFIG_KEY] = config

    async def client_session(app: web.Application) -> AsyncIterator[None]:
        app[SESSION_KEY] = create_session(timeout=config.http_timeout)
        yield
        await app[SESSION_KEY].close()

    app.cleanup_ctx.append(client_session)

    if refresh is None:

        async def walk_upstream() -> list[Folder]:
            cancel = asyncio.Event()
            deadline = asyncio.get_running_loop().call_later(config.walk_timeout, cancel.set)
            try:
                return await get_folders(
                    app[SESSION_KEY],
                    config.minidlna_url,
                    skip_prefixes=config.skip_title_prefixes,
                    cancel=cancel,
                )
            finally:
                deadline.cancel()

        refresh = walk_upstream

    app[CACHE_KEY] = SnapshotCache(
        refresh,
        interval=config.cache_timedelta,
        serve_stale_on_error=config.serve_stale_on_error,
    )

    app.router.add_get("/", index)
    app.router.add_route("*", "/{tail:.+}", not_found)
    return app
