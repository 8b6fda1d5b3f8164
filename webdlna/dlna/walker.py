from __future__ import annotations

import asyncio
import logging
from typing import Iterable

import aiohttp

from ..errors import CancellationError, WebDlnaError
from .content_directory import ContentDirectory
from .device import resolve_control_url
from .models.didl import Folder

logger = logging.getLogger(__name__)

ROOT_OBJECT_ID = "0"

# MiniDLNA injects "All Music", "All Video", ... aggregates next to the real folders
DEFAULT_SKIP_PREFIXES = ("All ",)


def _check_cancelled(cancel: asyncio.Event | None, folders: list[Folder]):
    if cancel is not None and cancel.is_set():
        logger.info("walk cancelled after %d folders", len(folders))
        raise CancellationError(folders=folders)


async def walk(
    directory: ContentDirectory,
    *,
    skip_prefixes: Iterable[str] = DEFAULT_SKIP_PREFIXES,
    cancel: asyncio.Event | None = None,
) -> list[Folder]:
    """Browse root -> top containers -> folders -> items.

    Only the root Browse is fatal. A failing container or folder is logged
    and skipped. Folders without items, or titled with one of
    ``skip_prefixes``, are left out. Browse calls are issued one at a time.

    When ``cancel`` is set the walk stops before its next Browse call and
    raises ``CancellationError`` holding the folders collected so far.
    """
    skip_prefixes = tuple(skip_prefixes)
    folders: list[Folder] = []

    _check_cancelled(cancel, folders)
    root = await directory.browse(ROOT_OBJECT_ID)

    for container in root.containers:
        _check_cancelled(cancel, folders)
        try:
            listing = await directory.browse(container.id)
        except WebDlnaError as exc:
            logger.warning(
                "browse container %r (%s) failed: %s", container.title, container.id, exc
            )
            continue

        for folder in listing.containers:
            if skip_prefixes and folder.title.startswith(skip_prefixes):
                logger.debug("skip folder %r (%s)", folder.title, folder.id)
                continue

            _check_cancelled(cancel, folders)
            try:
                contents = await directory.browse(folder.id)
            except WebDlnaError as exc:
                logger.warning(
                    "browse folder %r (%s) failed: %s", folder.title, folder.id, exc
                )
                continue

            if not contents.items:
                continue
            folders.append(Folder(container=folder, items=contents.items))

    return folders


async def get_folders(
    session: aiohttp.ClientSession,
    base_url: str,
    *,
    skip_prefixes: Iterable[str] = DEFAULT_SKIP_PREFIXES,
    cancel: asyncio.Event | None = None,
) -> list[Folder]:
    control_url = await resolve_control_url(session, base_url)
    return await walk(
        ContentDirectory(session, control_url),
        skip_prefixes=skip_prefixes,
        cancel=cancel,
    )
