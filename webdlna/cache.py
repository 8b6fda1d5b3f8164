from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Awaitable, Callable

from .dlna.models.didl import Folder
from .errors import WebDlnaError

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = timedelta(minutes=5)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Snapshot:
    folders: tuple[Folder, ...] = ()
    fill_time: datetime | None = None

    def age(self, now: datetime) -> timedelta:
        if self.fill_time is None:
            return timedelta(0)
        return max(now - self.fill_time, timedelta(0))


@dataclass
class SnapshotCache:
    """Last folder listing plus its fill time, refilled once it is ``interval`` old.

    One lock covers the whole check-and-refill sequence, so requests arriving
    during a refresh wait for it and are then served from the new snapshot.
    A failed refresh leaves the previous snapshot untouched.
    """

    refresh: Callable[[], Awaitable[list[Folder]]]
    interval: timedelta = DEFAULT_INTERVAL
    serve_stale_on_error: bool = False

    _snapshot: Snapshot = field(default_factory=Snapshot, init=False)
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock, init=False)

    @property
    def snapshot(self) -> Snapshot:
        return self._snapshot

    def is_fresh(self, now: datetime) -> bool:
        fill_time = self._snapshot.fill_time
        return fill_time is not None and fill_time + self.interval > now

    async def get_or_refresh(self, now: datetime | None = None) -> Snapshot:
        if now is None:
            now = utcnow()

        async with self._lock:
            if self.is_fresh(now):
                logger.info("serving from cache of %s", self._snapshot.fill_time)
                return self._snapshot

            started = time.monotonic()
            try:
                folders = await self.refresh()
            except WebDlnaError as exc:
                if self.serve_stale_on_error and self._snapshot.fill_time is not None:
                    logger.warning(
                        "refresh failed, serving stale data of %s: %s",
                        self._snapshot.fill_time,
                        exc,
                    )
                    return self._snapshot
                logger.error("refresh failed: %s", exc)
                raise

            self._snapshot = Snapshot(folders=tuple(folders), fill_time=now)
            logger.info(
                "fresh data retrieved in %.3fs (%d folders)",
                time.monotonic() - started,
                len(folders),
            )
            return self._snapshot
