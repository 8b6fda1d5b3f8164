from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

import aiohttp

from ..errors import TransportError
from . import soap
from .models.didl import BrowseResult

logger = logging.getLogger(__name__)


@dataclass
class ContentDirectory:
    """Browse client bound to one ContentDirectory control URL."""

    session: aiohttp.ClientSession
    control_url: str

    async def browse(self, object_id: str) -> BrowseResult:
        payload = soap.encode_browse(object_id)
        try:
            async with self.session.post(
                self.control_url,
                data=payload.encode(),
                headers=soap.browse_headers(),
            ) as response:
                body = await response.read()
                if not response.ok:
                    reason = soap.parse_fault(body) or response.reason
                    raise TransportError(
                        f"Browse {object_id!r}: HTTP {response.status} {reason}"
                    )
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise TransportError(
                f"Browse {object_id!r} at {self.control_url}: {exc.__class__.__name__} {exc}".rstrip()
            ) from exc

        result = soap.decode_browse(body)
        logger.debug(
            "Browse %r: %d containers, %d items",
            object_id,
            len(result.containers),
            len(result.items),
        )
        return result
