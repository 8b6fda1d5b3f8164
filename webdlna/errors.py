from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .dlna.models.didl import Folder


class WebDlnaError(Exception):
    pass


class TransportError(WebDlnaError):
    """Network, timeout or HTTP status failure on an outbound call."""


class ParseError(WebDlnaError):
    """Malformed or unexpected XML. ``raw`` keeps the offending text."""

    def __init__(self, message: str, raw: str | bytes = ""):
        super().__init__(message)
        self.raw = raw

    def __str__(self):
        message = super().__str__()
        if not self.raw:
            return message
        return f"{message}: {self.raw!r}"


class DecodeError(ParseError):
    pass


class NotFoundError(WebDlnaError):
    pass


class CancellationError(WebDlnaError):
    def __init__(self, message: str = "walk cancelled", folders: list[Folder] | None = None):
        super().__init__(message)
        self.folders = folders or []
