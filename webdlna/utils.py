from __future__ import annotations

import logging
import re
from datetime import timedelta
from typing import overload
from urllib.parse import urljoin

import aiohttp
import xmltodict
from dotmap import DotMap

from . import __version__

logger = logging.getLogger(__name__)

UPNP_CD_SERVICE_TYPE = "urn:schemas-upnp-org:service:ContentDirectory:1"

USER_AGENT = f"webdlna/{__version__} UPnP/1.0"

SOAP_ENVELOPE_NS = "http://schemas.xmlsoap.org/soap/envelope/"
UPNP_CONTROL_NS = "urn:schemas-upnp-org:control-1-0"
UPNP_DEVICE_NS = "urn:schemas-upnp-org:device-1-0"
DLNA_DEVICE_NS = "urn:schemas-dlna-org:device-1-0"
DIDL_LITE_NS = "urn:schemas-upnp-org:metadata-1-0/DIDL-Lite/"
DC_NS = "http://purl.org/dc/elements/1.1/"
UPNP_METADATA_NS = "urn:schemas-upnp-org:metadata-1-0/upnp/"
DLNA_METADATA_NS = "urn:schemas-dlna-org:metadata-1-0/"

# H+:MM:SS[.F+] or H+:MM:SS[.F0/F1]
DURATION_RE = re.compile(
    r"^\s*(?P<hours>\d+):(?P<minutes>[0-5]?\d):(?P<seconds>[0-5]?\d)"
    r"(?:\.(?P<fraction>\d+)(?:/(?P<denominator>\d+))?)?\s*$"
)


def create_session(timeout: float = 10) -> aiohttp.ClientSession:
    return aiohttp.ClientSession(
        timeout=aiohttp.ClientTimeout(total=timeout),
        headers={"User-Agent": USER_AGENT},
    )


@overload
def xml2dict(
    xml: str | bytes,
    namespaces: dict[str, str | None] | None = ...,
    force_list: tuple[str, ...] = ...,
    as_dotmap: bool = True,
) -> DotMap:
    ...


@overload
def xml2dict(
    xml: str | bytes,
    namespaces: dict[str, str | None] | None = ...,
    force_list: tuple[str, ...] = ...,
    as_dotmap: bool = False,
) -> dict:
    ...


def xml2dict(
    xml: str | bytes,
    namespaces: dict[str, str | None] | None = None,
    force_list: tuple[str, ...] = (),
    as_dotmap: bool = True,
) -> DotMap | dict:
    """Parse ``xml`` with namespace URIs folded to the given prefixes.

    A namespace mapped to ``None`` disappears from element names, so
    ``<dc:title>`` ends up under ``title``. Bytes are decoded by the parser
    per the XML declaration. Raises ``ExpatError`` on malformed input or
    invalid encoding.
    """
    parsed = xmltodict.parse(
        xml,
        process_namespaces=True,
        namespaces=namespaces or {},
        force_list=force_list or None,
    )
    if as_dotmap:
        return DotMap(parsed)
    else:
        return parsed


def xml_text(value) -> str:
    """Text content of an xmltodict node, whatever shape it came out as."""
    if value is None:
        return ""
    if isinstance(value, list):
        return xml_text(value[0]) if value else ""
    if isinstance(value, dict):
        return xml_text(value.get("#text"))
    return str(value).strip()


def as_list(value) -> list:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def join_url(base_url: str, path: str) -> str:
    """``{base_url}{path}``, keeping absolute ``path`` URLs as they are."""
    if re.match(r"^[a-zA-Z][a-zA-Z0-9+.-]*://", path):
        return path
    if path.startswith("/"):
        return base_url.rstrip("/") + path
    return urljoin(base_url.rstrip("/") + "/", path)


def strip_size(url: str) -> str:
    before, sep, _ = url.partition("?width=")
    return before if sep else url


def parse_int(s: str) -> int | None:
    try:
        return int(s.strip())
    except (AttributeError, ValueError):
        return None


def parse_timedelta(s: str) -> timedelta | None:
    match = DURATION_RE.match(s or "")
    if match is None:
        return None

    seconds = float(match["seconds"])
    if fraction := match["fraction"]:
        if denominator := match["denominator"]:
            if int(denominator) == 0:
                return None
            seconds += int(fraction) / int(denominator)
        else:
            seconds += float(f"0.{fraction}")
    return timedelta(
        hours=int(match["hours"]), minutes=int(match["minutes"]), seconds=seconds
    )


def format_timedelta(td: timedelta) -> str:
    total = int(td.total_seconds())
    hours, rest = divmod(total, 3600)
    minutes, seconds = divmod(rest, 60)
    return f"{hours}:{minutes:02d}:{seconds:02d}"


def format_size(size: int) -> str:
    value = float(size)
    for unit in ("B", "KiB", "MiB", "GiB"):
        if value < 1024:
            return f"{value:.0f} {unit}" if unit == "B" else f"{value:.1f} {unit}"
        value /= 1024
    return f"{value:.1f} TiB"
