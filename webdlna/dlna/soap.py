from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from xml.parsers.expat import ExpatError
from xml.sax.saxutils import escape

from dotmap import DotMap

from ..errors import DecodeError
from ..utils import (
    DC_NS,
    DIDL_LITE_NS,
    DLNA_METADATA_NS,
    SOAP_ENVELOPE_NS,
    UPNP_CD_SERVICE_TYPE,
    UPNP_CONTROL_NS,
    UPNP_METADATA_NS,
    xml2dict,
    xml_text,
)
from .models.didl import BrowseResult, Container, Item

if TYPE_CHECKING:
    from .models.soap import EnvelopeDocument

logger = logging.getLogger(__name__)

CONTENT_TYPE = "text/xml; charset=utf-8"
SOAP_ACTION = f"{UPNP_CD_SERVICE_TYPE}#Browse"

PAYLOAD_FMT = (
    '<?xml version="1.0" encoding="utf-8"?><s:Envelope xmlns:s="http://schemas.xmlsoap.org/soap/envelope/" '
    's:encodingStyle="http://schemas.xmlsoap.org/soap/encoding/"><s:Body><u:{action} xmlns:u="{urn}">'
    "{fields}</u:{action}></s:Body></s:Envelope>"
)

ENVELOPE_NAMESPACES = {
    SOAP_ENVELOPE_NS: None,
    UPNP_CD_SERVICE_TYPE: None,
    UPNP_CONTROL_NS: None,
}

DIDL_NAMESPACES = {
    DIDL_LITE_NS: None,
    DC_NS: None,
    UPNP_METADATA_NS: None,
    DLNA_METADATA_NS: "dlna",
}


def browse_headers() -> dict[str, str]:
    return {
        "Content-Type": CONTENT_TYPE,
        "SOAPAction": SOAP_ACTION,
    }


def payload_from_template(action: str, data: dict[str, str]) -> str:
    fields = ""
    for tag, value in data.items():
        fields += "<{tag}>{value}</{tag}>".format(
            tag=tag, value=escape(str(value), {'"': "&quot;"})
        )
    return PAYLOAD_FMT.format(action=action, urn=UPNP_CD_SERVICE_TYPE, fields=fields)


def encode_browse(object_id: str) -> str:
    return payload_from_template(
        "Browse",
        {
            "ObjectID": object_id,
            "BrowseFlag": "BrowseDirectChildren",
            "Filter": "*",
            "StartingIndex": "0",
            "RequestedCount": "0",
            "SortCriteria": "",
        },
    )


def _parse_envelope(body: str | bytes) -> dict:
    try:
        info: EnvelopeDocument = xml2dict(
            body, namespaces=ENVELOPE_NAMESPACES, as_dotmap=False
        )
    except ExpatError as exc:
        raise DecodeError(f"parse SOAP envelope: {exc}", body) from exc
    envelope = info.get("Envelope")
    if not isinstance(envelope, dict) or not isinstance(envelope.get("Body"), dict):
        return {}
    return envelope["Body"]


def parse_fault(body: str | bytes) -> str | None:
    """``"<code> <description>"`` of a UPnP fault body, ``None`` otherwise."""
    try:
        info = xml2dict(body, namespaces=ENVELOPE_NAMESPACES)
    except ExpatError:
        return None

    soap_body = info.Envelope.Body
    fault = soap_body.Fault if isinstance(soap_body, DotMap) else None
    if not isinstance(fault, DotMap) or not fault:
        return None

    error = fault.detail.UPnPError if isinstance(fault.detail, DotMap) else None
    if isinstance(error, DotMap):
        code = xml_text(error.get("errorCode"))
        description = xml_text(error.get("errorDescription"))
        if code or description:
            return f"{code} {description}".strip()
    return xml_text(fault.get("faultstring"))


def decode_didl(didl: str) -> tuple[list[Container], list[Item]]:
    try:
        parsed = xml2dict(
            didl,
            namespaces=DIDL_NAMESPACES,
            force_list=("container", "item", "res"),
            as_dotmap=False,
        )
    except ExpatError as exc:
        raise DecodeError(f"parse DIDL-Lite: {exc}", didl) from exc

    if "DIDL-Lite" not in parsed:
        raise DecodeError("not a DIDL-Lite document", didl)
    root = parsed["DIDL-Lite"] or {}
    if not isinstance(root, dict):
        return [], []

    containers = [Container.from_dict(c) for c in _entries(root, "container")]
    items = [Item.from_dict(i) for i in _entries(root, "item")]
    return containers, items


def _entries(root: dict, tag: str) -> list[dict]:
    entries = []
    for entry in root.get(tag) or []:
        # <container/> or <item>text</item> carry no id or attributes
        if not isinstance(entry, dict):
            logger.warning("skip empty DIDL-Lite %s: %r", tag, entry)
            continue
        entries.append(entry)
    return entries


def decode_browse(body: str | bytes) -> BrowseResult:
    soap_body = _parse_envelope(body)

    if soap_body.get("Fault"):
        raise DecodeError(f"SOAP fault {parse_fault(body)}", body)

    response = soap_body.get("BrowseResponse")
    if not isinstance(response, dict):
        raise DecodeError("no BrowseResponse in SOAP body", body)

    didl = response.get("Result")
    if not didl:
        raise DecodeError("empty Result in BrowseResponse", body)

    containers, items = decode_didl(didl)
    logger.debug("decoded %d containers, %d items", len(containers), len(items))
    return BrowseResult(
        containers=containers,
        items=items,
        number_returned=xml_text(response.get("NumberReturned")),
        total_matches=xml_text(response.get("TotalMatches")),
        update_id=xml_text(response.get("UpdateID")),
    )
