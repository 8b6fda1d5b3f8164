from __future__ import annotations

from typing import TypedDict


class BrowseResponse(TypedDict):
    Result: str | None
    NumberReturned: str
    TotalMatches: str
    UpdateID: str


class UPnPError(TypedDict):
    errorCode: str
    errorDescription: str


class FaultDetail(TypedDict):
    UPnPError: UPnPError


class Fault(TypedDict):
    faultcode: str
    faultstring: str
    detail: FaultDetail


class Body(TypedDict, total=False):
    BrowseResponse: BrowseResponse
    Fault: Fault


class Envelope(TypedDict):
    Body: Body


class EnvelopeDocument(TypedDict):
    Envelope: Envelope
