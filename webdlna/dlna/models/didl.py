from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta

from ...utils import as_list, parse_int, parse_timedelta, xml_text


@dataclass(frozen=True)
class Resource:
    """A ``<res>`` element. Every attribute is kept as the server sent it."""

    url: str = ""
    size: str = ""
    duration: str = ""
    bitrate: str = ""
    sample_frequency: str = ""
    nr_audio_channels: str = ""
    resolution: str = ""
    protocol_info: str = ""

    @classmethod
    def from_dict(cls, res: dict | str | None) -> Resource:
        if not isinstance(res, dict):
            res = {"#text": res}
        return cls(
            url=xml_text(res),
            size=xml_text(res.get("@size")),
            duration=xml_text(res.get("@duration")),
            bitrate=xml_text(res.get("@bitrate")),
            sample_frequency=xml_text(res.get("@sampleFrequency")),
            nr_audio_channels=xml_text(res.get("@nrAudioChannels")),
            resolution=xml_text(res.get("@resolution")),
            protocol_info=xml_text(res.get("@protocolInfo")),
        )

    @property
    def parsed_size(self) -> int | None:
        return parse_int(self.size)

    @property
    def parsed_duration(self) -> timedelta | None:
        return parse_timedelta(self.duration)

    @property
    def parsed_bitrate(self) -> int | None:
        return parse_int(self.bitrate)

    @property
    def parsed_resolution(self) -> tuple[int, int] | None:
        width, sep, height = self.resolution.partition("x")
        if not sep:
            return None
        w, h = parse_int(width), parse_int(height)
        if w is None or h is None:
            return None
        return w, h

    @property
    def mimetype(self) -> str:
        # protocolInfo is "<protocol>:<network>:<contentFormat>:<additionalInfo>"
        parts = self.protocol_info.split(":")
        return parts[2] if len(parts) >= 3 else ""


@dataclass(frozen=True)
class Container:
    id: str
    parent_id: str = ""
    title: str = ""
    upnp_class: str = ""
    child_count: str = ""
    storage_used: str = ""

    @classmethod
    def from_dict(cls, node: dict) -> Container:
        return cls(
            id=xml_text(node.get("@id")),
            parent_id=xml_text(node.get("@parentID")),
            title=xml_text(node.get("title")),
            upnp_class=xml_text(node.get("class")),
            child_count=xml_text(node.get("@childCount")),
            storage_used=xml_text(node.get("storageUsed")),
        )

    @property
    def parsed_child_count(self) -> int | None:
        return parse_int(self.child_count)

    @property
    def parsed_storage_used(self) -> int | None:
        return parse_int(self.storage_used)


@dataclass(frozen=True)
class Item:
    id: str
    parent_id: str = ""
    title: str = ""
    upnp_class: str = ""
    creator: str = ""
    date: str = ""
    album_art_uri: str = ""
    res: Resource = field(default_factory=Resource)

    @classmethod
    def from_dict(cls, node: dict) -> Item:
        resources = as_list(node.get("res"))
        return cls(
            id=xml_text(node.get("@id")),
            parent_id=xml_text(node.get("@parentID")),
            title=xml_text(node.get("title")),
            upnp_class=xml_text(node.get("class")),
            creator=xml_text(node.get("creator")) or xml_text(node.get("artist")),
            date=xml_text(node.get("date")),
            album_art_uri=xml_text(node.get("albumArtURI")),
            res=Resource.from_dict(resources[0]) if resources else Resource(),
        )


@dataclass(frozen=True)
class BrowseResult:
    containers: list[Container] = field(default_factory=list)
    items: list[Item] = field(default_factory=list)
    number_returned: str = ""
    total_matches: str = ""
    update_id: str = ""


@dataclass(frozen=True)
class Folder:
    container: Container
    items: list[Item]

    @property
    def title(self) -> str:
        return self.container.title
