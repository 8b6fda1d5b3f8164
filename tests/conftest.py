from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from xml.sax.saxutils import escape, quoteattr

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from webdlna.dlna.soap import ENVELOPE_NAMESPACES
from webdlna.utils import create_session, xml2dict


def pytest_configure(config):
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


ROOT_DESC = """<?xml version="1.0"?>
<root xmlns="urn:schemas-upnp-org:device-1-0">
  <specVersion><major>1</major><minor>0</minor></specVersion>
  <device>
    <deviceType>urn:schemas-upnp-org:device:MediaServer:1</deviceType>
    <friendlyName>nas: minidlna</friendlyName>
    <manufacturer>Justin Maggard</manufacturer>
    <modelName>Windows Media Connect compatible (MiniDLNA)</modelName>
    <UDN>uuid:4d696e69-444c-164e-9d41-b827eb5f1234</UDN>
    <dlna:X_DLNADOC xmlns:dlna="urn:schemas-dlna-org:device-1-0">DMS-1.50</dlna:X_DLNADOC>
    <presentationURL>/</presentationURL>
    <serviceList>
      <service>
        <serviceType>urn:schemas-upnp-org:service:ContentDirectory:1</serviceType>
        <serviceId>urn:upnp-org:serviceId:ContentDirectory</serviceId>
        <controlURL>/ctl/ContentDir</controlURL>
        <eventSubURL>/evt/ContentDir</eventSubURL>
        <SCPDURL>/ContentDir.xml</SCPDURL>
      </service>
      <service>
        <serviceType>urn:schemas-upnp-org:service:ConnectionManager:1</serviceType>
        <serviceId>urn:upnp-org:serviceId:ConnectionManager</serviceId>
        <controlURL>/ctl/ConnectionMgr</controlURL>
        <eventSubURL>/evt/ConnectionMgr</eventSubURL>
        <SCPDURL>/ConnectionMgr.xml</SCPDURL>
      </service>
    </serviceList>
  </device>
</root>
"""


def didl_container(object_id: str, title: str, parent_id: str = "0", child_count: str = "1") -> str:
    return (
        f'<container id={quoteattr(object_id)} parentID={quoteattr(parent_id)} '
        f'restricted="1" searchable="1" childCount={quoteattr(child_count)}>'
        f"<dc:title>{escape(title)}</dc:title>"
        "<upnp:class>object.container.storageFolder</upnp:class>"
        "<upnp:storageUsed>-1</upnp:storageUsed>"
        "</container>"
    )


def didl_item(
    object_id: str,
    title: str,
    parent_id: str,
    url: str = "",
    size: str = "3145728",
    duration: str = "0:03:25.000",
) -> str:
    url = url or f"http://127.0.0.1:8200/MediaItems/{object_id}.mp3"
    return (
        f'<item id={quoteattr(object_id)} parentID={quoteattr(parent_id)} restricted="1">'
        f"<dc:title>{escape(title)}</dc:title>"
        "<upnp:class>object.item.audioItem.musicTrack</upnp:class>"
        "<dc:creator>The Band</dc:creator>"
        "<dc:date>2001-01-01</dc:date>"
        "<upnp:albumArtURI dlna:profileID=\"JPEG_TN\">"
        "http://127.0.0.1:8200/AlbumArt/1-2.jpg?width=160</upnp:albumArtURI>"
        f'<res size="{size}" duration="{duration}" bitrate="16000" sampleFrequency="44100" '
        'nrAudioChannels="2" protocolInfo="http-get:*:audio/mpeg:DLNA.ORG_PN=MP3">'
        f"{escape(url)}</res>"
        "</item>"
    )


def didl(*entries: str) -> str:
    return (
        '<DIDL-Lite xmlns:dc="http://purl.org/dc/elements/1.1/" '
        'xmlns:upnp="urn:schemas-upnp-org:metadata-1-0/upnp/" '
        'xmlns="urn:schemas-upnp-org:metadata-1-0/DIDL-Lite/" '
        'xmlns:dlna="urn:schemas-dlna-org:metadata-1-0/">' + "".join(entries) + "</DIDL-Lite>"
    )


def browse_response(didl_doc: str, count: int = 0) -> str:
    return (
        '<?xml version="1.0" encoding="utf-8"?>\r\n'
        '<s:Envelope xmlns:s="http://schemas.xmlsoap.org/soap/envelope/" '
        's:encodingStyle="http://schemas.xmlsoap.org/soap/encoding/"><s:Body>'
        '<u:BrowseResponse xmlns:u="urn:schemas-upnp-org:service:ContentDirectory:1">'
        f"<Result>{escape(didl_doc)}</Result>"
        f"<NumberReturned>{count}</NumberReturned><TotalMatches>{count}</TotalMatches>"
        "<UpdateID>7</UpdateID>"
        "</u:BrowseResponse></s:Body></s:Envelope>"
    )


SOAP_FAULT = (
    '<?xml version="1.0" encoding="utf-8"?>\r\n'
    '<s:Envelope xmlns:s="http://schemas.xmlsoap.org/soap/envelope/" '
    's:encodingStyle="http://schemas.xmlsoap.org/soap/encoding/"><s:Body><s:Fault>'
    "<faultcode>s:Client</faultcode><faultstring>UPnPError</faultstring>"
    '<detail><UPnPError xmlns="urn:schemas-upnp-org:control-1-0">'
    "<errorCode>701</errorCode><errorDescription>No such object error</errorDescription>"
    "</UPnPError></detail></s:Fault></s:Body></s:Envelope>"
)


def library() -> dict[str, str]:
    """Music/Video library as MiniDLNA lays it out, keyed by object id."""
    return {
        "0": didl(didl_container("1", "Music"), didl_container("2", "Video")),
        "1": didl(
            didl_container("1$4", "All Music", "1"),
            didl_container("1$5", "Rock", "1"),
            didl_container("1$6", "Empty", "1", child_count="0"),
        ),
        "1$4": didl(didl_item("1$4$0", "Everything", "1$4")),
        "1$5": didl(
            didl_item("1$5$0", "First Song", "1$5"),
            didl_item("1$5$1", "Second Song", "1$5"),
        ),
        "1$6": didl(),
        "2": didl(didl_container("2$7", "Films", "2")),
        "2$7": didl(didl_item("2$7$0", "A Film", "2$7")),
    }


@dataclass
class FakeMediaServer:
    tree: dict[str, str] = field(default_factory=library)
    root_desc: str = ROOT_DESC
    failing: dict[str, int] = field(default_factory=dict)
    browsed: list[str] = field(default_factory=list)
    headers: list = field(default_factory=list)
    delay: float = 0
    base_url: str = ""

    async def get_root_desc(self, request: web.Request) -> web.Response:
        return web.Response(text=self.root_desc, content_type="text/xml")

    async def browse(self, request: web.Request) -> web.Response:
        self.headers.append(request.headers.copy())
        info = xml2dict(await request.text(), namespaces=ENVELOPE_NAMESPACES)
        object_id = info.Envelope.Body.Browse.ObjectID
        self.browsed.append(object_id)
        if self.delay:
            await asyncio.sleep(self.delay)

        if object_id in self.failing:
            return web.Response(status=self.failing[object_id], text=SOAP_FAULT, content_type="text/xml")
        if object_id not in self.tree:
            return web.Response(status=500, text=SOAP_FAULT, content_type="text/xml")
        return web.Response(text=browse_response(self.tree[object_id]), content_type="text/xml")

    def app(self) -> web.Application:
        app = web.Application()
        app.router.add_get("/rootDesc.xml", self.get_root_desc)
        app.router.add_post("/ctl/ContentDir", self.browse)
        return app


@pytest.fixture
def fake_server():
    return FakeMediaServer()


@pytest_asyncio.fixture
async def media_server(fake_server):
    async with TestServer(fake_server.app()) as server:
        fake_server.base_url = str(server.make_url("/")).rstrip("/")
        yield fake_server


@pytest_asyncio.fixture
async def session():
    http = create_session(timeout=5)
    yield http
    await http.close()
