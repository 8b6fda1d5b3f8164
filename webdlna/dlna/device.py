from __future__ import annotations

import asyncio
import logging
from dataclasses import InitVar, dataclass, field
from typing import TYPE_CHECKING
from xml.parsers.expat import ExpatError

import aiohttp

from ..errors import NotFoundError, ParseError, TransportError
from ..utils import (
    DLNA_DEVICE_NS,
    UPNP_CD_SERVICE_TYPE,
    UPNP_DEVICE_NS,
    as_list,
    join_url,
    xml2dict,
    xml_text,
)

if TYPE_CHECKING:
    from .models.root import DiscoveredDevice, RootDocument, Service

logger = logging.getLogger(__name__)

ROOT_DESC_PATH = "/rootDesc.xml"

DEVICE_NAMESPACES = {
    UPNP_DEVICE_NS: None,
    DLNA_DEVICE_NS: "dlna",
}


@dataclass
class DeviceService:
    service_dict: InitVar[Service]

    service_type: str = field(init=False)
    service_id: str = field(init=False)
    control_url: str = field(init=False)
    event_url: str = field(init=False)
    spec_url: str = field(init=False)

    def __post_init__(self, service_dict: Service):
        self.service_type = xml_text(service_dict.get("serviceType"))
        self.service_id = xml_text(service_dict.get("serviceId"))
        self.control_url = xml_text(service_dict.get("controlURL"))
        self.event_url = xml_text(service_dict.get("eventSubURL"))
        self.spec_url = xml_text(service_dict.get("SCPDURL"))


@dataclass
class DeviceDescriptor:
    base_url: str
    name: str = ""
    manufacturer: str = ""
    model: str = ""
    udn: str = ""
    services: list[DeviceService] = field(default_factory=list)

    @classmethod
    def from_xml(cls, base_url: str, xml: str | bytes) -> DeviceDescriptor:
        try:
            info: RootDocument = xml2dict(
                xml,
                namespaces=DEVICE_NAMESPACES,
                force_list=("service", "device"),
                as_dotmap=False,
            )
        except ExpatError as exc:
            raise ParseError(f"parse {base_url}{ROOT_DESC_PATH}: {exc}", xml) from exc

        root = info.get("root")
        devices = as_list(root.get("device")) if isinstance(root, dict) else []
        if not devices or not isinstance(devices[0], dict):
            raise ParseError(f"no device in {base_url}{ROOT_DESC_PATH}", xml)

        device: DiscoveredDevice = devices[0]
        descriptor = cls(
            base_url=base_url,
            name=xml_text(device.get("friendlyName")),
            manufacturer=xml_text(device.get("manufacturer")),
            model=xml_text(device.get("modelName")),
            udn=xml_text(device.get("UDN")).removeprefix("uuid:"),
        )
        descriptor._add_services(device)
        return descriptor

    def _add_services(self, device: DiscoveredDevice):
        service_list = device.get("serviceList") or {}
        for service in service_list.get("service") or []:
            if isinstance(service, dict):
                self.services.append(DeviceService(service))

        # embedded devices advertise their own services
        device_list = device.get("deviceList") or {}
        for embedded in device_list.get("device") or []:
            if isinstance(embedded, dict):
                self._add_services(embedded)

    def content_directory_path(self) -> str:
        for service in self.services:
            if service.service_type == UPNP_CD_SERVICE_TYPE:
                return service.control_url
        return ""

    def __str__(self):
        return self.name or self.base_url


async def resolve(session: aiohttp.ClientSession, base_url: str) -> DeviceDescriptor:
    url = join_url(base_url, ROOT_DESC_PATH)
    logger.debug("get device description %s", url)
    try:
        async with session.get(url) as response:
            response.raise_for_status()
            xml = await response.read()
    except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
        raise TransportError(
            f"GET {url}: {exc.__class__.__name__} {exc}".rstrip()
        ) from exc

    return DeviceDescriptor.from_xml(base_url, xml)


async def resolve_control_url(session: aiohttp.ClientSession, base_url: str) -> str:
    descriptor = await resolve(session, base_url)
    path = descriptor.content_directory_path()
    if not path:
        logger.error("DLNA device %s has no ContentDirectory service", descriptor)
        raise NotFoundError(
            f"no {UPNP_CD_SERVICE_TYPE} service advertised by {base_url}"
        )
    logger.debug("DLNA device %s ContentDirectory at %s", descriptor, path)
    return join_url(base_url, path)
