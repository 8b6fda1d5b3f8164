from __future__ import annotations

from typing import TypedDict


class Icon(TypedDict):
    mimetype: str
    width: str
    height: str
    depth: str
    url: str


class IconList(TypedDict):
    icon: list[Icon]


class Service(TypedDict):
    serviceType: str
    serviceId: str
    SCPDURL: str
    controlURL: str
    eventSubURL: str


class ServiceList(TypedDict):
    service: list[Service]


class DeviceList(TypedDict):
    device: list[DiscoveredDevice]


class DiscoveredDevice(TypedDict):
    deviceType: str
    friendlyName: str
    manufacturer: str
    manufacturerURL: str
    modelDescription: str
    modelName: str
    modelNumber: str
    modelURL: str
    serialNumber: str
    UDN: str
    UPC: str | None
    iconList: IconList | None
    serviceList: ServiceList | None
    deviceList: DeviceList | None
    presentationURL: str | None
    dlna_X_DLNADOC: str | None


class Root(TypedDict):
    specVersion: dict

    device: DiscoveredDevice


class RootDocument(TypedDict):
    root: Root
