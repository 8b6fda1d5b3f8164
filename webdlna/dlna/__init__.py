from .content_directory import ContentDirectory
from .device import DeviceDescriptor, resolve, resolve_control_url
from .models.didl import BrowseResult, Container, Folder, Item, Resource
from .walker import get_folders, walk

__all__ = [
    "BrowseResult",
    "Container",
    "ContentDirectory",
    "DeviceDescriptor",
    "Folder",
    "Item",
    "Resource",
    "get_folders",
    "resolve",
    "resolve_control_url",
    "walk",
]
