from __future__ import annotations

from functools import lru_cache
from typing import Iterable

from jinja2 import Environment, PackageLoader, select_autoescape

from .dlna.models.didl import Folder, Resource
from .utils import format_size, format_timedelta, strip_size


def filesize(res: Resource) -> str:
    size = res.parsed_size
    return format_size(size) if size is not None else res.size


def duration(res: Resource) -> str:
    td = res.parsed_duration
    return format_timedelta(td) if td is not None else res.duration


@lru_cache(maxsize=None)
def get_environment() -> Environment:
    env = Environment(
        loader=PackageLoader("webdlna", "templates"),
        autoescape=select_autoescape(["html", "xml"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["strip_size"] = strip_size
    env.filters["filesize"] = filesize
    env.filters["duration"] = duration
    return env


def render_page(base_url: str, folders: Iterable[Folder]) -> str:
    template = get_environment().get_template("index.html")
    return template.render(base_url=base_url, folders=list(folders))
