from __future__ import annotations

from datetime import timedelta

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="WEBDLNA_")

    minidlna_url: str = "http://127.0.0.1:8200"
    listen: str = "127.0.0.1:8080"
    cache_interval: float = Field(default=300, gt=0)
    http_timeout: float = Field(default=10, gt=0)
    walk_timeout: float = Field(default=120, gt=0)
    skip_title_prefixes: list[str] = Field(default_factory=lambda: ["All "])
    serve_stale_on_error: bool = False
    log_level: str = "INFO"

    @field_validator("minidlna_url")
    @classmethod
    def _strip_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()

    @property
    def cache_timedelta(self) -> timedelta:
        return timedelta(seconds=self.cache_interval)

    @property
    def listen_address(self) -> tuple[str, int]:
        return split_listen(self.listen)


def split_listen(listen: str) -> tuple[str, int]:
    """``"host:port"`` or ``":port"`` to ``(host, port)``."""
    host, sep, port = listen.rpartition(":")
    if not sep:
        host, port = "", listen
    try:
        port_number = int(port)
    except ValueError:
        raise ValueError(f"invalid listen address {listen!r}") from None
    if not 0 <= port_number <= 65535:
        raise ValueError(f"invalid port in listen address {listen!r}")
    return host.strip("[]") or "0.0.0.0", port_number


settings = Settings()
