from __future__ import annotations

import os
from pathlib import Path
from typing import Literal, Optional
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .errors import ConfigError

BASE_URL = "https://imagefy.mazzcorp.com.br/api/v1"
CONFIG_FILENAME = "imagefy.toml"


class ProxyConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)
    host: str = Field(min_length=1)
    port: int = Field(ge=1, le=65535)
    username: Optional[str] = None
    password: Optional[str] = Field(default=None, repr=False)
    scheme: Literal["http", "https", "socks5"] = "http"

    @property
    def url(self) -> str:
        auth = ""
        if self.username:
            auth = quote(self.username, safe="")
            if self.password:
                auth += ":" + quote(self.password, safe="")
            auth += "@"
        return f"{self.scheme}://{auth}{self.host}:{self.port}"


class ImagefyConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")
    api_key_env: str = "IMAGEFY_API_KEY"
    api_key: Optional[str] = None
    base_url: str = BASE_URL
    proxy: Optional[ProxyConfig] = None

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("base_url must start with http:// or https://")
        return v.rstrip("/")

    def resolve_api_key(self) -> str:
        key = self.api_key or os.environ.get(self.api_key_env)
        if not key:
            raise ConfigError(
                f"No API key configured. Set {self.api_key_env} "
                f"or add api_key to {CONFIG_FILENAME}"
            )
        return key


def load_config(config_path: Path) -> ImagefyConfig:
    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}", path=config_path)

    try:
        import tomllib
    except ImportError:
        import tomli as tomllib  # type: ignore

    try:
        data = tomllib.loads(config_path.read_text(encoding="utf-8"))
    except Exception as e:
        raise ConfigError(f"Failed to parse TOML: {e}", path=config_path) from e

    try:
        return ImagefyConfig.model_validate(data)
    except Exception as e:
        raise ConfigError(f"Invalid configuration: {e}", path=config_path) from e


def find_config(start_dir: Optional[Path] = None) -> Optional[Path]:
    if start_dir is None:
        start_dir = Path.cwd()

    current = start_dir.resolve()
    while current != current.parent:
        candidate = current / CONFIG_FILENAME
        if candidate.exists():
            return candidate
        current = current.parent
    return None


def resolve_config(config_path: Optional[Path] = None) -> ImagefyConfig:
    """Load an explicit config file, the nearest ``imagefy.toml``, or defaults."""
    if config_path is None:
        config_path = find_config()
        if config_path is None:
            return ImagefyConfig()
    return load_config(config_path)
