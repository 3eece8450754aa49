from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import httpx
import pytest

from imagefy import AsyncImagefyClient, ImagefyClient

PAYLOAD = b"\x89PNG\r\n\x1a\nfake-image-bytes"


class SpyTransport:
    """Records every request and answers with a canned response."""

    def __init__(self, status: int = 200, content: bytes = PAYLOAD, content_type: str = "image/png"):
        self.status = status
        self.content = content
        self.content_type = content_type
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(
            self.status, content=self.content, headers={"Content-Type": self.content_type}
        )

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> Any:
        return json.loads(self.last.content)


@pytest.fixture
def spy() -> SpyTransport:
    return SpyTransport()


@pytest.fixture
def client(spy: SpyTransport) -> ImagefyClient:
    return ImagefyClient("test-key", transport=spy.transport)


@pytest.fixture
def async_client(spy: SpyTransport) -> AsyncImagefyClient:
    return AsyncImagefyClient("test-key", transport=spy.transport)


@pytest.fixture
def image_file(tmp_path: Path) -> Path:
    path = tmp_path / "photo.png"
    path.write_bytes(PAYLOAD)
    return path


@pytest.fixture
def mark_file(tmp_path: Path) -> Path:
    path = tmp_path / "logo.png"
    path.write_bytes(b"\x89PNG logo")
    return path
