from __future__ import annotations

import logging
import mimetypes
from contextlib import ExitStack, contextmanager
from typing import Any, Iterator, Optional, Union

import httpx

from .config import ProxyConfig
from .errors import RemoteError
from .result import ImagefyResult
from .types import OperationRequest

logger = logging.getLogger(__name__)

Transport = Union[httpx.BaseTransport, httpx.AsyncBaseTransport]


def endpoint_url(base_url: str, endpoint: str) -> str:
    return f"{base_url.rstrip('/')}/{endpoint}"


def build_headers(api_key: str, request: OperationRequest) -> dict[str, str]:
    headers = {"X-Api-Key": api_key}
    if request.mode == "json":
        headers["Content-Type"] = "application/json"
    return headers


def client_options(proxy: Optional[ProxyConfig], transport: Optional[Transport]) -> dict[str, Any]:
    # An injected transport replaces the network layer, proxy included.
    if transport is not None:
        return {"transport": transport}
    if proxy is not None:
        return {"proxy": proxy.url}
    return {}


@contextmanager
def open_uploads(request: OperationRequest) -> Iterator[dict[str, tuple]]:
    with ExitStack() as stack:
        files: dict[str, tuple] = {}
        for key, path in request.files.items():
            mime = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
            files[key] = (path.name, stack.enter_context(path.open("rb")), mime)
        yield files


def _post_kwargs(api_key: str, request: OperationRequest, files: dict[str, tuple]) -> dict[str, Any]:
    kwargs: dict[str, Any] = {"headers": build_headers(api_key, request)}
    if request.mode == "json":
        kwargs["json"] = request.body
    else:
        kwargs["data"] = request.data
        kwargs["files"] = files
    return kwargs


def _wrap_response(request: OperationRequest, response: httpx.Response) -> ImagefyResult:
    if response.status_code != 200:
        logger.warning("%s failed with HTTP %s", request.operation, response.status_code)
        raise RemoteError(response.status_code)
    logger.debug("%s returned %d bytes", request.operation, len(response.content))
    return ImagefyResult(response.content, response.headers.get("content-type"))


def send(
    request: OperationRequest,
    *,
    api_key: str,
    base_url: str,
    proxy: Optional[ProxyConfig] = None,
    transport: Optional[httpx.BaseTransport] = None,
) -> ImagefyResult:
    url = endpoint_url(base_url, request.endpoint)
    logger.debug("POST %s (%s)", url, request.operation)
    with open_uploads(request) as files, httpx.Client(**client_options(proxy, transport)) as client:
        try:
            response = client.post(url, **_post_kwargs(api_key, request, files))
        except httpx.TransportError as e:
            logger.warning("%s request failed: %s", request.operation, e)
            raise RemoteError() from e
    return _wrap_response(request, response)


async def send_async(
    request: OperationRequest,
    *,
    api_key: str,
    base_url: str,
    proxy: Optional[ProxyConfig] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> ImagefyResult:
    url = endpoint_url(base_url, request.endpoint)
    logger.debug("POST %s (%s)", url, request.operation)
    with open_uploads(request) as files:
        async with httpx.AsyncClient(**client_options(proxy, transport)) as client:
            try:
                response = await client.post(url, **_post_kwargs(api_key, request, files))
            except httpx.TransportError as e:
                logger.warning("%s request failed: %s", request.operation, e)
                raise RemoteError() from e
    return _wrap_response(request, response)
