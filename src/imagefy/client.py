from __future__ import annotations

import datetime as _dt
import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional, Union

import httpx

from .config import BASE_URL, ProxyConfig, resolve_config
from .errors import ValidationError
from .operations import prepare
from .qr import QRType, operation_name
from .result import ImagefyResult
from .transport import send, send_async
from .types import OperationRequest

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]
DateLike = Union[str, _dt.date, _dt.datetime]

DEFAULT_QR_SIZE = 300


class _ImagefyOperations(ABC):
    """Named entry points for every API operation.

    Each method forwards its arguments to ``call``; the sync client returns an
    ``ImagefyResult`` and the async client an awaitable of one.
    """

    @abstractmethod
    def call(self, operation: str, /, **params: Any) -> Any:
        ...

    def create_abbreviation(self, *, background: str, foreground: str, name: str, size: str):
        return self.call(
            "abbreviation", background=background, foreground=foreground, name=name, size=size
        )

    def create_placeholder(self, *, background: str, foreground: str, text: str, size: str):
        return self.call(
            "placeholder", background=background, foreground=foreground, text=text, size=size
        )

    def create_qr_code(self, qr_type: Union[QRType, str], *, size: int = DEFAULT_QR_SIZE, **args: Any):
        try:
            kind = QRType(qr_type)
        except ValueError:
            raise ValidationError(
                "type", f"must be one of: {', '.join(t.value for t in QRType)}"
            ) from None
        return self.call(operation_name(kind), size=size, **args)

    def create_bitcoin_qr_code(
        self, address: str, amount: Optional[float] = None, *, size: int = DEFAULT_QR_SIZE
    ):
        return self.call("qr_bitcoin", size=size, address=address, amount=amount)

    def create_monero_qr_code(
        self, address: str, amount: Optional[float] = None, *, size: int = DEFAULT_QR_SIZE
    ):
        return self.call("qr_monero", size=size, address=address, amount=amount)

    def create_contact_qr_code(
        self,
        *,
        first_name: str,
        last_name: str,
        phone: str,
        email: str,
        size: int = DEFAULT_QR_SIZE,
    ):
        return self.call(
            "qr_contact",
            size=size,
            first_name=first_name,
            last_name=last_name,
            phone=phone,
            email=email,
        )

    def create_event_qr_code(
        self,
        *,
        subject: str,
        description: str,
        location: str,
        start_at: DateLike,
        end_at: DateLike,
        size: int = DEFAULT_QR_SIZE,
    ):
        return self.call(
            "qr_event",
            size=size,
            subject=subject,
            description=description,
            location=location,
            start_at=start_at,
            end_at=end_at,
        )

    def create_geolocation_qr_code(
        self, latitude: float, longitude: float, *, size: int = DEFAULT_QR_SIZE
    ):
        return self.call("qr_geolocation", size=size, latitude=latitude, longitude=longitude)

    def create_mail_qr_code(self, *, to: str, subject: str, body: str, size: int = DEFAULT_QR_SIZE):
        return self.call("qr_mail", size=size, to=to, subject=subject, body=body)

    def create_phone_call_qr_code(self, phone: str, *, size: int = DEFAULT_QR_SIZE):
        return self.call("qr_phone_call", size=size, phone=phone)

    def create_skype_call_qr_code(self, username: str, *, size: int = DEFAULT_QR_SIZE):
        return self.call("qr_skype_call", size=size, username=username)

    def create_sms_qr_code(self, phone: str, message: str, *, size: int = DEFAULT_QR_SIZE):
        return self.call("qr_sms", size=size, phone=phone, message=message)

    def create_text_qr_code(self, text: str, *, size: int = DEFAULT_QR_SIZE):
        return self.call("qr_text", size=size, text=text)

    def create_url_qr_code(self, url: str, *, size: int = DEFAULT_QR_SIZE):
        return self.call("qr_url", size=size, url=url)

    def create_whatsapp_qr_code(self, phone: str, message: str, *, size: int = DEFAULT_QR_SIZE):
        return self.call("qr_whatsapp", size=size, phone=phone, message=message)

    def create_wifi_qr_code(
        self, ssid: str, password: str, encryption: str = "wpa", *, size: int = DEFAULT_QR_SIZE
    ):
        return self.call(
            "qr_wifi", size=size, ssid=ssid, password=password, encryption=encryption
        )

    def create_bookmark_qr_code(self, title: str, url: str, *, size: int = DEFAULT_QR_SIZE):
        return self.call("qr_bookmark", size=size, title=title, url=url)

    def compress_lossless(self, image: PathLike):
        return self.call("compress_lossless", image=image)

    def compress_lossy(self, image: PathLike, quality: int = 80):
        return self.call("compress_lossy", image=image, quality=quality)

    def resize_fit(self, image: PathLike, size: str, background: Optional[str] = None):
        return self.call("resize_fit", image=image, size=size, background=background)

    def resize_fill(self, image: PathLike, size: str, mode: str = "cover"):
        return self.call("resize_fill", image=image, size=size, mode=mode)

    def thumbnail_cropped(self, image: PathLike, size: str):
        return self.call("thumbnail_cropped", image=image, size=size)

    def thumbnail_blurred(self, image: PathLike, size: str, blur: int = 50):
        return self.call("thumbnail_blurred", image=image, size=size, blur=blur)

    def watermark(
        self,
        image: PathLike,
        watermark: PathLike,
        position: str = "southeast",
        opacity: int = 50,
        scale: int = 20,
    ):
        return self.call(
            "watermark",
            image=image,
            watermark=watermark,
            position=position,
            opacity=opacity,
            scale=scale,
        )


class _BaseClient(_ImagefyOperations):
    def __init__(
        self,
        api_key: str,
        proxy: Optional[ProxyConfig] = None,
        *,
        base_url: str = BASE_URL,
        transport: Any = None,
    ):
        if not api_key or not isinstance(api_key, str):
            raise ValidationError("api_key", "must be a non-empty string")
        self._api_key = api_key
        self._proxy = proxy
        self._base_url = base_url
        self._transport = transport

    @classmethod
    def from_config(cls, config_path: Optional[Path] = None, **kwargs: Any):
        config = resolve_config(config_path)
        return cls(
            config.resolve_api_key(),
            config.proxy,
            base_url=config.base_url,
            **kwargs,
        )

    @property
    def api_key(self) -> str:
        return self._api_key

    @property
    def proxy(self) -> Optional[ProxyConfig]:
        return self._proxy

    @property
    def base_url(self) -> str:
        return self._base_url

    def __repr__(self) -> str:
        return f"{type(self).__name__}(base_url={self._base_url!r}, proxy={self._proxy!r})"

    def _prepare(self, operation: str, params: dict[str, Any]) -> OperationRequest:
        request = prepare(operation, params)
        logger.debug("Prepared %s request for %s", request.mode, request.endpoint)
        return request


class ImagefyClient(_BaseClient):
    def __init__(
        self,
        api_key: str,
        proxy: Optional[ProxyConfig] = None,
        *,
        base_url: str = BASE_URL,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        super().__init__(api_key, proxy, base_url=base_url, transport=transport)

    def call(self, operation: str, /, **params: Any) -> ImagefyResult:
        request = self._prepare(operation, params)
        return send(
            request,
            api_key=self._api_key,
            base_url=self._base_url,
            proxy=self._proxy,
            transport=self._transport,
        )


class AsyncImagefyClient(_BaseClient):
    def __init__(
        self,
        api_key: str,
        proxy: Optional[ProxyConfig] = None,
        *,
        base_url: str = BASE_URL,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(api_key, proxy, base_url=base_url, transport=transport)

    async def call(self, operation: str, /, **params: Any) -> ImagefyResult:
        request = self._prepare(operation, params)
        return await send_async(
            request,
            api_key=self._api_key,
            base_url=self._base_url,
            proxy=self._proxy,
            transport=self._transport,
        )
