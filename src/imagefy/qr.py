from __future__ import annotations

from enum import Enum
from typing import Any, Callable

from .errors import ValidationError
from .rules import (
    EMAIL,
    HTTP_URL,
    WIFI_ENCRYPTIONS,
    DateTime,
    MaxLength,
    NumberRange,
    OneOf,
    Pattern,
    Phone,
    Size,
    Text,
)
from .types import Field, Operation, to_wire

QR_ENDPOINT = "generate/qr-code"
QR_MIN_SIZE = 100
QR_MAX_SIZE = 9999


class QRType(str, Enum):
    BITCOIN = "Bitcoin"
    MONERO = "Monero"
    CONTACT = "Contact"
    EVENT = "Event"
    GEOLOCATION = "Geolocation"
    MAIL = "Mail"
    PHONE_CALL = "PhoneCall"
    SKYPE_CALL = "SkypeCall"
    SMS = "Sms"
    TEXT = "Text"
    URL = "Url"
    WHATSAPP = "Whatsapp"
    WIFI = "Wifi"
    BOOKMARK = "Bookmark"


def _text(name: str, limit: int, strict: bool = False) -> Field:
    return Field(name, (Text(), MaxLength(limit, strict=strict)))


def _email(name: str, limit: int, strict: bool = False) -> Field:
    return Field(
        name,
        (Text(), MaxLength(limit, strict=strict), Pattern(EMAIL, "must be an e-mail address")),
    )


def _url(name: str) -> Field:
    return Field(
        name,
        (Text(), MaxLength(2048, strict=True), Pattern(HTTP_URL, "must be an http(s) URL")),
    )


def _phone(name: str = "phone") -> Field:
    return Field(name, (Phone(),))


def _amount() -> Field:
    return Field("amount", (NumberRange(0, exclusive_minimum=True),), required=False)


# Ordered argument fields per payload type; the order is the order of ``args``.
QR_ARGS: dict[QRType, tuple[Field, ...]] = {
    QRType.BITCOIN: (_text("address", 512), _amount()),
    QRType.MONERO: (_text("address", 512), _amount()),
    QRType.CONTACT: (
        _text("first_name", 100),
        _text("last_name", 100),
        _phone(),
        _email("email", 300, strict=True),
    ),
    QRType.EVENT: (
        _text("subject", 200),
        _text("description", 2048, strict=True),
        _text("location", 300),
        Field("start_at", (DateTime(),)),
        Field("end_at", (DateTime(),)),
    ),
    QRType.GEOLOCATION: (
        Field("latitude", (NumberRange(-90, 90),)),
        Field("longitude", (NumberRange(-180, 180),)),
    ),
    QRType.MAIL: (
        _email("to", 300),
        _text("subject", 200),
        _text("body", 2048, strict=True),
    ),
    QRType.PHONE_CALL: (_phone(),),
    QRType.SKYPE_CALL: (_text("username", 100),),
    QRType.SMS: (_phone(), _text("message", 512, strict=True)),
    QRType.TEXT: (_text("text", 2048),),
    QRType.URL: (_url("url"),),
    QRType.WHATSAPP: (_phone(), _text("message", 512)),
    QRType.WIFI: (
        _text("ssid", 100),
        _text("password", 120, strict=True),
        Field("encryption", (OneOf(WIFI_ENCRYPTIONS),)),
    ),
    QRType.BOOKMARK: (_text("title", 200), _url("url")),
}


def _check_event_window(values: dict[str, Any]) -> None:
    start, end = values["start_at"], values["end_at"]
    if (start.tzinfo is None) != (end.tzinfo is None):
        raise ValidationError("end_at", "must use the same timezone awareness as start_at")
    if start > end:
        raise ValidationError("start_at", "must not be after end_at")


QR_CHECKS: dict[QRType, tuple[Callable[[dict[str, Any]], None], ...]] = {
    QRType.EVENT: (_check_event_window,),
}


def qr_size(size: int) -> str:
    value = f"{size}x{size}"
    return Size(large=True).check("size", value)


def build_envelope(qr_type: QRType, values: dict[str, Any]) -> dict[str, Any]:
    """Build the ``{size, type, args}`` body for a QR code request.

    Optional arguments left unset are dropped from ``args``.
    """
    args = [
        to_wire(values[f.name])
        for f in QR_ARGS[qr_type]
        if values.get(f.name) is not None
    ]
    return {"size": qr_size(values["size"]), "type": qr_type.value, "args": args}


def operation_name(qr_type: QRType) -> str:
    snake = "".join(f"_{c.lower()}" if c.isupper() else c for c in qr_type.value).lstrip("_")
    return f"qr_{snake}"


def qr_operation(qr_type: QRType) -> Operation:
    size = Field("size", (NumberRange(QR_MIN_SIZE, QR_MAX_SIZE, integer=True),))
    return Operation(
        name=operation_name(qr_type),
        endpoint=QR_ENDPOINT,
        mode="json",
        fields=(size,) + QR_ARGS[qr_type],
        checks=QR_CHECKS.get(qr_type, ()),
        envelope=lambda values: build_envelope(qr_type, values),
        description=f"{qr_type.value} QR code",
    )
