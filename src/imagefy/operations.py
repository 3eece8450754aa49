from __future__ import annotations

from typing import Any

from .errors import ValidationError
from .qr import QRType, qr_operation
from .rules import (
    COMPASS_POSITIONS,
    RESIZE_MODES,
    ExistingFile,
    HexColor,
    MaxLength,
    NumberRange,
    OneOf,
    Size,
    Text,
    run_rules,
)
from .types import Field, Operation, OperationRequest, to_wire


def _image(name: str = "image") -> Field:
    return Field(name, (ExistingFile(),), upload=True)


def _percent(name: str) -> Field:
    return Field(name, (NumberRange(1, 100, integer=True),))


_COLORS = (Field("background", (HexColor(),)), Field("foreground", (HexColor(),)))
_SIZE = Field("size", (Size(),))

_BASE_OPERATIONS = [
    Operation(
        name="abbreviation",
        endpoint="generate/abbreviation",
        mode="json",
        fields=_COLORS + (Field("name", (Text(), MaxLength(100))), _SIZE),
        description="Avatar with initials over a colored background",
    ),
    Operation(
        name="placeholder",
        endpoint="generate/placeholder",
        mode="json",
        fields=_COLORS + (Field("text", (Text(), MaxLength(120, strict=True))), _SIZE),
        description="Placeholder image with a text label",
    ),
    Operation(
        name="compress_lossless",
        endpoint="compress/lossless",
        mode="multipart",
        fields=(_image(),),
        description="Lossless compression",
    ),
    Operation(
        name="compress_lossy",
        endpoint="compress/lossy",
        mode="multipart",
        fields=(_image(), _percent("quality")),
        description="Lossy compression at the given quality",
    ),
    Operation(
        name="resize_fit",
        endpoint="resize/fit",
        mode="multipart",
        fields=(_image(), _SIZE, Field("background", (HexColor(),), required=False)),
        description="Resize keeping aspect ratio, letterboxed",
    ),
    Operation(
        name="resize_fill",
        endpoint="resize/fill",
        mode="multipart",
        fields=(_image(), _SIZE, Field("mode", (OneOf(RESIZE_MODES),))),
        description="Resize filling the exact dimensions",
    ),
    Operation(
        name="thumbnail_cropped",
        endpoint="thumbnail/cropped",
        mode="multipart",
        fields=(_image(), _SIZE),
        description="Cropped thumbnail",
    ),
    Operation(
        name="thumbnail_blurred",
        endpoint="thumbnail/blurred",
        mode="multipart",
        fields=(_image(), _SIZE, _percent("blur")),
        description="Thumbnail over a blurred backdrop",
    ),
    Operation(
        name="watermark",
        endpoint="watermark",
        mode="multipart",
        fields=(
            _image(),
            _image("watermark"),
            Field("position", (OneOf(COMPASS_POSITIONS),)),
            _percent("opacity"),
            _percent("scale"),
        ),
        description="Overlay a watermark image",
    ),
]

OPERATIONS: dict[str, Operation] = {
    op.name: op for op in _BASE_OPERATIONS + [qr_operation(t) for t in QRType]
}


def get_operation(name: str) -> Operation:
    try:
        return OPERATIONS[name]
    except KeyError:
        raise ValidationError(
            "operation",
            f"is not a known operation: '{name}'. Available operations: {sorted(OPERATIONS)}",
        ) from None


def validate(operation: Operation, params: dict[str, Any]) -> dict[str, Any]:
    """Validate ``params`` against ``operation`` and return normalized values.

    Fields are checked in declaration order and the first failure is raised.
    Optional fields passed as ``None`` are treated as absent.
    """
    known = set(operation.field_names())
    for name in params:
        if name not in known:
            raise ValidationError(name, f"is not a parameter of {operation.name}")

    values: dict[str, Any] = {}
    for f in operation.fields:
        value = params.get(f.name)
        if value is None:
            if f.required:
                raise ValidationError(f.name, "is required")
            continue
        values[f.name] = run_rules(f.name, value, f.rules)

    for check in operation.checks:
        check(values)
    return values


def build_request(operation: Operation, values: dict[str, Any]) -> OperationRequest:
    if operation.mode == "json":
        if operation.envelope is not None:
            body = operation.envelope(values)
        else:
            body = {f.key: values[f.name] for f in operation.fields if f.name in values}
        return OperationRequest(operation.name, operation.endpoint, "json", body=body)

    data: dict[str, str] = {}
    files = {}
    for f in operation.fields:
        if f.name not in values:
            continue
        if f.upload:
            files[f.key] = values[f.name]
        else:
            data[f.key] = to_wire(values[f.name])
    return OperationRequest(operation.name, operation.endpoint, "multipart", data=data, files=files)


def prepare(operation_name: str, params: dict[str, Any]) -> OperationRequest:
    operation = get_operation(operation_name)
    return build_request(operation, validate(operation, params))
