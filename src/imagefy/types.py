from __future__ import annotations

import datetime as _dt
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Literal, Optional

if TYPE_CHECKING:
    from .rules import Rule

SerializationMode = Literal["json", "multipart"]


@dataclass(frozen=True)
class Field:
    name: str
    rules: tuple[Rule, ...] = ()
    required: bool = True
    wire_name: Optional[str] = None
    upload: bool = False

    @property
    def key(self) -> str:
        return self.wire_name or self.name


@dataclass(frozen=True)
class Operation:
    name: str
    endpoint: str
    mode: SerializationMode
    fields: tuple[Field, ...]
    checks: tuple[Callable[[dict[str, Any]], None], ...] = ()
    envelope: Optional[Callable[[dict[str, Any]], dict[str, Any]]] = None
    description: str = ""

    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]


@dataclass(frozen=True)
class OperationRequest:
    operation: str
    endpoint: str
    mode: SerializationMode
    body: Optional[dict[str, Any]] = None
    data: dict[str, str] = field(default_factory=dict)
    files: dict[str, Path] = field(default_factory=dict)


def to_wire(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (_dt.datetime, _dt.date)):
        return value.isoformat()
    return str(value)
