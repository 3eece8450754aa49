from __future__ import annotations

import datetime as _dt
import math
import os
import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Iterable, Optional

from .errors import ValidationError

HEX_COLOR = re.compile(r"^#(?:[a-f0-9]{3}){1,2}$", re.IGNORECASE)
SIZE = re.compile(r"^\d{1,3}x\d{1,3}$")
LARGE_SIZE = re.compile(r"^\d{1,4}x\d{1,4}$")
EMAIL = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
HTTP_URL = re.compile(r"^https?://\S+$", re.IGNORECASE)

COMPASS_POSITIONS = (
    "center",
    "north",
    "south",
    "east",
    "west",
    "northeast",
    "northwest",
    "southeast",
    "southwest",
)
RESIZE_MODES = ("cover", "contain")
WIFI_ENCRYPTIONS = ("wpa", "wep", "nopass")

PHONE_LENGTH = 14


def is_hex_color(value: Any) -> bool:
    return isinstance(value, str) and HEX_COLOR.match(value) is not None


def is_size(value: Any) -> bool:
    return isinstance(value, str) and SIZE.match(value) is not None


def is_large_size(value: Any) -> bool:
    return isinstance(value, str) and LARGE_SIZE.match(value) is not None


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class Rule(ABC):
    """A single constraint on one field.

    ``check`` returns the value to send (possibly normalized) or raises
    ``ValidationError`` naming the field.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        ...

    @abstractmethod
    def check(self, field: str, value: Any) -> Any:
        ...


class HexColor(Rule):
    @property
    def name(self) -> str:
        return "hex_color"

    def check(self, field: str, value: Any) -> Any:
        if not is_hex_color(value):
            raise ValidationError(field, "must be a hex string color")
        return value


class Size(Rule):
    def __init__(self, large: bool = False):
        self.large = large

    @property
    def name(self) -> str:
        return "large_size" if self.large else "size"

    def check(self, field: str, value: Any) -> Any:
        if self.large:
            if not is_large_size(value):
                raise ValidationError(field, "must be a 9999x9999 string")
        elif not is_size(value):
            raise ValidationError(field, "must be a 999x999 string")
        return value


class Text(Rule):
    @property
    def name(self) -> str:
        return "text"

    def check(self, field: str, value: Any) -> Any:
        if not value or not isinstance(value, str):
            raise ValidationError(field, "must be a string")
        return value


class MaxLength(Rule):
    """Upper bound on string length.

    ``strict`` rejects a value whose length equals the limit, otherwise only
    longer values are rejected. Which one applies is fixed per field.
    """

    def __init__(self, limit: int, strict: bool = False):
        self.limit = limit
        self.strict = strict

    @property
    def name(self) -> str:
        return "max_length"

    def check(self, field: str, value: Any) -> Any:
        too_long = len(value) >= self.limit if self.strict else len(value) > self.limit
        if too_long:
            raise ValidationError(field, f"must be less than {self.limit} letters")
        return value


class ExactLength(Rule):
    def __init__(self, length: int):
        self.length = length

    @property
    def name(self) -> str:
        return "exact_length"

    def check(self, field: str, value: Any) -> Any:
        if not isinstance(value, str) or len(value) != self.length:
            raise ValidationError(field, f"must be exactly {self.length} characters")
        return value


class Phone(ExactLength):
    def __init__(self):
        super().__init__(PHONE_LENGTH)

    @property
    def name(self) -> str:
        return "phone"

    def check(self, field: str, value: Any) -> Any:
        if not isinstance(value, str) or len(value) != self.length:
            raise ValidationError(
                field, f"must be a {self.length} characters phone number like +5511900000000"
            )
        return value


class OneOf(Rule):
    def __init__(self, choices: Iterable[str]):
        self.choices = tuple(choices)

    @property
    def name(self) -> str:
        return "one_of"

    def check(self, field: str, value: Any) -> Any:
        if not isinstance(value, str) or value.lower() not in self.choices:
            raise ValidationError(field, f"must be one of: {', '.join(self.choices)}")
        return value.lower()


class NumberRange(Rule):
    """Inclusive numeric range. Either bound may be open (``None``)."""

    def __init__(
        self,
        minimum: Optional[float] = None,
        maximum: Optional[float] = None,
        integer: bool = False,
        exclusive_minimum: bool = False,
    ):
        self.minimum = minimum
        self.maximum = maximum
        self.integer = integer
        self.exclusive_minimum = exclusive_minimum

    @property
    def name(self) -> str:
        return "number_range"

    def _describe(self) -> str:
        kind = "an integer" if self.integer else "a number"
        if self.minimum is not None and self.maximum is not None:
            return f"must be {kind} between {self.minimum} and {self.maximum}"
        if self.minimum is not None:
            op = "greater than" if self.exclusive_minimum else "at least"
            return f"must be {kind} {op} {self.minimum}"
        if self.maximum is not None:
            return f"must be {kind} up to {self.maximum}"
        return f"must be {kind}"

    def check(self, field: str, value: Any) -> Any:
        if not _is_number(value) or not math.isfinite(value):
            raise ValidationError(field, self._describe())
        if self.integer and not isinstance(value, int):
            raise ValidationError(field, self._describe())
        if self.minimum is not None:
            if value < self.minimum or (self.exclusive_minimum and value == self.minimum):
                raise ValidationError(field, self._describe())
        if self.maximum is not None and value > self.maximum:
            raise ValidationError(field, self._describe())
        return value


def parse_datetime(value: Any) -> Optional[_dt.datetime]:
    if isinstance(value, _dt.datetime):
        return value
    if isinstance(value, _dt.date):
        return _dt.datetime(value.year, value.month, value.day)
    if isinstance(value, str) and value:
        text = value[:-1] + "+00:00" if value.endswith(("Z", "z")) else value
        try:
            return _dt.datetime.fromisoformat(text)
        except ValueError:
            return None
    return None


class DateTime(Rule):
    @property
    def name(self) -> str:
        return "datetime"

    def check(self, field: str, value: Any) -> Any:
        parsed = parse_datetime(value)
        if parsed is None:
            raise ValidationError(field, "must be a valid date")
        return parsed


class Pattern(Rule):
    def __init__(self, pattern: re.Pattern[str], reason: str):
        self.pattern = pattern
        self.reason = reason

    @property
    def name(self) -> str:
        return "pattern"

    def check(self, field: str, value: Any) -> Any:
        if not isinstance(value, str) or self.pattern.match(value) is None:
            raise ValidationError(field, self.reason)
        return value


class ExistingFile(Rule):
    @property
    def name(self) -> str:
        return "existing_file"

    def check(self, field: str, value: Any) -> Any:
        if not isinstance(value, (str, os.PathLike)) or not str(value):
            raise ValidationError(field, "must be a file path")
        path = Path(value)
        if not path.is_file():
            raise ValidationError(field, f"file not found: {path}")
        return path


def run_rules(field: str, value: Any, rules: Iterable[Rule]) -> Any:
    for rule in rules:
        value = rule.check(field, value)
    return value
