from __future__ import annotations

from pathlib import Path
from typing import Optional


class ImagefyError(Exception):
    """Base class for every error raised by the client."""


class ValidationError(ImagefyError):
    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"{field} {reason}")


class RemoteError(ImagefyError):
    def __init__(self, status: Optional[int] = None):
        self.status = status
        message = "Try again later"
        if status is not None:
            message += f" (HTTP {status})"
        super().__init__(message)


class ImagefyIOError(ImagefyError):
    def __init__(self, path: Path, cause: OSError):
        self.path = path
        self.cause = cause
        super().__init__(f"Failed writing {path}: {cause}")


class ConfigError(ImagefyError):
    def __init__(self, message: str, path: Optional[Path] = None):
        self.path = path
        if path:
            message = f"{path}: {message}"
        super().__init__(message)
