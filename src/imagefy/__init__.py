from __future__ import annotations

from .client import AsyncImagefyClient, ImagefyClient
from .config import BASE_URL, ImagefyConfig, ProxyConfig, load_config
from .errors import ConfigError, ImagefyError, ImagefyIOError, RemoteError, ValidationError
from .operations import OPERATIONS, get_operation, prepare
from .qr import QRType
from .result import ImagefyResult
from .types import Operation, OperationRequest

__all__ = [
    "AsyncImagefyClient",
    "ImagefyClient",
    "BASE_URL",
    "ImagefyConfig",
    "ProxyConfig",
    "load_config",
    "ConfigError",
    "ImagefyError",
    "ImagefyIOError",
    "RemoteError",
    "ValidationError",
    "OPERATIONS",
    "get_operation",
    "prepare",
    "QRType",
    "ImagefyResult",
    "Operation",
    "OperationRequest",
]
