from __future__ import annotations

import io
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .errors import ImagefyIOError

try:
    from PIL import Image
except ImportError:
    Image = None  # type: ignore


def _require_pillow() -> None:
    if Image is None:
        raise RuntimeError(
            "Pillow is required to decode results. "
            "Install with: pip install 'imagefy[image]'"
        )


@dataclass(frozen=True)
class ImagefyResult:
    """Raw bytes returned by a successful API call."""

    data: bytes
    content_type: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.data)

    def save(self, path: str | Path) -> Path:
        """Write the payload to ``path``, creating or truncating the file."""
        out = Path(path)
        try:
            out.write_bytes(self.data)
        except OSError as e:
            raise ImagefyIOError(out, e) from e
        return out

    def to_blob(self) -> io.BytesIO:
        return io.BytesIO(self.data)

    def to_image(self):
        _require_pillow()
        return Image.open(self.to_blob())
