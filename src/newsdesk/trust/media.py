"""Binary form values (uploads)."""
from __future__ import annotations

import io
from dataclasses import dataclass

from PIL import Image

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


@dataclass(frozen=True)
class FileField:
    """A file part of a multipart form."""

    filename: str
    content: bytes
    content_type: str = "application/octet-stream"

    def __repr__(self) -> str:
        return f"FileField({self.filename!r}, {len(self.content)} bytes, {self.content_type!r})"


def png_bytes(width: int = 1, height: int = 1, rgb: tuple[int, int, int] = (0, 0, 0)) -> bytes:
    """Encode a solid-color RGB PNG."""
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), rgb).save(buffer, "PNG")
    return buffer.getvalue()


def any_png(filename: str = "image.png") -> FileField:
    return FileField(filename=filename, content=png_bytes(), content_type="image/png")
