"""Store uploaded galaxy images on disk and hand back opaque references.

Images are written unchanged under `<DATABASE_DIR>/images/` and deleted when
their item is removed. The returned reference is the stored filename; nothing
here decodes the bytes.
"""

from __future__ import annotations

import re
import uuid
from pathlib import Path
from typing import Optional

import aiofiles
import aiofiles.os

_SAFE_REF = re.compile(r"^[0-9a-f]{32}\.[a-z0-9]{1,5}$")
_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "image/gif": "gif",
    "image/bmp": "bmp",
    "image/tiff": "tif",
}
_MEDIA_TYPES = {ext: mime for mime, ext in _EXTENSIONS.items()}
_MEDIA_TYPES["jpg"] = "image/jpeg"


class ImageStore:
    """Write and read raw image bytes by reference."""

    def __init__(self, base_dir: Path | str) -> None:
        self.base_dir = Path(base_dir)

    async def save(self, data: bytes, mime_type: Optional[str] = None) -> str:
        """Save `data` and return its reference.

        Raises:
            ValueError: If `data` is empty.
        """
        if not data:
            raise ValueError("Image bytes are required for saving.")
        ext = _EXTENSIONS.get((mime_type or "").lower().split(";", 1)[0].strip(), "bin")
        image_ref = f"{uuid.uuid4().hex}.{ext}"
        self.base_dir.mkdir(parents=True, exist_ok=True)
        async with aiofiles.open(self.base_dir / image_ref, "wb") as f:
            await f.write(data)
        return image_ref

    async def read(self, image_ref: str) -> Optional[bytes]:
        """Return the stored bytes, or None for unknown or foreign references."""
        path = self._path_for(image_ref)
        if path is None or not path.is_file():
            return None
        async with aiofiles.open(path, "rb") as f:
            return await f.read()

    async def delete(self, image_ref: str) -> bool:
        """Remove the stored file. Returns False for unknown or foreign references."""
        path = self._path_for(image_ref)
        if path is None or not path.is_file():
            return False
        await aiofiles.os.remove(path)
        return True

    @staticmethod
    def media_type(image_ref: str) -> str:
        ext = image_ref.rsplit(".", 1)[-1].lower()
        return _MEDIA_TYPES.get(ext, "application/octet-stream")

    def _path_for(self, image_ref: str) -> Optional[Path]:
        # Only references minted by `save` map to files; this also rules out path traversal.
        if not image_ref or not _SAFE_REF.match(image_ref):
            return None
        return self.base_dir / image_ref
