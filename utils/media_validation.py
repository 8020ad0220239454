"""Validation helpers for uploaded galaxy images."""

from fastapi import HTTPException, UploadFile

ALLOWED_IMAGE_TYPES = {
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/webp",
    "image/gif",
    "image/bmp",
    "image/tiff",
}
ALLOWED_IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".webp", ".gif", ".bmp", ".tif", ".tiff")


def validate_image_file(image_file: UploadFile) -> None:
    """Validate that the upload looks like a supported image.

    The content type is checked against the allowed set; when a client sends
    no content type (or a generic one) the filename extension is used instead.
    """
    content_type = (image_file.content_type or "").lower().split(";", 1)[0].strip()
    if content_type and content_type != "application/octet-stream":
        if content_type not in ALLOWED_IMAGE_TYPES:
            raise HTTPException(status_code=415, detail=f"Unsupported image content type: {image_file.content_type}")
        return
    filename = (image_file.filename or "").lower()
    if not filename.endswith(ALLOWED_IMAGE_EXTENSIONS):
        raise HTTPException(status_code=415, detail="Unsupported or missing image content type.")


async def read_image_bytes(image_file: UploadFile) -> bytes:
    """Read validated image bytes, ensuring the upload is not empty."""
    validate_image_file(image_file)
    image_bytes = await image_file.read()
    if not image_bytes:
        raise HTTPException(status_code=400, detail=f"Uploaded image {image_file.filename!r} is empty.")
    return image_bytes
