"""Per-item edits: feature patches, annotator fields, macros and keys."""

from typing import Any, Dict, Mapping, Optional

from fastapi import HTTPException, Request
from fastapi.responses import Response

from controllers.session_controller import get_store, session_payload
from models.annotated_item import AnnotatedItem
from services.exporter import item_to_dict
from services.image_store import ImageStore


def _item_payload(request: Request, item: Optional[AnnotatedItem]) -> Dict[str, Any]:
    """Wrap the updated item (or None for an unknown id) with the session state."""
    payload = session_payload(get_store(request).snapshot(), applied=item is not None)
    payload["item"] = item_to_dict(item) if item is not None else None
    return payload


async def patch_features(request: Request, item_id: str, patch: Mapping[str, Any]) -> Dict[str, Any]:
    """Merge a partial feature vector and return the re-classified item."""
    item = await get_store(request).patch_features(item_id, patch)
    return _item_payload(request, item)


async def patch_item(request: Request, item_id: str, patch: Mapping[str, Any]) -> Dict[str, Any]:
    """Update final label, confidence or notes."""
    item = await get_store(request).patch_item(item_id, patch)
    return _item_payload(request, item)


async def apply_macro(request: Request, item_id: str, name: str) -> Dict[str, Any]:
    """Apply a quick-set macro.

    Raises:
        HTTPException(404) if the macro name is unknown.
    """
    try:
        item = await get_store(request).apply_macro(item_id, name)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=f"Unknown macro {name!r}") from exc
    return _item_payload(request, item)


async def apply_key(request: Request, item_id: str, key: str) -> Dict[str, Any]:
    """Handle a single key press; unbound keys leave the item untouched."""
    item = await get_store(request).apply_key(item_id, key)
    return _item_payload(request, item)


async def get_image(request: Request, item_id: str) -> Response:
    """Return the raw stored image bytes for an item.

    Raises:
        HTTPException(404) if the item or its stored image is not found.
    """
    item = get_store(request).get(item_id)
    if item is None:
        raise HTTPException(status_code=404, detail="Item not found")

    image_store: ImageStore = request.app.state.image_store
    data = await image_store.read(item.image_ref)
    if data is None:
        raise HTTPException(status_code=404, detail="Image not available for this item")
    return Response(content=data, media_type=image_store.media_type(item.image_ref))
