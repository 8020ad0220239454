"""Session-level operations: listing, uploads, selection and removal."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import HTTPException, Request, UploadFile

from models.annotated_item import RawInput
from models.session_models import SessionState
from services.exporter import item_to_dict
from services.image_store import ImageStore
from services.session_store import SessionStore
from utils.media_validation import read_image_bytes


def get_store(request: Request) -> SessionStore:
	store = getattr(request.app.state, "session_store", None)
	if store is None:
		raise HTTPException(status_code=500, detail="Session store unavailable")
	return store


def session_payload(state: SessionState, applied: Optional[bool] = None) -> Dict[str, Any]:
	"""Serialize a snapshot for API responses."""
	payload: Dict[str, Any] = {
		"items": [item_to_dict(item) for item in state.items],
		"selected_id": state.selected_id,
		"count": len(state),
	}
	if applied is not None:
		payload["applied"] = applied
	return payload


async def get_session(request: Request) -> Dict[str, Any]:
	"""Return the current session snapshot."""
	return session_payload(get_store(request).snapshot())


async def upload_images(request: Request, files: List[UploadFile]) -> Dict[str, Any]:
	"""Store uploaded images and add one annotated item per file, in order."""
	if not files:
		raise HTTPException(status_code=400, detail="At least one image file is required.")
	image_store: ImageStore = request.app.state.image_store

	# Validate every upload before storing any of them.
	payloads = [(upload, await read_image_bytes(upload)) for upload in files]
	raw_inputs: List[RawInput] = []
	for upload, data in payloads:
		image_ref = await image_store.save(data, upload.content_type)
		raw_inputs.append(RawInput(name=upload.filename or "uploaded_image", data=data, image_ref=image_ref))

	store = get_store(request)
	created = await store.add_items(raw_inputs)
	payload = session_payload(store.snapshot())
	payload["created_ids"] = [item.id for item in created]
	return payload


async def select_item(request: Request, item_id: Optional[str]) -> Dict[str, Any]:
	"""Change the selection; unknown ids leave it unchanged."""
	store = get_store(request)
	applied = await store.select(item_id)
	return session_payload(store.snapshot(), applied=applied)


async def remove_item(request: Request, item_id: str) -> Dict[str, Any]:
	"""Remove an item and its stored image; unknown ids are a no-op."""
	store = get_store(request)
	item = store.get(item_id)
	applied = await store.remove_item(item_id)
	if applied and item is not None:
		image_store: ImageStore = request.app.state.image_store
		await image_store.delete(item.image_ref)
	return session_payload(store.snapshot(), applied=applied)
