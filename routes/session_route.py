"""FastAPI routes for the annotation session."""

from typing import List, Optional

from fastapi import APIRouter, File, HTTPException, Request, UploadFile
from pydantic import BaseModel

from controllers.session_controller import get_session, remove_item, select_item, upload_images

router = APIRouter(prefix="/api", tags=["session"])


class SelectionPayload(BaseModel):
	item_id: Optional[str] = None


@router.get("/session")
async def get_session_route(request: Request):
	try:
		return await get_session(request)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.post("/items", summary="Upload galaxy images")
async def upload_images_route(request: Request, files: List[UploadFile] = File(...)):
	try:
		return await upload_images(request, files)
	except HTTPException:
		raise
	except ValueError as exc:
		raise HTTPException(status_code=400, detail=str(exc)) from exc
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.put("/selection")
async def select_item_route(request: Request, payload: SelectionPayload):
	try:
		return await select_item(request, payload.item_id)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.delete("/items/{item_id}")
async def remove_item_route(request: Request, item_id: str):
	try:
		return await remove_item(request, item_id)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))
