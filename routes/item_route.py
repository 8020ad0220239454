"""FastAPI routes for editing individual annotated items."""

from typing import Optional

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, ConfigDict, Field

from controllers.item_controller import apply_key, apply_macro, get_image, patch_features, patch_item
from services.macros import MACROS

router = APIRouter(prefix="/api", tags=["items"])


class FeaturePatchPayload(BaseModel):
    """Partial feature vector. Range checks happen by clamping, not here."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    bulge_prominence: Optional[float] = Field(None, alias="bulgeProminence")
    arm_tightness: Optional[str] = Field(None, alias="armTightness")
    bar_strength: Optional[str] = Field(None, alias="barStrength")
    has_ring: Optional[bool] = Field(None, alias="hasRing")
    is_irregular: Optional[bool] = Field(None, alias="isIrregular")
    elliptical_index: Optional[float] = Field(None, alias="ellipticalIndex")
    lenticular_likelihood: Optional[float] = Field(None, alias="lenticularLikelihood")


class ItemPatchPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    final_label: Optional[str] = Field(None, alias="finalLabel")
    confidence: Optional[float] = None
    notes: Optional[str] = None


@router.get("/macros")
async def list_macros_route():
    """Return the quick-set macro catalog."""
    return {"macros": [macro.to_dict() for macro in MACROS.values()]}


@router.patch("/items/{item_id}/features")
async def patch_features_route(request: Request, item_id: str, payload: FeaturePatchPayload):
    try:
        return await patch_features(request, item_id, payload.model_dump(exclude_unset=True))
    except HTTPException:
        raise
    except Exception as exc:
        raise HTTPException(status_code=500, detail=str(exc))


@router.patch("/items/{item_id}")
async def patch_item_route(request: Request, item_id: str, payload: ItemPatchPayload):
    try:
        return await patch_item(request, item_id, payload.model_dump(exclude_unset=True))
    except HTTPException:
        raise
    except Exception as exc:
        raise HTTPException(status_code=500, detail=str(exc))


@router.post("/items/{item_id}/macros/{name}")
async def apply_macro_route(request: Request, item_id: str, name: str):
    try:
        return await apply_macro(request, item_id, name)
    except HTTPException:
        raise
    except Exception as exc:
        raise HTTPException(status_code=500, detail=str(exc))


@router.post("/items/{item_id}/keys/{key}")
async def apply_key_route(request: Request, item_id: str, key: str):
    try:
        return await apply_key(request, item_id, key)
    except HTTPException:
        raise
    except Exception as exc:
        raise HTTPException(status_code=500, detail=str(exc))


@router.get("/items/{item_id}/image")
async def get_image_route(request: Request, item_id: str):
    """Return the raw bytes of the uploaded image."""
    try:
        return await get_image(request, item_id)
    except HTTPException:
        raise
    except Exception as exc:
        raise HTTPException(status_code=500, detail=str(exc))
