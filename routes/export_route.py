from fastapi import APIRouter, HTTPException, Request

from controllers.export_controller import export_structured, export_tabular

router = APIRouter(prefix="/api/export", tags=["export"])


@router.get("/json")
async def export_json_route(request: Request):
	"""Download the structured export."""
	try:
		return await export_structured(request)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.get("/csv")
async def export_csv_route(request: Request):
	"""Download the tabular export."""
	try:
		return await export_tabular(request)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))
