from fastapi import Request
from fastapi.responses import Response

from controllers.session_controller import get_store
from services.exporter import to_structured, to_tabular


async def export_structured(request: Request) -> Response:
    """Download the full session as JSON."""
    body = to_structured(get_store(request).snapshot().items)
    return Response(
        content=body,
        media_type="application/json",
        headers={"Content-Disposition": 'attachment; filename="galaxy_annotations.json"'},
    )


async def export_tabular(request: Request) -> Response:
    """Download one CSV row per item."""
    body = to_tabular(get_store(request).snapshot().items)
    return Response(
        content=body,
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="galaxy_annotations.csv"'},
    )
