"""Structured (JSON) and tabular (CSV-like) projections of a session."""

from __future__ import annotations

import json
from typing import Any, Dict, Iterable, List, Mapping

from models.annotated_item import AnnotatedItem
from models.feature_vector import FeatureVector, clamp_int

TABULAR_COLUMNS = (
    "id",
    "name",
    "label",
    "suggestion",
    "confidence",
    "bulge",
    "arms",
    "bar",
    "ring",
    "irregular",
    "ellipticity",
    "s0Likelihood",
    "notes",
)


class ExportFormatError(ValueError):
    """Raised when structured data cannot be turned back into items."""


def item_to_dict(item: AnnotatedItem) -> Dict[str, Any]:
    """Serialize one item with every field, features nested."""
    return {
        "id": item.id,
        "displayName": item.display_name,
        "imageRef": item.image_ref,
        "features": item.features.to_dict(),
        "suggestedLabel": item.suggested_label,
        "finalLabel": item.final_label,
        "confidence": item.confidence,
        "notes": item.notes,
    }


def item_from_dict(data: Mapping[str, Any]) -> AnnotatedItem:
    """Inverse of :func:`item_to_dict`. The stored suggestion is ignored."""
    if not isinstance(data, Mapping):
        raise ExportFormatError("Item record must be an object")
    item_id = data.get("id")
    if not isinstance(item_id, str) or not item_id:
        raise ExportFormatError("Item record is missing an id")
    features = data.get("features")
    if features is None:
        features = {}
    if not isinstance(features, Mapping):
        raise ExportFormatError(f"Item {item_id} has malformed features")

    confidence = clamp_int(data.get("confidence", 70), 0, 100)
    if confidence is None or isinstance(data.get("confidence"), str):
        raise ExportFormatError(f"Item {item_id} has a non-numeric confidence")

    return AnnotatedItem(
        id=item_id,
        display_name=str(data.get("displayName") or ""),
        image_ref=str(data.get("imageRef") or ""),
        features=FeatureVector.from_dict(features),
        final_label=str(data.get("finalLabel") or ""),
        confidence=confidence,
        notes=str(data.get("notes") or ""),
    )


def to_structured(items: Iterable[AnnotatedItem]) -> bytes:
    """Return the JSON array of all items, in session order.

    Output is ASCII with ``\\u`` escapes, so any Python string (including a
    lone surrogate) serializes and loads back unchanged.
    """
    records = [item_to_dict(item) for item in items]
    return json.dumps(records, ensure_ascii=True, indent=2).encode("ascii")


def from_structured(data: bytes | str) -> List[AnnotatedItem]:
    """Parse a structured export back into items.

    Raises:
        ExportFormatError: If the payload is not valid JSON, not an array of
            item records, or contains duplicate ids.
    """
    try:
        raw = json.loads(data)
    except (TypeError, ValueError) as exc:
        raise ExportFormatError("Structured export is not valid JSON") from exc
    if not isinstance(raw, list):
        raise ExportFormatError("Structured export must be a JSON array")

    items = [item_from_dict(record) for record in raw]
    seen = set()
    for item in items:
        if item.id in seen:
            raise ExportFormatError(f"Duplicate item id {item.id}")
        seen.add(item.id)
    return items


def _cell(value: str) -> str:
    # No quoting in this format: keep each value on one line and in one column.
    return value.replace(",", ";").replace("\r\n", " ").replace("\r", " ").replace("\n", " ")


def _tabular_row(item: AnnotatedItem) -> List[str]:
    f = item.features
    return [
        _cell(item.id),
        _cell(item.display_name),
        _cell(item.final_label),
        item.suggested_label,
        str(item.confidence),
        str(f.bulge_prominence),
        f.arm_tightness.value,
        f.bar_strength.value,
        "true" if f.has_ring else "false",
        "true" if f.is_irregular else "false",
        str(f.elliptical_index),
        str(f.lenticular_likelihood),
        _cell(item.notes),
    ]


def to_tabular(items: Iterable[AnnotatedItem]) -> bytes:
    """Return the fixed 13-column table, header first, rows joined by ``\\n``.

    There is no quoting: commas inside text cells become semicolons and line
    breaks become spaces, so every item is exactly one row. Characters UTF-8
    cannot encode (lone surrogates) are written as ``?``.
    """
    lines = [",".join(TABULAR_COLUMNS)]
    lines.extend(",".join(_tabular_row(item)) for item in items)
    return "\n".join(lines).encode("utf-8", errors="replace")
