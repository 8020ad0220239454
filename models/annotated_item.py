from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from models.feature_vector import FeatureVector
from services.classifier import classify


@dataclass
class RawInput:
    """Uploaded image as delivered by the file layer.

    Attributes:
        name: Original filename shown to the annotator.
        data: Raw image bytes (never decoded).
        image_ref: Optional reference already assigned by an image store.
    """

    name: str
    data: bytes = b""
    image_ref: Optional[str] = None


@dataclass
class AnnotatedItem:
    """In-memory representation of one annotated galaxy image.

    Attributes:
        id: Unique identifier assigned at creation.
        display_name: Filename supplied by the uploader.
        image_ref: Opaque reference to the image bytes.
        features: Feature vector owned by this item.
        final_label: Annotator override; empty string means "use the suggestion".
        confidence: Annotator confidence 0..100.
        notes: Free text.
    """

    id: str
    display_name: str
    image_ref: str
    features: FeatureVector = field(default_factory=FeatureVector)
    final_label: str = ""
    confidence: int = 70
    notes: str = ""

    @property
    def suggested_label(self) -> str:
        """Label derived from the current features."""
        return classify(self.features)
