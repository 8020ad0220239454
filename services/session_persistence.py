"""Durable mirror of the annotation session in a key/value store."""

from __future__ import annotations

import logging
import os
from typing import Iterable, List, Optional, Protocol

from models.annotated_item import AnnotatedItem
from services.exporter import ExportFormatError, from_structured, to_structured

LOGGER = logging.getLogger(__name__)
DEFAULT_SESSION_KEY = "hubble_annotator.session"


class KeyValueStore(Protocol):
    async def get(self, key: str) -> Optional[bytes]:
        ...

    async def put(self, key: str, value: bytes) -> None:
        ...


class SessionPersistence:
    """Load the session once at startup and mirror it after every change.

    Neither direction ever raises: an unreadable store loads as an empty
    session and a failed save is logged and skipped, leaving the in-memory
    session authoritative.
    """

    def __init__(self, kv: KeyValueStore, key: Optional[str] = None) -> None:
        self.kv = kv
        self.key = key or os.getenv("SESSION_KEY") or DEFAULT_SESSION_KEY

    async def load(self) -> List[AnnotatedItem]:
        """Return the stored items, or an empty list if absent or malformed."""
        try:
            raw = await self.kv.get(self.key)
        except Exception:
            LOGGER.warning("Could not read stored session %r; starting empty", self.key, exc_info=True)
            return []
        if not raw:
            return []
        try:
            items = from_structured(raw)
        except ExportFormatError as exc:
            LOGGER.warning("Stored session %r is malformed (%s); starting empty", self.key, exc)
            return []
        LOGGER.info("Restored %d annotated items from %r", len(items), self.key)
        return items

    async def save(self, items: Iterable[AnnotatedItem]) -> bool:
        """Write the full snapshot. Returns False when the write was skipped."""
        try:
            payload = to_structured(items)
            await self.kv.put(self.key, payload)
        except Exception:
            LOGGER.warning("Could not save session %r; keeping in-memory state only", self.key, exc_info=True)
            return False
        return True
