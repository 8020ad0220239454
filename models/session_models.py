"""Session snapshot model for the annotation store."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional, Tuple

from models.annotated_item import AnnotatedItem


@dataclass(frozen=True)
class SessionState:
	"""Immutable snapshot of the annotation session.

	The store replaces the whole snapshot on every mutation, so a reader that
	holds one never sees a half-applied change.
	"""

	items: Tuple[AnnotatedItem, ...] = ()
	selected_id: Optional[str] = None

	def get(self, item_id: Optional[str]) -> Optional[AnnotatedItem]:
		"""Return the item with ``item_id`` or None."""
		for item in self.items:
			if item.id == item_id:
				return item
		return None

	def index_of(self, item_id: str) -> int:
		"""Return the position of ``item_id`` or -1 when absent."""
		for idx, item in enumerate(self.items):
			if item.id == item_id:
				return idx
		return -1

	def __len__(self) -> int:
		return len(self.items)

	def __iter__(self) -> Iterator[AnnotatedItem]:
		return iter(self.items)
