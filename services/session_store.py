"""In-memory annotation session with a persistent mirror."""

from __future__ import annotations

import asyncio
import base64
import copy
import logging
from typing import Any, Callable, List, Mapping, Optional, Sequence
from uuid import uuid4

from models.annotated_item import AnnotatedItem, RawInput
from models.feature_vector import FeatureVector, clamp_int
from models.session_models import SessionState
from services.keyboard import resolve_key
from services.macros import Macro, get_macro
from services.session_persistence import SessionPersistence

LOGGER = logging.getLogger(__name__)

# Item fields the annotator may edit directly, keyed by both spellings.
ITEM_FIELDS = {
	"final_label": "final_label",
	"finalLabel": "final_label",
	"confidence": "confidence",
	"notes": "notes",
}


def data_url_ref(raw: RawInput) -> str:
	"""Opaque reference embedding the bytes as a data URL."""
	encoded = base64.b64encode(raw.data or b"").decode("ascii")
	return f"data:application/octet-stream;base64,{encoded}"


class SessionStore:
	"""Own the ordered annotated items and the current selection.

	Every mutation runs under one lock, replaces the snapshot wholesale and is
	then mirrored to the persistence layer. Operations addressed to an id that
	does not exist are no-ops.
	"""

	def __init__(
		self,
		persistence: Optional[SessionPersistence] = None,
		items: Sequence[AnnotatedItem] = (),
		id_factory: Callable[[], str] = lambda: uuid4().hex,
	) -> None:
		self._persistence = persistence
		self._id_factory = id_factory
		self._lock = asyncio.Lock()
		items = tuple(items)
		self._state = SessionState(items=items, selected_id=items[0].id if items else None)

	@classmethod
	async def restore(cls, persistence: SessionPersistence, **kwargs: Any) -> "SessionStore":
		"""Build a store from whatever the persistence layer holds."""
		items = await persistence.load()
		return cls(persistence=persistence, items=items, **kwargs)

	def snapshot(self) -> SessionState:
		"""Return the current immutable snapshot."""
		return self._state

	def get(self, item_id: str) -> Optional[AnnotatedItem]:
		return self._state.get(item_id)

	async def add_items(self, raw_inputs: Sequence[RawInput]) -> List[AnnotatedItem]:
		"""Create one item per input, in order, and append them to the session."""
		if not raw_inputs:
			return []
		async with self._lock:
			existing = {item.id for item in self._state.items}
			created: List[AnnotatedItem] = []
			for raw in raw_inputs:
				item_id = self._id_factory()
				while item_id in existing:
					item_id = self._id_factory()
				existing.add(item_id)
				created.append(
					AnnotatedItem(
						id=item_id,
						display_name=raw.name,
						image_ref=raw.image_ref or data_url_ref(raw),
						features=FeatureVector(),
					)
				)
			selected_id = self._state.selected_id
			if selected_id is None:
				selected_id = created[0].id
			await self._commit(SessionState(items=self._state.items + tuple(created), selected_id=selected_id))
			LOGGER.info("Added %d annotated items", len(created))
			return created

	async def patch_features(self, item_id: str, patch: Mapping[str, Any]) -> Optional[AnnotatedItem]:
		"""Merge a partial feature vector into the item, clamping every value."""
		return await self._update(item_id, lambda item: item.features.apply_patch(patch))

	async def patch_item(self, item_id: str, patch: Mapping[str, Any]) -> Optional[AnnotatedItem]:
		"""Update the final label, confidence or notes of an item.

		Any other key (including the derived suggestion) is ignored.
		"""

		def _apply(item: AnnotatedItem) -> None:
			for key, value in patch.items():
				name = ITEM_FIELDS.get(key)
				if name == "confidence":
					clamped = clamp_int(value, 0, 100)
					if clamped is not None:
						item.confidence = clamped
				elif name is not None:
					setattr(item, name, "" if value is None else str(value))

		return await self._update(item_id, _apply)

	async def apply_macro(self, item_id: str, name: str) -> Optional[AnnotatedItem]:
		"""Apply the named quick-set macro. Raises KeyError for unknown names."""
		macro = get_macro(name)
		return await self._update(item_id, lambda item: self._apply_macro(item, macro))

	async def apply_key(self, item_id: str, key: str) -> Optional[AnnotatedItem]:
		"""Route a single key press to its macro; unbound keys are no-ops."""
		async with self._lock:
			item = self._state.get(item_id)
			if item is None:
				LOGGER.debug("Ignoring key %r for unknown item %s", key, item_id)
				return None
			macro = resolve_key(key, item)
			if macro is None:
				LOGGER.debug("Key %r is not bound", key)
				return None
			return await self._replace(item, lambda target: self._apply_macro(target, macro))

	async def remove_item(self, item_id: str) -> bool:
		"""Remove the item. Removing the selected item clears the selection."""
		async with self._lock:
			if self._state.get(item_id) is None:
				LOGGER.debug("Ignoring removal of unknown item %s", item_id)
				return False
			items = tuple(item for item in self._state.items if item.id != item_id)
			selected_id = None if self._state.selected_id == item_id else self._state.selected_id
			await self._commit(SessionState(items=items, selected_id=selected_id))
			LOGGER.info("Removed annotated item %s", item_id)
			return True

	async def select(self, item_id: Optional[str]) -> bool:
		"""Select an item, or clear the selection with None.

		Unknown ids are ignored and the previous selection is kept. Selection
		is not mirrored to the persistence layer.
		"""
		async with self._lock:
			if item_id is not None and self._state.get(item_id) is None:
				LOGGER.debug("Ignoring selection of unknown item %s", item_id)
				return False
			self._state = SessionState(items=self._state.items, selected_id=item_id)
			return True

	@staticmethod
	def _apply_macro(item: AnnotatedItem, macro: Macro) -> None:
		item.features.apply_patch(macro.patch)
		if macro.final_label is not None:
			item.final_label = macro.final_label

	async def _update(self, item_id: str, mutate: Callable[[AnnotatedItem], None]) -> Optional[AnnotatedItem]:
		async with self._lock:
			item = self._state.get(item_id)
			if item is None:
				LOGGER.debug("Ignoring update of unknown item %s", item_id)
				return None
			return await self._replace(item, mutate)

	async def _replace(self, item: AnnotatedItem, mutate: Callable[[AnnotatedItem], None]) -> AnnotatedItem:
		# Caller holds the lock. Older snapshots keep the untouched original.
		updated = copy.deepcopy(item)
		mutate(updated)
		items = list(self._state.items)
		items[self._state.index_of(item.id)] = updated
		await self._commit(SessionState(items=tuple(items), selected_id=self._state.selected_id))
		return updated

	async def _commit(self, state: SessionState) -> None:
		self._state = state
		if self._persistence is not None:
			await self._persistence.save(state.items)
