"""Pantry store: the authoritative, persisted ingredient collection."""

from __future__ import annotations

import logging
import threading
from collections import Counter
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable, Iterator

from .models import Ingredient

if TYPE_CHECKING:
    from .db import KeyValueStore

logger = logging.getLogger(__name__)

PANTRY_KEY = "spicesync_pantry"


class PantryStore:
    """Owns the pantry list and writes it through on every mutation.

    After each mutating call returns, the persisted document deserializes
    to exactly the in-memory list.
    """

    def __init__(self, store: KeyValueStore, key: str = PANTRY_KEY) -> None:
        self._store = store
        self._key = key
        self._items: list[Ingredient] = []
        self._lock = threading.Lock()

    def load(self) -> list[Ingredient]:
        """Read the persisted pantry. A missing record means an empty pantry."""
        with self._lock:
            data = self._store.get(self._key, [])
            self._items = [Ingredient.from_dict(d) for d in data]
            logger.debug("Loaded %d pantry item(s)", len(self._items))
            return list(self._items)

    @property
    def items(self) -> list[Ingredient]:
        """A snapshot copy of the pantry in insertion order."""
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Ingredient]:
        return iter(self.items)

    def get(self, item_id: str) -> Ingredient | None:
        for item in self._items:
            if item.id == item_id:
                return item
        return None

    def add(self, items: Iterable[Ingredient]) -> None:
        """Append items to the end of the pantry and persist.

        Raises:
            ValueError: If an item's id is already in the pantry.
        """
        new_items = list(items)
        with self._lock:
            updated = self._items + new_items
            _check_unique(updated)
            self._commit(updated)
        logger.info("Added %d item(s) to pantry", len(new_items))

    def remove(self, item_id: str) -> bool:
        """Remove the item with ``item_id``. Returns False if it was absent."""
        with self._lock:
            updated = [i for i in self._items if i.id != item_id]
            removed = len(updated) != len(self._items)
            self._commit(updated)
        if removed:
            logger.info("Removed pantry item %s", item_id)
        return removed

    def replace(self, items: Iterable[Ingredient]) -> None:
        """Set the whole pantry at once and persist.

        Raises:
            ValueError: If ids are not unique.
        """
        updated = list(items)
        with self._lock:
            _check_unique(updated)
            self._commit(updated)
        logger.info("Replaced pantry with %d item(s)", len(updated))

    def clear(self) -> None:
        self.replace([])

    def _commit(self, updated: list[Ingredient]) -> None:
        # Persist first so a failed write leaves memory untouched
        self._store.set(self._key, [i.to_dict() for i in updated])
        self._items = updated


def _check_unique(items: list[Ingredient]) -> None:
    counts = Counter(i.id for i in items)
    dupes = [item_id for item_id, n in counts.items() if n > 1]
    if dupes:
        raise ValueError(f"Duplicate ingredient id(s): {', '.join(dupes)}")


def filter_pantry(
    items: Iterable[Ingredient], category: str = "all", search: str = ""
) -> list[Ingredient]:
    """Filter by category (``all`` keeps everything) and name substring."""
    wanted = category.strip().lower()
    needle = search.strip().lower()
    return [
        item
        for item in items
        if (wanted in ("", "all") or item.category.lower() == wanted)
        and needle in item.name.lower()
    ]


@dataclass
class PantrySummary:
    total: int
    expiring_soon: int
    by_category: dict[str, int] = field(default_factory=dict)


def pantry_summary(items: Iterable[Ingredient]) -> PantrySummary:
    items = list(items)
    return PantrySummary(
        total=len(items),
        expiring_soon=sum(1 for i in items if i.freshness == "Expiring Soon"),
        by_category=dict(Counter(i.category for i in items)),
    )
