"""JSON-file storage for the wardrobe inventory, outfit log and preferences."""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import replace
from pathlib import Path
from typing import Any, Callable

from closet.domain.enums import Category
from closet.domain.models import ClothingItem, Outfit, UserPreferences

logger = logging.getLogger(__name__)

ITEMS_FILE = "items.json"
OUTFITS_FILE = "outfits.json"
PREFERENCES_FILE = "preferences.json"

_IMMUTABLE_ITEM_FIELDS = frozenset({"id", "created_at"})


class ClosetStorage:
    """Owns the closet's durable state.

    Every public method takes the same lock, so a read-modify-write on one
    file is never interleaved with another call on this instance. Unreadable
    files are logged and treated as empty rather than raising.
    """

    def __init__(self, root: Path) -> None:
        self._root = root
        self._root.mkdir(parents=True, exist_ok=True)
        self._lock = asyncio.Lock()

    @property
    def root(self) -> Path:
        return self._root

    def _path(self, name: str) -> Path:
        return self._root / name

    async def _read(self, name: str) -> Any:
        path = self._path(name)
        if not path.exists():
            return None
        try:
            data = await asyncio.to_thread(path.read_text, encoding="utf-8")
            return json.loads(data)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            logger.error("Error reading %s from storage, ignoring its contents: %s", name, exc)
            return None

    async def _write(self, name: str, payload: Any) -> None:
        body = json.dumps(payload, ensure_ascii=False, indent=2)
        await asyncio.to_thread(self._write_file, self._path(name), body)

    @staticmethod
    def _write_file(path: Path, body: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_suffix(path.suffix + ".tmp")
        tmp_path.write_text(body, encoding="utf-8")
        tmp_path.replace(path)

    async def _read_items(self) -> list[ClothingItem]:
        raw = await self._read(ITEMS_FILE)
        if not isinstance(raw, list):
            return []
        items: list[ClothingItem] = []
        for entry in raw:
            try:
                items.append(ClothingItem.from_dict(entry))
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning("Skipping stored clothing item due to validation error: %s", exc)
        return items

    async def _write_items(self, items: list[ClothingItem]) -> None:
        await self._write(ITEMS_FILE, [item.to_dict() for item in items])

    async def _read_outfits(self) -> list[Outfit]:
        raw = await self._read(OUTFITS_FILE)
        if not isinstance(raw, list):
            return []
        outfits: list[Outfit] = []
        for entry in raw:
            try:
                outfits.append(Outfit.from_dict(entry))
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning("Skipping stored outfit due to validation error: %s", exc)
        return outfits

    # Clothing items

    async def list_items(self) -> list[ClothingItem]:
        """Return all items in insertion order."""

        async with self._lock:
            return await self._read_items()

    async def get_item(self, item_id: str) -> ClothingItem | None:
        async with self._lock:
            items = await self._read_items()
        return next((item for item in items if item.id == item_id), None)

    async def items_by_category(self, category: Category | str) -> list[ClothingItem]:
        category = Category(category)
        async with self._lock:
            items = await self._read_items()
        return [item for item in items if item.category is category]

    async def add_item(self, item: ClothingItem) -> None:
        """Append a clothing item to the inventory."""

        async with self._lock:
            items = await self._read_items()
            items.append(item)
            await self._write_items(items)

    async def update_item(self, item_id: str, **changes: Any) -> ClothingItem | None:
        """Apply field changes to an item, re-validating it. Returns ``None`` if absent."""

        blocked = _IMMUTABLE_ITEM_FIELDS.intersection(changes)
        if blocked:
            raise ValueError(f"Fields {sorted(blocked)} cannot be changed.")

        async with self._lock:
            items = await self._read_items()
            for index, item in enumerate(items):
                if item.id == item_id:
                    updated = replace(item, **changes)
                    items[index] = updated
                    await self._write_items(items)
                    return updated
        return None

    async def remove_item(self, item_id: str) -> bool:
        """Delete an item; previously generated outfits keep their snapshots."""

        async with self._lock:
            items = await self._read_items()
            remaining = [item for item in items if item.id != item_id]
            if len(remaining) == len(items):
                return False
            await self._write_items(remaining)
            return True

    # Outfit log

    async def append_outfit(self, outfit: Outfit) -> None:
        async with self._lock:
            await self._append_outfit(outfit)

    async def _append_outfit(self, outfit: Outfit) -> None:
        raw = await self._read(OUTFITS_FILE)
        entries = raw if isinstance(raw, list) else []
        entries.append(outfit.to_dict())
        await self._write(OUTFITS_FILE, entries)

    async def list_outfits(self) -> list[Outfit]:
        """Return the outfit log in insertion order."""

        async with self._lock:
            return await self._read_outfits()

    async def recent_outfits(self, limit: int = 7) -> list[Outfit]:
        """Return up to ``limit`` outfits, newest first."""

        outfits = await self.list_outfits()
        outfits.sort(key=lambda outfit: outfit.generated_at, reverse=True)
        return outfits[:limit]

    async def record_outfit(self, factory: Callable[[list[ClothingItem]], Outfit]) -> Outfit:
        """Build an outfit from the current inventory and log it without interleaving.

        Exceptions raised by ``factory`` propagate and nothing is appended.
        """

        async with self._lock:
            items = await self._read_items()
            outfit = factory(items)
            await self._append_outfit(outfit)
            return outfit

    # Preferences

    async def load_preferences(self) -> UserPreferences:
        async with self._lock:
            return await self._load_preferences()

    async def _load_preferences(self) -> UserPreferences:
        raw = await self._read(PREFERENCES_FILE)
        if not isinstance(raw, dict):
            return UserPreferences()
        try:
            return UserPreferences.from_dict(raw)
        except ValueError as exc:
            logger.warning("Stored preferences are invalid, using defaults: %s", exc)
            return UserPreferences()

    async def save_preferences(self, preferences: UserPreferences) -> None:
        async with self._lock:
            await self._write(PREFERENCES_FILE, preferences.to_dict())

    async def update_preferences(self, **changes: Any) -> UserPreferences:
        """Merge changes into the stored preferences and persist them."""

        async with self._lock:
            current = await self._load_preferences()
            updated = replace(current, **changes)
            await self._write(PREFERENCES_FILE, updated.to_dict())
            return updated

    async def clear_all(self) -> None:
        """Remove every stored file."""

        async with self._lock:
            for name in (ITEMS_FILE, OUTFITS_FILE, PREFERENCES_FILE):
                path = self._path(name)
                if path.exists():
                    await asyncio.to_thread(path.unlink)


__all__ = ["ClosetStorage"]
