"""
History store
Most-recent-first list of dataset snapshots kept under one key of a
KeyValueStore, capped at a fixed number of entries.
"""

import asyncio
import json
from datetime import datetime
from typing import List, Optional

from pydantic import ValidationError

from shared.interfaces.capabilities import KeyValueStore
from shared.models.sortly import HistoryEntry, SortDataset, now_millis
from shared.utils.app_logger import get_logger

logger = get_logger(__name__)

DEFAULT_HISTORY_KEY = "sortly:history"
DEFAULT_MAX_ENTRIES = 30


def default_label(timestamp_ms: Optional[int] = None) -> str:
    moment = datetime.fromtimestamp((timestamp_ms or now_millis()) / 1000)
    return f"Sort — {moment.strftime('%Y-%m-%d')}"


class HistoryStore:
    """
    Upsert/load/delete/clear over a KeyValueStore.

    Writes are read-modify-write of one key, serialised by a per-instance lock.
    Separate processes sharing a Redis key are not coordinated.
    """

    def __init__(
        self,
        store: KeyValueStore,
        key: str = DEFAULT_HISTORY_KEY,
        max_entries: int = DEFAULT_MAX_ENTRIES,
    ):
        self.store = store
        self.key = key
        self.max_entries = max_entries
        self._write_lock = asyncio.Lock()

    async def _read(self) -> List[HistoryEntry]:
        raw = await self.store.get(self.key)
        if not raw:
            return []
        try:
            items = json.loads(raw)
            if not isinstance(items, list):
                raise ValueError("history payload is not a list")
            return [HistoryEntry.model_validate(item) for item in items]
        except (ValueError, ValidationError) as e:
            logger.warning(f"Ignoring unreadable history under '{self.key}': {e}")
            return []

    async def _write(self, entries: List[HistoryEntry]) -> None:
        payload = [entry.to_payload() for entry in entries]
        await self.store.set(self.key, json.dumps(payload, ensure_ascii=False))

    async def save(self, entry: HistoryEntry) -> List[HistoryEntry]:
        """Upsert by id, newest first, truncated to max_entries"""
        async with self._write_lock:
            entries = [existing for existing in await self._read() if existing.id != entry.id]
            entries.insert(0, entry)
            entries = entries[: self.max_entries]
            await self._write(entries)
        logger.info(f"Saved history entry {entry.id} ({len(entries)} stored)")
        return entries

    async def load_all(self) -> List[HistoryEntry]:
        return await self._read()

    async def get(self, entry_id: str) -> Optional[HistoryEntry]:
        for entry in await self._read():
            if entry.id == entry_id:
                return entry
        return None

    async def delete(self, entry_id: str) -> bool:
        async with self._write_lock:
            entries = await self._read()
            remaining = [entry for entry in entries if entry.id != entry_id]
            await self._write(remaining)
        return len(remaining) != len(entries)

    async def clear(self) -> None:
        async with self._write_lock:
            await self._write([])

    @staticmethod
    def snapshot(dataset: SortDataset, label: Optional[str] = None) -> HistoryEntry:
        """Build a history entry from the current dataset; blank labels get a dated default"""
        chosen = (label if label is not None else dataset.label) or ""
        return HistoryEntry(
            id=dataset.id,
            label=chosen.strip() or default_label(),
            columns=list(dataset.columns),
            rows=[dict(row) for row in dataset.rows],
            sort_rules=list(dataset.sort_rules),
            created_at=now_millis(),
        )
