"""
Translation history: a newest-first, capacity-bounded log of completed
translations, persisted as one JSON blob in a key-value store.

Storage problems never propagate out of this module. A failed write keeps
the in-memory history intact, and unreadable persisted data loads as an
empty history.
"""

import json
import logging
import time
import uuid
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from lingua_lens import config
from lingua_lens.errors import StorageError
from lingua_lens.storage import KeyValueStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TranslationEntry:
    """
    One completed translation.

    Attributes:
        id: Opaque unique token
        original_text: Text the user asked to translate
        translated_text: Translation returned by the model
        language: Target language name (e.g. "Spanish")
        timestamp: Creation time in epoch milliseconds
    """
    id: str
    original_text: str
    translated_text: str
    language: str
    timestamp: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "originalText": self.original_text,
            "translatedText": self.translated_text,
            "language": self.language,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TranslationEntry":
        """
        Build an entry from its serialized form.

        Raises:
            ValueError: If a field is missing or has the wrong type.
        """
        if not isinstance(data, dict):
            raise ValueError(f"History entry must be an object, got {type(data).__name__}")
        try:
            entry = cls(
                id=data["id"],
                original_text=data["originalText"],
                translated_text=data["translatedText"],
                language=data["language"],
                timestamp=data["timestamp"],
            )
        except KeyError as e:
            raise ValueError(f"History entry is missing field {e}") from e

        for name in ("id", "original_text", "translated_text", "language"):
            if not isinstance(getattr(entry, name), str):
                raise ValueError(f"History entry field '{name}' must be a string")
        if isinstance(entry.timestamp, bool) or not isinstance(entry.timestamp, int):
            raise ValueError("History entry field 'timestamp' must be an integer")
        return entry


class HistoryStore:
    """
    Owns the translation history for one client session.

    The history is loaded from ``store`` on construction and written back
    after every change.
    """

    def __init__(
        self,
        store: KeyValueStore,
        key: str = config.HistoryDefaults.STORAGE_KEY,
        capacity: int = config.HistoryDefaults.CAPACITY,
    ):
        self.store = store
        self.key = key
        self.capacity = capacity
        self._entries: List[TranslationEntry] = []
        self.is_loaded = False
        self._load()

    def _load(self) -> None:
        try:
            raw = self.store.get(self.key)
            if raw is not None and not isinstance(raw, str):
                raise ValueError(f"Expected a serialized string, got {type(raw).__name__}")
            if raw:
                data = json.loads(raw)
                if not isinstance(data, list):
                    raise ValueError(f"Expected a JSON list, got {type(data).__name__}")
                self._entries = [TranslationEntry.from_dict(item) for item in data][: self.capacity]
                logger.info(f"Loaded {len(self._entries)} history entries")
        except (StorageError, ValueError) as e:
            # json.JSONDecodeError is a ValueError
            logger.error(f"Failed to load history from storage: {e}", exc_info=True)
            self._entries = []
        finally:
            self.is_loaded = True

    def _persist(self) -> None:
        payload = json.dumps([entry.to_dict() for entry in self._entries], ensure_ascii=False)
        try:
            self.store.set(self.key, payload)
        except StorageError as e:
            logger.error(f"Failed to save history to storage: {e}", exc_info=True)

    @property
    def entries(self) -> Tuple[TranslationEntry, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, entry_id: str) -> Optional[TranslationEntry]:
        return next((entry for entry in self._entries if entry.id == entry_id), None)

    def add_entry(self, original_text: str, translated_text: str, language: str) -> TranslationEntry:
        """
        Record a completed translation as the newest entry.

        The oldest entries are dropped once the history exceeds its capacity.

        Returns:
            The newly created entry
        """
        entry = TranslationEntry(
            id=uuid.uuid4().hex,
            original_text=original_text,
            translated_text=translated_text,
            language=language,
            timestamp=int(time.time() * 1000),
        )
        self._entries = [entry] + self._entries[: self.capacity - 1]
        self._persist()
        return entry

    def clear_history(self) -> None:
        self._entries = []
        try:
            self.store.delete(self.key)
        except StorageError as e:
            logger.error(f"Failed to clear history from storage: {e}", exc_info=True)
