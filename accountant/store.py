"""Ledger persistence: one record per chat.

Every store provides:
    load(chat_id) -> Ledger | None
    save(ledger)           # raises StoreError on failure

The router serializes load/save per chat, so stores only need to keep
their own files or collections consistent.
"""

import json
import threading
from pathlib import Path

from accountant.ledger import Ledger


class StoreError(Exception):
    """A ledger could not be loaded or saved."""


class MemoryLedgerStore:
    """Keeps serialized ledgers in a dict. Used by tests and throwaway runs."""

    def __init__(self):
        self._records = {}
        self._lock = threading.Lock()

    def load(self, chat_id):
        with self._lock:
            data = self._records.get(chat_id)
        return Ledger.from_dict(data) if data is not None else None

    def save(self, ledger):
        with self._lock:
            self._records[ledger.chat_id] = ledger.to_dict()

    def __len__(self):
        return len(self._records)


class JsonLedgerStore:
    """All ledgers in a single JSON file, keyed by chat id.

    Writes go to a .tmp file which is then renamed over the original.
    """

    def __init__(self, path):
        self.path = Path(path)
        self._lock = threading.Lock()

    def _read(self):
        """Read the whole file. Must be called with _lock held."""
        if not self.path.exists():
            return {}
        try:
            records = json.loads(self.path.read_text())
        except (json.JSONDecodeError, OSError) as e:
            raise StoreError(f"Cannot read {self.path}: {e}") from e
        if not isinstance(records, dict):
            raise StoreError(f"Cannot read {self.path}: expected an object of chat records")
        return records

    def load(self, chat_id):
        with self._lock:
            data = self._read().get(str(chat_id))
        if data is None:
            return None
        try:
            return Ledger.from_dict(data)
        except (AttributeError, KeyError, TypeError, ValueError, ArithmeticError) as e:
            raise StoreError(f"Corrupt ledger for chat {chat_id}: {e}") from e

    def save(self, ledger):
        with self._lock:
            records = self._read()
            records[str(ledger.chat_id)] = ledger.to_dict()
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                tmp = self.path.with_suffix(".tmp")
                tmp.write_text(json.dumps(records, indent=2) + "\n")
                tmp.replace(self.path)
            except OSError as e:
                raise StoreError(f"Cannot write {self.path}: {e}") from e
