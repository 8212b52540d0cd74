from __future__ import annotations

"""Results Manager: the persistence contract and an in-memory store.

`SessionStore` is what the session manager talks to. `ResultManager`
keeps records in memory; `parquet_store.ParquetSessionStore` writes them
to disk through the `storage` package. Swap stores without changing call
sites.
"""

import threading
from typing import Dict, List, Optional, Protocol, Tuple

from ..errors import PersistenceFailure
from .schema import SessionRecord


class SessionStore(Protocol):
    def save(self, record: SessionRecord) -> None:
        """Persist one record; raise PersistenceFailure on error."""

    def load_history(self, user_id: Optional[str], game_kind: str) -> List[SessionRecord]:
        """Records for (user, game), oldest first."""


class ResultManager:
    def __init__(self) -> None:
        self._records: Dict[Tuple[Optional[str], str], List[SessionRecord]] = {}
        self._ids: set[str] = set()
        self._lock = threading.Lock()

    def save(self, record: SessionRecord) -> None:
        if not record.game_kind:
            raise PersistenceFailure("record has no game kind")
        with self._lock:
            if record.session_id and record.session_id in self._ids:
                # last write wins
                for recs in self._records.values():
                    recs[:] = [r for r in recs if r.session_id != record.session_id]
            bucket = self._records.setdefault((record.user_id, record.game_kind), [])
            bucket.append(record)
            bucket.sort(key=lambda r: r.played_at)
            if record.session_id:
                self._ids.add(record.session_id)

    def load_history(self, user_id: Optional[str], game_kind: str) -> List[SessionRecord]:
        with self._lock:
            return list(self._records.get((user_id, game_kind), []))

    def all_records(self) -> List[SessionRecord]:
        with self._lock:
            out = [r for recs in self._records.values() for r in recs]
        return sorted(out, key=lambda r: r.played_at)
