import logging
from typing import Dict, List, Optional, Protocol

from pydantic import TypeAdapter
from sqlalchemy import select
from sqlalchemy.orm import sessionmaker

from ..core.errors import PersistenceDegraded
from ..db.kv_entry import KeyValueEntry
from ..schemas.counts import GroupedCountItem

logger = logging.getLogger(__name__)

_ITEMS = TypeAdapter(List[GroupedCountItem])


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[bytes]: ...

    def set(self, key: str, value: bytes) -> None: ...


class MemoryKeyValueStore:
    """In-process byte store (tests, throwaway sessions)."""

    def __init__(self) -> None:
        self.values: Dict[str, bytes] = {}

    def get(self, key: str) -> Optional[bytes]:
        return self.values.get(key)

    def set(self, key: str, value: bytes) -> None:
        self.values[key] = value


class SqlKeyValueStore:
    """Byte store backed by the ``kv_entries`` table."""

    def __init__(self, session_maker: sessionmaker) -> None:
        self._session_maker = session_maker

    def get(self, key: str) -> Optional[bytes]:
        with self._session_maker() as session:
            res = session.execute(select(KeyValueEntry.value).where(KeyValueEntry.key == key))
            return res.scalar_one_or_none()

    def set(self, key: str, value: bytes) -> None:
        with self._session_maker() as session:
            entry = session.get(KeyValueEntry, key)
            if entry is None:
                session.add(KeyValueEntry(key=key, value=value))
            else:
                entry.value = value
            session.commit()


class LocalStore:
    """Persists the pending count list under a single key.

    Failures are absorbed by default: ``load`` falls back to an empty list and
    ``save`` does nothing, since the remote system is the source of truth once
    a batch is submitted. With ``fail_loud`` both raise ``PersistenceDegraded``.
    """

    def __init__(self, backend: KeyValueStore, key: str = "groupedCountItems", fail_loud: bool = False) -> None:
        self.backend = backend
        self.key = key
        self.fail_loud = fail_loud

    def _degraded(self, action: str, exc: Exception) -> None:
        logger.warning("Local store %s failed for key %r: %s", action, self.key, exc)
        if self.fail_loud:
            raise PersistenceDegraded() from exc

    def load(self) -> List[GroupedCountItem]:
        try:
            raw = self.backend.get(self.key)
            if raw is None:
                return []
            return _ITEMS.validate_json(raw)
        except Exception as e:
            self._degraded("load", e)
            return []

    def save(self, items: List[GroupedCountItem]) -> None:
        try:
            raw = _ITEMS.dump_json(list(items), by_alias=True)
            self.backend.set(self.key, raw)
        except Exception as e:
            self._degraded("save", e)
