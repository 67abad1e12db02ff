"""Recent selections: bounded, namespaced most-recently-used id lists.

A ``RecentSelectionsManager`` talks to a persistence backend exposing
``load() -> list[str]`` and ``save(ids)``. Backends are usually views of a
keyed store (memory, JSON file, SQL table) bound to one namespace, so
managers sharing a namespace see each other's updates.

Recency is a UX nicety: storage failures are logged and the manager keeps
working from its in-session list.
"""
from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from functools import lru_cache
from pathlib import Path
from typing import Protocol, Sequence

from sqlalchemy import Engine

from .config import RecentBackend, Settings, settings
from .db import get_engine, get_session_factory
from .models import Base, RecentSelection

logger = logging.getLogger(__name__)


class PersistenceBackend(Protocol):
    """Storage for one namespace's id list."""

    def load(self) -> list[str]: ...

    def save(self, ids: list[str]) -> None: ...


class SelectionStore(Protocol):
    """Storage keyed by namespace."""

    def load(self, namespace: str) -> object: ...

    def save(self, namespace: str, ids: list[str]) -> None: ...


class NamespacedBackend:
    """Binds a ``SelectionStore`` to a single namespace."""

    def __init__(self, store: SelectionStore, namespace: str) -> None:
        self.store = store
        self.namespace = namespace

    def load(self) -> list[str]:
        return self.store.load(self.namespace)  # type: ignore[return-value]

    def save(self, ids: list[str]) -> None:
        self.store.save(self.namespace, ids)


class MemoryStore:
    """Process-local store."""

    def __init__(self) -> None:
        self._data: dict[str, list[str]] = {}
        self._lock = threading.Lock()

    def load(self, namespace: str) -> list[str]:
        with self._lock:
            return list(self._data.get(namespace, []))

    def save(self, namespace: str, ids: list[str]) -> None:
        with self._lock:
            self._data[namespace] = list(ids)

    def backend(self, namespace: str) -> NamespacedBackend:
        return NamespacedBackend(self, namespace)


class JsonFileStore:
    """One JSON object ``{namespace: [ids]}`` in a local file.

    Saves write a temporary file next to the target and atomically
    replace it.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    def _read_all(self) -> dict[str, object]:
        if not self.path.exists():
            return {}
        data = json.loads(self.path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"{self.path} does not hold a JSON object")
        return data

    def load(self, namespace: str) -> object:
        with self._lock:
            return self._read_all().get(namespace, [])

    def save(self, namespace: str, ids: list[str]) -> None:
        with self._lock:
            try:
                data = self._read_all()
            except ValueError as e:
                logger.warning(f"Replacing unreadable recent-selection file {self.path}: {e}")
                data = {}
            data[namespace] = list(ids)

            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    json.dump(data, fh, ensure_ascii=False)
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise

    def backend(self, namespace: str) -> NamespacedBackend:
        return NamespacedBackend(self, namespace)


class SqlStore:
    """``recent_selections`` table through SQLAlchemy."""

    def __init__(self, engine: Engine | None = None) -> None:
        self.engine = engine or get_engine()
        Base.metadata.create_all(self.engine)
        self._session_factory = get_session_factory(self.engine)

    def load(self, namespace: str) -> object:
        with self._session_factory() as session:
            row = session.get(RecentSelection, namespace)
            return list(row.ids) if row is not None else []

    def save(self, namespace: str, ids: list[str]) -> None:
        with self._session_factory() as session:
            session.merge(RecentSelection(namespace=namespace, ids=list(ids)))
            session.commit()

    def backend(self, namespace: str) -> NamespacedBackend:
        return NamespacedBackend(self, namespace)


@lru_cache(maxsize=1)
def default_memory_store() -> MemoryStore:
    """Process-wide memory store shared by all default managers."""
    return MemoryStore()


def open_backend(namespace: str, cfg: Settings | None = None) -> NamespacedBackend:
    """Backend for ``namespace`` using the configured store type.

    If the configured store cannot be opened (e.g. the database is
    unreachable), the process memory store is used instead.
    """
    cfg = cfg or settings
    kind = cfg.recent.backend

    try:
        if kind == RecentBackend.JSON:
            return JsonFileStore(cfg.recent.json_path).backend(namespace)
        if kind == RecentBackend.SQL:
            return SqlStore(get_engine(cfg.recent.db_url)).backend(namespace)
    except Exception as e:
        logger.warning(
            f"Failed to open {kind.value} recent-selection store, using memory: {e}",
            extra={"namespace": namespace},
        )
    return default_memory_store().backend(namespace)


def recent_namespace(category: str, locale: str, prefix: str | None = None) -> str:
    """Namespace isolating history per (category, locale) pair."""
    return f"{prefix or settings.recent.namespace_prefix}-{category}-{locale}"


class RecentSelectionsManager:
    """Most-recently-used id list for one namespace.

    Every read goes back to the backend, so several managers over the
    same namespace stay in step. If the backend fails or returns garbage,
    the manager falls back to its own in-session list.
    """

    def __init__(
        self,
        namespace: str,
        capacity: int | None = None,
        backend: PersistenceBackend | None = None,
    ) -> None:
        """Initialize manager.

        Args:
            namespace: Storage key, see ``recent_namespace``
            capacity: Max ids kept (default ``settings.recent.capacity``)
            backend: Persistence backend (default from settings)
        """
        self.namespace = namespace
        self.capacity = max(0, capacity if capacity is not None else settings.recent.capacity)
        self._backend = backend if backend is not None else open_backend(namespace)
        self._lock = threading.RLock()
        self._ids: list[str] = []
        self._ids = self._load()

    def _sanitize(self, raw: object) -> list[str] | None:
        if not isinstance(raw, (list, tuple)):
            return None
        ids: list[str] = []
        for entry in raw:
            if isinstance(entry, str) and entry not in ids:
                ids.append(entry)
        return ids[:self.capacity]

    def _load(self) -> list[str]:
        try:
            raw = self._backend.load()
        except Exception as e:
            logger.warning(
                f"Failed to load recent selections: {e}",
                extra={"namespace": self.namespace},
            )
            return list(self._ids)

        ids = self._sanitize(raw)
        if ids is None:
            logger.warning(
                f"Ignoring corrupt recent selections of type {type(raw).__name__}",
                extra={"namespace": self.namespace},
            )
            return list(self._ids)
        return ids

    def _save(self, ids: Sequence[str]) -> None:
        try:
            self._backend.save(list(ids))
        except Exception as e:
            logger.warning(
                f"Failed to save recent selections: {e}",
                extra={"namespace": self.namespace},
            )

    def get_recent(self) -> list[str]:
        """Up to ``capacity`` ids, most recent first."""
        with self._lock:
            self._ids = self._load()
            return list(self._ids)

    def add_recent(self, item_id: str) -> None:
        """Move ``item_id`` to the front, dropping the oldest beyond capacity."""
        item_id = str(item_id)
        with self._lock:
            current = self.get_recent()
            if current and current[0] == item_id:
                return

            updated = [item_id] + [i for i in current if i != item_id]
            self._ids = updated[:self.capacity]
            self._save(self._ids)
            logger.debug(f"Recent selection {item_id!r} stored", extra={"namespace": self.namespace})

    def clear_recent(self) -> None:
        """Forget every recent selection in this namespace."""
        with self._lock:
            self._ids = []
            self._save([])
