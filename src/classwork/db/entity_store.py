# File: src/classwork/db/entity_store.py
#
# In-memory development store. The whole dataset lives in memory as
# collections of camelCase documents loaded once from a JSON snapshot.
import copy
import json
import logging
import os
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from src.classwork.exceptions import SnapshotLoadError, Unavailable

logger = logging.getLogger(__name__)

Document = Dict[str, Any]


class EntityStore:
    """
    Collection-of-collections keyed by entity type, each unique by "id".

    flush_delay controls persistence back to the snapshot file:
      None  -> never written (pure in-memory store)
      0     -> written synchronously after every change
      > 0   -> debounced; every write restarts a single timer
    """

    def __init__(
        self,
        snapshot_path: Optional[Union[str, Path]] = None,
        flush_delay: Optional[float] = None,
        collections: Iterable[str] = (),
        validate: Optional[Callable[[str, Document], Any]] = None,
    ):
        self.snapshot_path = Path(snapshot_path) if snapshot_path else None
        self.flush_delay = flush_delay
        self._collections = list(collections)
        self._validate = validate
        self._data: Dict[str, List[Document]] = self._empty()
        self._initialized = False
        self._lock = threading.RLock()
        self._timer: Optional[threading.Timer] = None
        self._dirty = False
        self._depth = 0

    def _empty(self) -> Dict[str, List[Document]]:
        return {name: [] for name in self._collections}

    @property
    def initialized(self) -> bool:
        return self._initialized

    # ─── Loading ──────────────────────────────────────────────────

    def initialize(self) -> None:
        """Load the snapshot once. A failed load leaves the store uninitialized."""
        with self._lock:
            if self._initialized:
                return
            loaded = self._read_snapshot()
            data = self._empty()
            data.update(loaded)
            self._data = data
            self._initialized = True
        logger.info(
            f"JSON store initialized from {self.snapshot_path or 'memory'}: "
            f"{len(self._data.get('users', []))} users, {len(self._data.get('classes', []))} classes"
        )

    def _read_snapshot(self) -> Dict[str, List[Document]]:
        if self.snapshot_path is None or not self.snapshot_path.exists():
            return {}
        try:
            with open(self.snapshot_path, encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, ValueError) as e:
            logger.error(f"Could not read snapshot {self.snapshot_path}: {e}", exc_info=True)
            raise SnapshotLoadError(f"Could not read snapshot {self.snapshot_path}: {e}") from e

        if not isinstance(data, dict):
            raise SnapshotLoadError("Snapshot must be a JSON object keyed by collection name")
        for name, records in data.items():
            if not isinstance(records, list):
                raise SnapshotLoadError(f"Snapshot collection '{name}' is not a list")
            for record in records:
                if not isinstance(record, dict) or "id" not in record:
                    raise SnapshotLoadError(f"Snapshot collection '{name}' holds a record without an id")
                if self._validate is not None:
                    try:
                        self._validate(name, record)
                    except ValueError as e:
                        raise SnapshotLoadError(
                            f"Invalid record {record.get('id')} in '{name}': {e}"
                        ) from e
        return data

    # ─── Reads ────────────────────────────────────────────────────

    def get(self, collection: str) -> List[Document]:
        with self._lock:
            return copy.deepcopy(self._data.get(collection, []))

    def get_by_id(self, collection: str, record_id: str) -> Optional[Document]:
        with self._lock:
            for record in self._data.get(collection, []):
                if record.get("id") == record_id:
                    return copy.deepcopy(record)
        return None

    def get_by_foreign_key(self, collection: str, field: str, value: Any) -> List[Document]:
        with self._lock:
            return [
                copy.deepcopy(record)
                for record in self._data.get(collection, [])
                if record.get(field) == value
            ]

    # ─── Writes ───────────────────────────────────────────────────

    def _require_initialized(self) -> None:
        if not self._initialized:
            raise Unavailable("JSON store is not initialized")

    def put(self, collection: str, record: Document) -> None:
        if "id" not in record:
            raise ValueError("Records need an id")
        with self._lock:
            self._require_initialized()
            records = self._data.setdefault(collection, [])
            record = copy.deepcopy(record)
            for index, existing in enumerate(records):
                if existing.get("id") == record["id"]:
                    records[index] = record
                    break
            else:
                records.append(record)
            self._changed()

    def delete(self, collection: str, record_id: str) -> None:
        with self._lock:
            self._require_initialized()
            records = self._data.get(collection, [])
            remaining = [r for r in records if r.get("id") != record_id]
            if len(remaining) != len(records):
                self._data[collection] = remaining
                self._changed()

    def delete_where(self, collection: str, predicate: Callable[[Document], bool]) -> int:
        with self._lock:
            self._require_initialized()
            records = self._data.get(collection, [])
            remaining = [r for r in records if not predicate(r)]
            removed = len(records) - len(remaining)
            if removed:
                self._data[collection] = remaining
                self._changed()
            return removed

    @contextmanager
    def transaction(self):
        """
        All-or-nothing group of writes; collections roll back on error.
        Nested transactions join the outermost one, which holds the only backup.
        """
        with self._lock:
            self._require_initialized()
            backup = copy.deepcopy(self._data) if self._depth == 0 else None
            self._depth += 1
            try:
                yield self
            except BaseException:
                if backup is not None:
                    self._data = backup
                raise
            finally:
                self._depth -= 1
            if self._dirty:
                self._changed()

    def export_data(self) -> Dict[str, List[Document]]:
        with self._lock:
            return copy.deepcopy(self._data)

    def import_data(self, data: Dict[str, List[Document]]) -> None:
        with self._lock:
            merged = self._empty()
            merged.update(copy.deepcopy(data))
            self._data = merged
            self._initialized = True
            self._changed()

    def clear(self) -> None:
        with self._lock:
            self._data = self._empty()
            self._changed()

    # ─── Flushing ─────────────────────────────────────────────────

    def _changed(self) -> None:
        self._dirty = True
        if self._depth or self.flush_delay is None or self.snapshot_path is None:
            return
        if self.flush_delay <= 0:
            self.flush()
            return
        if self._timer is not None:
            self._timer.cancel()
        self._timer = threading.Timer(self.flush_delay, self._flush_from_timer)
        self._timer.daemon = True
        self._timer.start()

    def _flush_from_timer(self) -> None:
        with self._lock:
            # A newer write may already have scheduled a replacement timer.
            if self._timer is threading.current_thread():
                self._timer = None
        try:
            self.flush()
        except Unavailable as e:
            # Nobody awaits the timer thread; the next write schedules a new attempt.
            logger.error(f"Debounced snapshot flush failed: {e.detail}", exc_info=True)

    def flush(self) -> None:
        """Write the current state to the snapshot file (temp file + rename)."""
        with self._lock:
            if self.snapshot_path is None or not self._dirty:
                return
            tmp_path = self.snapshot_path.with_name(self.snapshot_path.name + ".tmp")
            try:
                self.snapshot_path.parent.mkdir(parents=True, exist_ok=True)
                with open(tmp_path, "w", encoding="utf-8") as fh:
                    json.dump(self._data, fh, ensure_ascii=False, indent=2)
                os.replace(tmp_path, self.snapshot_path)
            except OSError as e:
                raise Unavailable(f"Could not write snapshot {self.snapshot_path}: {e}") from e
            self._dirty = False
        logger.info(f"Snapshot saved to {self.snapshot_path}")

    def close(self) -> None:
        """Flush-on-shutdown hook: cancel the pending timer and write what is left."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            if self.flush_delay is not None:
                self.flush()
