# File: src/classwork/db/json_backend.py
import logging
from functools import lru_cache
from pathlib import Path
from typing import FrozenSet, List, Optional, Type, Union

from pydantic.alias_generators import to_camel
from sqlmodel import SQLModel

from src.classwork.db.base import Backend, ChildReplacement, M, matches, normalize_criteria
from src.classwork.db.codec import from_document, to_document
from src.classwork.db.entity_store import EntityStore
from src.classwork.exceptions import Conflict, Unavailable
from src.classwork.models import COLLECTIONS, collection_of, relation_columns, unique_keys

logger = logging.getLogger(__name__)


def _validate_document(collection: str, document: dict) -> None:
    model = COLLECTIONS.get(collection)
    if model is not None:
        from_document(model, document)


@lru_cache(maxsize=None)
def _lookup_fields(model: Type[SQLModel]) -> FrozenSet[str]:
    """
    Relation columns that are required or default to None. A snapshot record
    missing one of these can never equal a string criterion, so the raw
    documents can be narrowed on them before decoding.
    """
    fields = model.model_fields
    return frozenset(
        name
        for name in relation_columns(model)
        if fields[name].is_required() or (fields[name].default is None and fields[name].default_factory is None)
    )


class JsonBackend(Backend):
    """Backend over the in-memory EntityStore. Development only, not durable."""

    name = "json"

    def __init__(self, store: EntityStore):
        self.store = store

    @classmethod
    def from_snapshot(cls, snapshot_path: Optional[Union[str, Path]], flush_delay: Optional[float] = None):
        store = EntityStore(
            snapshot_path=snapshot_path,
            flush_delay=flush_delay,
            collections=COLLECTIONS.keys(),
            validate=_validate_document,
        )
        return cls(store)

    def initialize(self) -> None:
        self.store.initialize()

    def close(self) -> None:
        self.store.close()

    @property
    def is_ready(self) -> bool:
        return self.store.initialized

    def _require_ready(self) -> None:
        if not self.store.initialized:
            raise Unavailable("JSON store is still loading; retry once it is initialized")

    # ─── Reads (empty until the store is loaded) ──────────────────

    def get(self, model: Type[M], key: str) -> Optional[M]:
        document = self.store.get_by_id(collection_of(model), key)
        return from_document(model, document) if document else None

    def list(self, model: Type[M], **criteria) -> List[M]:
        criteria = normalize_criteria(criteria)
        collection = collection_of(model)
        # Narrow on the first string lookup, then filter the decoded records.
        lookups = _lookup_fields(model)
        narrowing = next(
            ((field, value) for field, value in criteria.items() if field in lookups and isinstance(value, str)),
            None,
        )
        if narrowing:
            documents = self.store.get_by_foreign_key(collection, to_camel(narrowing[0]), narrowing[1])
        else:
            documents = self.store.get(collection)
        records = [from_document(model, document) for document in documents]
        return [record for record in records if matches(record, criteria)]

    # ─── Writes ───────────────────────────────────────────────────

    def _check_unique(self, record: SQLModel) -> None:
        model = type(record)
        for key in unique_keys(model):
            values = {field: getattr(record, field) for field in key}
            if any(value is None for value in values.values()):
                continue
            clash = [other for other in self.list(model, **values) if other.id != record.id]
            if clash:
                raise Conflict(f"{model.__name__} with {values} already exists")

    def save(self, record: M) -> M:
        self._require_ready()
        model = type(record)
        document = to_document(record)
        with self.store.transaction():
            self._check_unique(record)
            self.store.put(collection_of(model), document)
        return from_document(model, document)

    def delete(self, model: Type[SQLModel], key: str) -> None:
        self._require_ready()
        self.store.delete(collection_of(model), key)

    def delete_where(self, model: Type[SQLModel], **criteria) -> int:
        self._require_ready()
        doomed = {record.id for record in self.list(model, **criteria)}
        if not doomed:
            return 0
        return self.store.delete_where(collection_of(model), lambda document: document.get("id") in doomed)

    def replace_children(self, parent: M, *replacements: ChildReplacement) -> M:
        self._require_ready()
        with self.store.transaction():
            saved = self.save(parent)
            for replacement in replacements:
                self.delete_where(replacement.model, **replacement.criteria)
                for child in replacement.records:
                    self.save(child)
        return saved
