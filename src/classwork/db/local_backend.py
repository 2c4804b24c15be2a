# File: src/classwork/db/local_backend.py
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, List, Optional, Type, Union

from pydantic.alias_generators import to_snake
from sqlalchemy import JSON, Column, MetaData, String, Table, UniqueConstraint, select
from sqlalchemy.engine import Connection, Engine
from sqlmodel import SQLModel

from src.classwork.db.base import Backend, ChildReplacement, M, matches, normalize_criteria
from src.classwork.db.codec import from_document, to_document
from src.classwork.db.sql import create_sql_engine, translate_errors, where_clause
from src.classwork.models import COLLECTIONS, relation_columns, unique_keys

logger = logging.getLogger(__name__)


class LocalBackend(Backend):
    """
    Local transactional store: one document table per collection in a SQLite
    file. Each table keeps the record as a JSON document plus indexed copies
    of its relation columns; lookups use the indexes and filter the rest in
    Python, and relations are resolved with a two-step lookup.
    """

    name = "local"

    def __init__(self, engine: Engine):
        self.engine = engine
        self.metadata = MetaData()
        self.tables: Dict[Type[SQLModel], Table] = {
            model: self._define_table(collection, model) for collection, model in COLLECTIONS.items()
        }

    @classmethod
    def from_path(cls, path: Union[str, Path], echo: bool = False):
        return cls(create_sql_engine(f"sqlite:///{path}", echo=echo))

    def _define_table(self, collection: str, model: Type[SQLModel]) -> Table:
        indexed = relation_columns(model)
        columns = [Column("id", String, primary_key=True)]
        columns += [Column(name, String, index=True) for name in indexed]
        columns.append(Column("doc", JSON, nullable=False))
        constraints = [
            UniqueConstraint(*key) for key in unique_keys(model) if all(field in indexed for field in key)
        ]
        return Table(to_snake(collection), self.metadata, *columns, *constraints)

    def initialize(self) -> None:
        with translate_errors("create local tables"):
            self.metadata.create_all(self.engine)
        logger.info(f"Local store ready at {self.engine.url}")

    def close(self) -> None:
        self.engine.dispose()

    @contextmanager
    def _connect(self, action: str):
        with translate_errors(action):
            with self.engine.connect() as conn:
                yield conn

    @contextmanager
    def _begin(self, action: str):
        with translate_errors(action):
            with self.engine.begin() as conn:
                yield conn

    def _row(self, table: Table, record: SQLModel) -> dict:
        row = {column.name: getattr(record, column.name) for column in table.columns if column.name != "doc"}
        row["doc"] = to_document(record)
        return row

    def _select(self, conn: Connection, model: Type[M], criteria: dict) -> List[M]:
        table = self.tables[model]
        statement = select(table.c.doc)
        remaining = {}
        for field, expected in normalize_criteria(criteria).items():
            if field in table.c:
                statement = statement.where(where_clause(table.c[field], expected))
            else:
                remaining[field] = expected
        records = [from_document(model, doc) for doc in conn.execute(statement).scalars()]
        return [record for record in records if matches(record, remaining)]

    def _upsert(self, conn: Connection, record: SQLModel) -> dict:
        table = self.tables[type(record)]
        row = self._row(table, record)
        exists = conn.execute(select(table.c.id).where(table.c.id == record.id)).first()
        if exists:
            conn.execute(table.update().where(table.c.id == record.id).values(**row))
        else:
            conn.execute(table.insert().values(**row))
        return row["doc"]

    def _delete_matching(self, conn: Connection, model: Type[SQLModel], criteria: dict) -> int:
        table = self.tables[model]
        ids = [record.id for record in self._select(conn, model, criteria)]
        if ids:
            conn.execute(table.delete().where(table.c.id.in_(ids)))
        return len(ids)

    def get(self, model: Type[M], key: str) -> Optional[M]:
        table = self.tables[model]
        with self._connect(f"get {model.__name__}") as conn:
            doc = conn.execute(select(table.c.doc).where(table.c.id == key)).scalar_one_or_none()
        return from_document(model, doc) if doc is not None else None

    def list(self, model: Type[M], **criteria) -> List[M]:
        with self._connect(f"list {model.__name__}") as conn:
            return self._select(conn, model, criteria)

    def save(self, record: M) -> M:
        with self._begin(f"save {type(record).__name__}") as conn:
            doc = self._upsert(conn, record)
        return from_document(type(record), doc)

    def delete(self, model: Type[SQLModel], key: str) -> None:
        table = self.tables[model]
        with self._begin(f"delete {model.__name__}") as conn:
            conn.execute(table.delete().where(table.c.id == key))

    def delete_where(self, model: Type[SQLModel], **criteria) -> int:
        with self._begin(f"delete {model.__name__}") as conn:
            return self._delete_matching(conn, model, criteria)

    def replace_children(self, parent: M, *replacements: ChildReplacement) -> M:
        with self._begin(f"replace children of {type(parent).__name__}") as conn:
            doc = self._upsert(conn, parent)
            for replacement in replacements:
                self._delete_matching(conn, replacement.model, replacement.criteria)
            for replacement in replacements:
                for child in replacement.records:
                    self._upsert(conn, child)
        return from_document(type(parent), doc)
