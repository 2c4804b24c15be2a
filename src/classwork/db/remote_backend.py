# File: src/classwork/db/remote_backend.py
import logging
from contextlib import contextmanager
from typing import List, Optional, Type

from sqlalchemy import func
from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, select

from src.classwork.db.base import Backend, ChildReplacement, M, normalize_criteria
from src.classwork.db.sql import create_sql_engine, translate_errors, where_clause

# Registers every table on SQLModel.metadata.
import src.classwork.models  # noqa: F401

logger = logging.getLogger(__name__)


def _filtered(statement, model: Type[SQLModel], criteria: dict):
    for field, expected in normalize_criteria(criteria).items():
        statement = statement.where(where_clause(getattr(model, field), expected))
    return statement


class RemoteBackend(Backend):
    """Relational backend: SQLModel sessions against DATABASE_URL."""

    name = "remote"

    def __init__(self, engine: Engine):
        self.engine = engine

    @classmethod
    def from_url(cls, url: str, echo: bool = False):
        return cls(create_sql_engine(url, echo=echo))

    def initialize(self) -> None:
        logging.info("Creating database and tables...")
        with translate_errors("create tables"):
            SQLModel.metadata.create_all(self.engine)
        logging.info("Database tables ready.")

    def close(self) -> None:
        self.engine.dispose()

    @contextmanager
    def _session(self, action: str):
        with translate_errors(action):
            with Session(self.engine, expire_on_commit=False) as session:
                yield session

    def get(self, model: Type[M], key: str) -> Optional[M]:
        with self._session(f"get {model.__name__}") as session:
            return session.get(model, key)

    def list(self, model: Type[M], **criteria) -> List[M]:
        with self._session(f"list {model.__name__}") as session:
            return list(session.exec(_filtered(select(model), model, criteria)).all())

    def list_joined(self, model: Type[M], fk: str, parent: Type[SQLModel], **parent_criteria) -> List[M]:
        statement = select(model).join(parent, getattr(model, fk) == parent.id)
        with self._session(f"list {model.__name__} by {parent.__name__}") as session:
            return list(session.exec(_filtered(statement, parent, parent_criteria)).all())

    def count(self, model: Type[SQLModel], **criteria) -> int:
        statement = _filtered(select(func.count()).select_from(model), model, criteria)
        with self._session(f"count {model.__name__}") as session:
            return session.exec(statement).one()

    def save(self, record: M) -> M:
        with self._session(f"save {type(record).__name__}") as session:
            merged = session.merge(record)
            session.commit()
            return merged

    def delete(self, model: Type[SQLModel], key: str) -> None:
        with self._session(f"delete {model.__name__}") as session:
            row = session.get(model, key)
            if row is not None:
                session.delete(row)
                session.commit()

    def delete_where(self, model: Type[SQLModel], **criteria) -> int:
        with self._session(f"delete {model.__name__}") as session:
            rows = session.exec(_filtered(select(model), model, criteria)).all()
            for row in rows:
                session.delete(row)
            session.commit()
            return len(rows)

    def replace_children(self, parent: M, *replacements: ChildReplacement) -> M:
        with self._session(f"replace children of {type(parent).__name__}") as session:
            saved = session.merge(parent)
            for replacement in replacements:
                stale = session.exec(
                    _filtered(select(replacement.model), replacement.model, replacement.criteria)
                ).all()
                for row in stale:
                    session.delete(row)
            # Deletes go out first so re-inserted unique pairs do not collide.
            session.flush()
            for replacement in replacements:
                for child in replacement.records:
                    session.merge(child)
            session.commit()
            return saved
