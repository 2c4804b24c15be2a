# File: src/classwork/db/base.py
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, List, NamedTuple, Optional, Sequence, Type, TypeVar

from sqlmodel import SQLModel

M = TypeVar("M", bound=SQLModel)


class ChildReplacement(NamedTuple):
    """Delete every `model` row matching `criteria`, then insert `records`."""
    model: Type[SQLModel]
    criteria: Dict[str, Any]
    records: Sequence[SQLModel]


def normalize_criteria(criteria: Dict[str, Any]) -> Dict[str, Any]:
    normalized = {}
    for field, expected in criteria.items():
        if isinstance(expected, (list, tuple, set, frozenset)):
            expected = [item.value if isinstance(item, Enum) else item for item in expected]
        elif isinstance(expected, Enum):
            expected = expected.value
        normalized[field] = expected
    return normalized


def matches(record: SQLModel, criteria: Dict[str, Any]) -> bool:
    for field, expected in criteria.items():
        value = getattr(record, field)
        if expected is None:
            if value is not None:
                return False
        elif isinstance(expected, list):
            if value not in expected:
                return False
        elif value != expected:
            return False
    return True


class Backend(ABC):
    """
    Storage contract shared by every backend.

    Criteria are equality filters on field names. A list/tuple/set value means
    "one of", and None means "is null". Every method returns model instances
    detached from any storage session, shaped identically across backends.
    """

    name = "abstract"

    def initialize(self) -> None:
        pass

    def close(self) -> None:
        pass

    @property
    def is_ready(self) -> bool:
        return True

    @abstractmethod
    def get(self, model: Type[M], key: str) -> Optional[M]:
        ...

    @abstractmethod
    def list(self, model: Type[M], **criteria) -> List[M]:
        ...

    @abstractmethod
    def save(self, record: M) -> M:
        """Insert or replace by id. Raises Conflict on a uniqueness violation."""

    @abstractmethod
    def delete(self, model: Type[SQLModel], key: str) -> None:
        ...

    @abstractmethod
    def delete_where(self, model: Type[SQLModel], **criteria) -> int:
        ...

    @abstractmethod
    def replace_children(self, parent: M, *replacements: ChildReplacement) -> M:
        """Save `parent` and swap its child rows as one atomic unit."""

    def find_one(self, model: Type[M], **criteria) -> Optional[M]:
        rows = self.list(model, **criteria)
        return rows[0] if rows else None

    def list_joined(self, model: Type[M], fk: str, parent: Type[SQLModel], **parent_criteria) -> List[M]:
        # Two-step lookup: resolve parent ids first, then the children.
        parent_ids = [row.id for row in self.list(parent, **parent_criteria)]
        if not parent_ids:
            return []
        return self.list(model, **{fk: parent_ids})

    def count(self, model: Type[SQLModel], **criteria) -> int:
        return len(self.list(model, **criteria))
