from typing import Any, Dict, Type, TypeVar

from pydantic.alias_generators import to_camel, to_snake
from sqlmodel import SQLModel

M = TypeVar("M", bound=SQLModel)


def to_document(record: SQLModel) -> Dict[str, Any]:
    """Snapshot form of a record: JSON-safe values under camelCase keys."""
    data = record.model_dump(mode="json")
    return {to_camel(key): value for key, value in data.items()}


def from_document(model: Type[M], document: Dict[str, Any]) -> M:
    data = {to_snake(key): value for key, value in document.items()}
    return model.model_validate(data)
