# File: src/classwork/db/sql.py
#
# Helpers shared by the two SQLAlchemy-backed adapters.
import logging
from contextlib import contextmanager
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError, SQLAlchemyError
from sqlalchemy.pool import StaticPool

from src.classwork.exceptions import Conflict, Unavailable

logger = logging.getLogger(__name__)


def create_sql_engine(url: str, echo: bool = False) -> Engine:
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            # One shared connection, otherwise every checkout sees an empty database.
            kwargs["poolclass"] = StaticPool
        return create_engine(url, echo=echo, **kwargs)
    return create_engine(url, echo=echo, pool_pre_ping=True)


def where_clause(column, expected: Any):
    if expected is None:
        return column.is_(None)
    if isinstance(expected, list):
        return column.in_(expected)
    return column == expected


@contextmanager
def translate_errors(action: str):
    """Re-raise storage failures as domain errors."""
    try:
        yield
    except IntegrityError as e:
        logger.warning(f"Integrity error during {action}: {e.orig}")
        raise Conflict(f"{action} violates a uniqueness or relation constraint") from e
    except (OperationalError, InterfaceError) as e:
        logger.error(f"Store unreachable during {action}: {e}", exc_info=True)
        raise Unavailable(f"Store unavailable during {action}") from e
    except SQLAlchemyError as e:
        logger.error(f"Unexpected storage error during {action}: {e}", exc_info=True)
        raise Unavailable(f"Storage error during {action}") from e
