import logging

from src.classwork.config.settings import BackendKind, Settings
from src.classwork.db.base import Backend, ChildReplacement
from src.classwork.db.entity_store import EntityStore
from src.classwork.db.json_backend import JsonBackend
from src.classwork.db.local_backend import LocalBackend
from src.classwork.db.remote_backend import RemoteBackend
from src.classwork.exceptions import ValidationFailed

logger = logging.getLogger(__name__)


def create_backend(settings: Settings) -> Backend:
    """Build the one backend this process will use."""
    if settings.backend == BackendKind.REMOTE:
        if not settings.database_url:
            raise ValidationFailed("DATABASE_URL is required for the remote backend")
        backend = RemoteBackend.from_url(settings.database_url, echo=settings.sql_echo)
    elif settings.backend == BackendKind.LOCAL:
        backend = LocalBackend.from_path(settings.local_db_path, echo=settings.sql_echo)
    elif settings.backend == BackendKind.JSON:
        backend = JsonBackend.from_snapshot(settings.json_snapshot_path, flush_delay=settings.json_flush_delay)
    else:
        raise ValidationFailed(f"Unknown backend '{settings.backend}'")
    logger.info(f"Using the {backend.name} backend")
    return backend


__all__ = [
    "Backend",
    "ChildReplacement",
    "EntityStore",
    "JsonBackend",
    "LocalBackend",
    "RemoteBackend",
    "create_backend",
]
