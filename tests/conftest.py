from datetime import datetime, timedelta

import pytest

from src.classwork.context import ClassworkContext
from src.classwork.db import JsonBackend, LocalBackend, RemoteBackend
from src.classwork.models import StreamItem
from src.classwork.schemas import ClassCreate, StreamItemData, UserCreate

BACKENDS = ["remote", "local", "json"]


def build_backend(kind, tmp_path):
    if kind == "remote":
        return RemoteBackend.from_url("sqlite://")
    if kind == "local":
        return LocalBackend.from_path(tmp_path / "classwork-local.db")
    return JsonBackend.from_snapshot(tmp_path / "snapshot.json", flush_delay=None)


@pytest.fixture(params=BACKENDS)
def backend(request, tmp_path):
    backend = build_backend(request.param, tmp_path)
    backend.initialize()
    yield backend
    backend.close()


@pytest.fixture
def ctx(backend):
    return ClassworkContext(backend)


class Seed:
    """Small school: one teacher, four students in two groups, one class."""

    def __init__(self, ctx):
        self.ctx = ctx
        users = ctx.users
        self.teacher = users.save_user(UserCreate(
            id="t1", email="teacher@example.com", first_name="Ana", last_name="Ruiz", role="teacher",
        ))
        self.alice = users.save_user(UserCreate(
            id="s1", email="alice@example.com", first_name="Alice", last_name="A", assigned_group="G1",
        ))
        self.bob = users.save_user(UserCreate(
            id="s2", email="bob@example.com", first_name="Bob", last_name="B", assigned_group="G1",
        ))
        self.carol = users.save_user(UserCreate(
            id="s3", email="carol@example.com", first_name="Carol", last_name="C", assigned_group="G2",
        ))
        self.dave = users.save_user(UserCreate(
            id="s4", email="dave@example.com", first_name="Dave", last_name="D",
        ))
        self.classroom = ctx.classes.save_class(ClassCreate(title="Biology", teacher_id=self.teacher.id))
        self._clock = datetime(2024, 1, 1, 8, 0)

    def stream_item(self, type="quiz", title="Item", class_id=None, **extra):
        item = self.ctx.stream.save_stream_item(StreamItemData(
            class_id=class_id or self.classroom.id,
            type=type,
            title=title,
            author_id=self.teacher.id,
            **extra,
        ))
        # Deterministic creation order for listings.
        self._clock += timedelta(minutes=1)
        stored = self.ctx.backend.get(StreamItem, item.id)
        stored.created_at = self._clock
        self.ctx.backend.save(stored)
        return stored


@pytest.fixture
def seed(ctx):
    return Seed(ctx)
