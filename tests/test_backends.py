import json

import pytest
from sqlalchemy import DateTime, event

from src.classwork.context import ClassworkContext
from src.classwork.db import JsonBackend, RemoteBackend
from src.classwork.db.sql import create_sql_engine
from src.classwork.exceptions import Conflict, Unavailable
from src.classwork.models import COLLECTIONS, Quiz, QuizStudent, StreamItem, User
from src.classwork.schemas import QuizData, QuizSubmissionData
from tests.conftest import Seed


def test_criteria_semantics(backend):
    backend.save(User(id="u1", email="a@x", assigned_group="G1"))
    backend.save(User(id="u2", email="b@x", assigned_group=None))
    backend.save(User(id="u3", email="c@x", assigned_group="G2", role="teacher"))

    assert {u.id for u in backend.list(User, assigned_group=None)} == {"u2"}
    assert {u.id for u in backend.list(User, id=["u1", "u3"])} == {"u1", "u3"}
    assert {u.id for u in backend.list(User, role="student")} == {"u1", "u2"}
    assert backend.count(User, role="teacher") == 1
    assert backend.find_one(User, email="nobody") is None
    assert backend.get(User, "missing") is None


def test_unique_pairs_conflict(backend):
    backend.save(QuizStudent(id="a", quiz_id="q1", student_id="s1"))
    with pytest.raises(Conflict):
        backend.save(QuizStudent(id="b", quiz_id="q1", student_id="s1"))
    backend.save(QuizStudent(id="a", quiz_id="q1", student_id="s1", source_group="G1"))
    assert backend.get(QuizStudent, "a").source_group == "G1"


def test_replace_children_is_atomic(backend):
    backend.save(StreamItem(id="si1", title="Quiz"))
    quiz = Quiz(id="q1", stream_item_id="si1")
    backend.replace_children(quiz, _students("q1", ["s1", "s2"]))

    quiz.description = "changed"
    duplicate = [QuizStudent(quiz_id="q1", student_id="s3"), QuizStudent(quiz_id="q1", student_id="s3")]
    from src.classwork.db.base import ChildReplacement

    with pytest.raises(Conflict):
        backend.replace_children(quiz, ChildReplacement(QuizStudent, {"quiz_id": "q1"}, duplicate))

    assert {row.student_id for row in backend.list(QuizStudent, quiz_id="q1")} == {"s1", "s2"}
    assert backend.get(Quiz, "q1").description is None


def _students(quiz_id, ids):
    from src.classwork.db.base import ChildReplacement

    return ChildReplacement(
        QuizStudent, {"quiz_id": quiz_id}, [QuizStudent(quiz_id=quiz_id, student_id=i) for i in ids]
    )


def test_list_joined(backend):
    backend.save(StreamItem(id="si1", title="A", class_id="c1"))
    backend.save(StreamItem(id="si2", title="B", class_id="c2"))
    backend.save(Quiz(id="q1", stream_item_id="si1"))
    backend.save(Quiz(id="q2", stream_item_id="si2"))
    assert [q.id for q in backend.list_joined(Quiz, "stream_item_id", StreamItem, class_id="c1")] == ["q1"]


def _scenario(ctx):
    seed = Seed(ctx)
    item = seed.stream_item(title="Shared")
    quiz = ctx.quizzes.save_quiz(QuizData(
        stream_item_id=item.id, assign_to_all=False, assigned_groups=["G1"], selected_students=[seed.dave.id],
    ))
    sub = ctx.quiz_submissions.save_quiz_submission(QuizSubmissionData(
        quiz_id=quiz.id, student_id=seed.alice.id, status="submitted",
    ))
    ctx.quiz_submissions.mark_as_reviewed(sub.id, grade=4)
    return {
        "visible": [
            sorted(q.title for q in ctx.quizzes.get_quizzes_for_student(s.id))
            for s in (seed.alice, seed.bob, seed.carol, seed.dave)
        ],
        "summary": [
            (q.student_count, q.question_count, q.pending_review_count) for q in ctx.quizzes.get_all_quizzes()
        ],
        "status": [s.status for s in ctx.quiz_submissions.get_quiz_submissions_by_quiz(quiz.id)],
        "grades": [(g.points_earned, g.max_points) for g in ctx.grades.get_grades(seed.classroom.id)],
    }


def test_backends_answer_alike(tmp_path):
    from tests.conftest import BACKENDS, build_backend

    results = []
    for kind in BACKENDS:
        (tmp_path / kind).mkdir()
        backend = build_backend(kind, tmp_path / kind)
        backend.initialize()
        try:
            results.append(_scenario(ClassworkContext(backend)))
        finally:
            backend.close()
    assert results[0] == results[1] == results[2]


def test_json_backend_before_initialize(tmp_path):
    backend = JsonBackend.from_snapshot(tmp_path / "snapshot.json")
    assert backend.list(User) == []
    assert not backend.is_ready
    with pytest.raises(Unavailable):
        backend.save(User(email="x@example.com"))


def test_context_survives_bad_snapshot(tmp_path):
    path = tmp_path / "snapshot.json"
    path.write_text("[]")
    ctx = ClassworkContext(JsonBackend.from_snapshot(path))
    ctx.startup()
    assert not ctx.backend.is_ready
    assert ctx.quizzes.get_all_quizzes() == []


def test_json_snapshot_round_trip(tmp_path):
    path = tmp_path / "snapshot.json"
    backend = JsonBackend.from_snapshot(path, flush_delay=0)
    backend.initialize()
    ctx = ClassworkContext(backend)
    seed = Seed(ctx)
    ctx.quizzes.save_quiz(QuizData(stream_item_id=seed.stream_item(title="Saved").id, due_date="2024-04-01"))
    ctx.shutdown()

    snapshot = json.loads(path.read_text())
    assert snapshot["quizzes"][0]["dueDate"] == "2024-04-01"
    assert "streamItemId" in snapshot["quizzes"][0]

    reloaded = ClassworkContext(JsonBackend.from_snapshot(path))
    reloaded.startup()
    assert [q.title for q in reloaded.quizzes.get_all_quizzes()] == ["Saved"]


def test_snapshot_with_invalid_record_is_rejected(tmp_path):
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps({"quizzes": [{"id": "q1", "points": "lots"}]}))
    backend = JsonBackend.from_snapshot(path)
    ctx = ClassworkContext(backend)
    ctx.startup()
    assert not backend.is_ready


def test_snapshot_records_may_omit_defaulted_fields(tmp_path):
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps({
        "users": [
            {"id": "t1", "email": "teacher@example.com", "role": "teacher"},
            {"id": "s1", "email": "student@example.com"},
        ],
        "streamItems": [{"id": "i1", "type": "assignment", "title": "Lab report", "authorId": "t1"}],
        "assignments": [{"id": "a1", "streamItemId": "i1"}],
    }))
    ctx = ClassworkContext(JsonBackend.from_snapshot(path))
    ctx.startup()

    assert [u.id for u in ctx.users.get_all_students()] == ["s1"]
    assert [i.id for i in ctx.stream.load_stream_items()] == ["i1"]
    assert [a.title for a in ctx.assignments.get_all_assignments()] == ["Lab report"]
    assert [a.title for a in ctx.assignments.get_assignments_for_student("s1")] == ["Lab report"]


def test_timestamp_columns_store_naive_utc():
    columns = [
        (model.__name__, column)
        for model in COLLECTIONS.values()
        for column in model.__table__.columns
        if column.name.endswith("_at")
    ]
    assert columns
    for name, column in columns:
        assert type(column.type) is DateTime, f"{name}.{column.name}"
        assert not column.type.timezone


def test_remote_backend_round_trips_naive_timestamps():
    backend = RemoteBackend.from_url("sqlite://")
    backend.initialize()
    try:
        saved = backend.save(User(id="u1", email="a@example.com"))
        stored = backend.get(User, "u1")
        assert stored.created_at.tzinfo is None
        assert stored.created_at == saved.created_at
    finally:
        backend.close()


def _remote_enforcing_foreign_keys():
    engine = create_sql_engine("sqlite://")

    @event.listens_for(engine, "connect")
    def _foreign_keys_on(dbapi_connection, _record):
        dbapi_connection.execute("PRAGMA foreign_keys=ON")

    return RemoteBackend(engine)


def test_stream_item_delete_with_foreign_keys_enforced():
    backend = _remote_enforcing_foreign_keys()
    backend.initialize()
    try:
        ctx = ClassworkContext(backend)
        seed = Seed(ctx)
        item = seed.stream_item(title="Quiz")
        quiz = ctx.quizzes.save_quiz(QuizData(
            stream_item_id=item.id, assign_to_all=False, selected_students=[seed.alice.id],
        ))

        ctx.stream.delete_stream_item(item.id)

        assert ctx.stream.get_stream_item(item.id) is None
        assert ctx.quizzes.get_all_quizzes() == []
        assert ctx.quizzes.get_quizzes_for_student(seed.alice.id) == []
        assert backend.get(Quiz, quiz.id) is not None
    finally:
        backend.close()
