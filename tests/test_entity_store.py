import copy
import json
import time

import pytest

from src.classwork.db.entity_store import EntityStore
from src.classwork.exceptions import SnapshotLoadError, Unavailable

COLLECTIONS = ["users", "quizzes", "quizStudents"]


def make_store(path=None, flush_delay=None):
    return EntityStore(snapshot_path=path, flush_delay=flush_delay, collections=COLLECTIONS)


def test_reads_are_empty_until_initialized(tmp_path):
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps({"users": [{"id": "u1"}]}))
    store = make_store(path)

    assert store.get("users") == []
    assert store.get_by_id("users", "u1") is None
    with pytest.raises(Unavailable):
        store.put("users", {"id": "u2"})

    store.initialize()
    assert [u["id"] for u in store.get("users")] == ["u1"]


def test_initialize_is_idempotent(tmp_path):
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps({"users": [{"id": "u1"}]}))
    store = make_store(path)
    store.initialize()
    store.put("users", {"id": "u2"})

    store.initialize()
    assert {u["id"] for u in store.get("users")} == {"u1", "u2"}


def test_missing_snapshot_means_empty_store(tmp_path):
    store = make_store(tmp_path / "nope.json")
    store.initialize()
    assert store.initialized
    assert store.get("quizzes") == []


def test_bad_snapshot_leaves_store_uninitialized(tmp_path):
    path = tmp_path / "snapshot.json"
    path.write_text("{not json")
    store = make_store(path)

    with pytest.raises(SnapshotLoadError):
        store.initialize()
    assert not store.initialized

    path.write_text(json.dumps({"users": []}))
    store.initialize()
    assert store.initialized


def test_snapshot_records_need_ids(tmp_path):
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps({"users": [{"email": "x@example.com"}]}))
    with pytest.raises(SnapshotLoadError):
        make_store(path).initialize()


def test_put_replaces_by_id_and_appends_otherwise():
    store = make_store()
    store.initialize()
    store.put("users", {"id": "u1", "firstName": "Ann"})
    store.put("users", {"id": "u2", "firstName": "Ben"})
    store.put("users", {"id": "u1", "firstName": "Anna"})

    users = store.get("users")
    assert [u["id"] for u in users] == ["u1", "u2"]
    assert store.get_by_id("users", "u1")["firstName"] == "Anna"


def test_reads_return_copies():
    store = make_store()
    store.initialize()
    store.put("users", {"id": "u1", "firstName": "Ann"})

    store.get_by_id("users", "u1")["firstName"] = "changed"
    assert store.get_by_id("users", "u1")["firstName"] == "Ann"


def test_get_by_foreign_key():
    store = make_store()
    store.initialize()
    store.put("quizStudents", {"id": "a", "quizId": "q1", "studentId": "s1"})
    store.put("quizStudents", {"id": "b", "quizId": "q2", "studentId": "s1"})
    store.put("quizStudents", {"id": "c", "quizId": "q1", "studentId": "s2"})

    assert [r["id"] for r in store.get_by_foreign_key("quizStudents", "quizId", "q1")] == ["a", "c"]


def test_delete_and_delete_where():
    store = make_store()
    store.initialize()
    for record_id, quiz_id in [("a", "q1"), ("b", "q1"), ("c", "q2")]:
        store.put("quizStudents", {"id": record_id, "quizId": quiz_id})

    store.delete("quizStudents", "missing")
    store.delete("quizStudents", "c")
    assert store.delete_where("quizStudents", lambda r: r["quizId"] == "q1") == 2
    assert store.get("quizStudents") == []


def test_transaction_rolls_back_on_error():
    store = make_store()
    store.initialize()
    store.put("users", {"id": "u1"})

    with pytest.raises(RuntimeError):
        with store.transaction():
            store.put("users", {"id": "u2"})
            store.delete("users", "u1")
            raise RuntimeError("boom")

    assert [u["id"] for u in store.get("users")] == ["u1"]


def test_nested_transactions_share_one_backup(monkeypatch):
    store = make_store()
    store.initialize()
    store.put("users", {"id": "u1"})

    backups = []
    deepcopy = copy.deepcopy

    def counting_deepcopy(value, *args, **kwargs):
        if value is store._data:
            backups.append(value)
        return deepcopy(value, *args, **kwargs)

    monkeypatch.setattr(copy, "deepcopy", counting_deepcopy)
    with pytest.raises(RuntimeError):
        with store.transaction():
            for record_id in ["u2", "u3", "u4"]:
                with store.transaction():
                    store.put("users", {"id": record_id})
            raise RuntimeError("boom")
    monkeypatch.undo()

    assert len(backups) == 1
    assert [u["id"] for u in store.get("users")] == ["u1"]


def test_synchronous_flush_writes_snapshot(tmp_path):
    path = tmp_path / "snapshot.json"
    store = make_store(path, flush_delay=0)
    store.initialize()
    store.put("users", {"id": "u1", "firstName": "Ann"})

    assert json.loads(path.read_text())["users"] == [{"id": "u1", "firstName": "Ann"}]


def test_no_flush_without_delay(tmp_path):
    path = tmp_path / "snapshot.json"
    store = make_store(path, flush_delay=None)
    store.initialize()
    store.put("users", {"id": "u1"})
    store.close()

    assert not path.exists()


def test_debounced_flush_coalesces_writes(tmp_path):
    path = tmp_path / "snapshot.json"
    store = make_store(path, flush_delay=0.2)
    store.initialize()
    store.put("users", {"id": "u1"})
    store.put("users", {"id": "u2"})
    assert not path.exists()

    deadline = time.time() + 5
    while not path.exists() and time.time() < deadline:
        time.sleep(0.05)
    assert [u["id"] for u in json.loads(path.read_text())["users"]] == ["u1", "u2"]
    assert store._timer is None


def test_close_flushes_pending_changes(tmp_path):
    path = tmp_path / "snapshot.json"
    store = make_store(path, flush_delay=60)
    store.initialize()
    store.put("users", {"id": "u1"})
    store.close()

    assert [u["id"] for u in json.loads(path.read_text())["users"]] == ["u1"]


def test_flushed_snapshot_reloads(tmp_path):
    path = tmp_path / "snapshot.json"
    store = make_store(path, flush_delay=0)
    store.initialize()
    store.put("quizzes", {"id": "q1", "streamItemId": "si1"})

    reloaded = make_store(path)
    reloaded.initialize()
    assert reloaded.get_by_id("quizzes", "q1") == {"id": "q1", "streamItemId": "si1"}


def test_export_import_and_clear():
    store = make_store()
    store.import_data({"users": [{"id": "u1"}]})
    assert store.initialized
    exported = store.export_data()
    assert exported["users"] == [{"id": "u1"}]
    assert exported["quizzes"] == []

    store.clear()
    assert store.get("users") == []


def test_late_timer_flush_keeps_the_newer_timer(tmp_path):
    path = tmp_path / "snapshot.json"
    store = make_store(path, flush_delay=60)
    store.initialize()
    store.put("users", {"id": "u1"})
    stale = store._timer
    store.put("users", {"id": "u2"})
    pending = store._timer
    assert pending is not stale

    # The replaced timer's callback still runs once it has fired.
    stale.function()
    assert store._timer is pending
    assert [u["id"] for u in json.loads(path.read_text())["users"]] == ["u1", "u2"]

    store.close()
    assert pending.finished.is_set()
    assert store._timer is None
