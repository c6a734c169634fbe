"""Tests for snapshot storage."""

import os
from datetime import datetime, timezone

import pytest

from assessment.models import CaseAnswer, SessionSnapshot
from storage import InMemorySnapshotStore, JsonFileSnapshotStore, SnapshotStoreError


def _snapshot():
    return SessionSnapshot(
        assessment_id="quick-quiz",
        answers=[
            (
                "lbp-acute-mechanical",
                CaseAnswer(
                    case_id="lbp-acute-mechanical",
                    selected_imaging=["no-imaging"],
                    flagged=True,
                    time_spent=42,
                ),
            ),
            ("headache-migraine", CaseAnswer(case_id="headache-migraine")),
        ],
        current_case_index=1,
        time_remaining_seconds=318,
        timestamp=datetime(2026, 10, 17, 14, 30, tzinfo=timezone.utc),
    )


@pytest.fixture(params=["memory", "file"])
def any_store(request, tmp_path):
    if request.param == "memory":
        return InMemorySnapshotStore()
    return JsonFileSnapshotStore(tmp_path / "snapshots")


class TestSnapshotStores:
    def test_round_trip(self, any_store):
        snapshot = _snapshot()
        any_store.save("s-1", snapshot)

        assert any_store.load("s-1") == snapshot

    def test_missing_snapshot_is_none(self, any_store):
        assert any_store.load("nope") is None

    def test_last_write_wins(self, any_store):
        any_store.save("s-1", _snapshot())
        newer = _snapshot().model_copy(update={"current_case_index": 0})
        any_store.save("s-1", newer)

        assert any_store.load("s-1").current_case_index == 0

    def test_delete(self, any_store):
        any_store.save("s-1", _snapshot())
        any_store.delete("s-1")
        any_store.delete("s-1")

        assert any_store.load("s-1") is None


class TestInMemorySnapshotStore:
    def test_later_mutation_does_not_leak(self):
        store = InMemorySnapshotStore()
        snapshot = _snapshot()
        store.save("s-1", snapshot)

        snapshot.answers[0][1].selected_imaging.append("mri-lumbar")

        assert store.load("s-1").answers[0][1].selected_imaging == ["no-imaging"]
        assert store.list_ids() == ["s-1"]


class TestJsonFileSnapshotStore:
    def test_one_file_per_session(self, tmp_path):
        store = JsonFileSnapshotStore(tmp_path)
        store.save("s-1", _snapshot())
        store.save("s-2", _snapshot())

        assert sorted(p.name for p in tmp_path.glob("*.json")) == ["s-1.json", "s-2.json"]
        assert list(tmp_path.glob("*.tmp")) == []

    def test_corrupt_file_raises(self, tmp_path):
        (tmp_path / "s-1.json").write_text("{not json", encoding="utf-8")
        store = JsonFileSnapshotStore(tmp_path)

        with pytest.raises(SnapshotStoreError) as exc_info:
            store.load("s-1")
        assert exc_info.value.session_id == "s-1"

    def test_failed_write_leaves_no_temp_file(self, tmp_path, monkeypatch):
        def fail_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr(os, "replace", fail_replace)
        store = JsonFileSnapshotStore(tmp_path)

        with pytest.raises(SnapshotStoreError):
            store.save("s-1", _snapshot())
        assert list(tmp_path.iterdir()) == []

    def test_unsafe_session_id_rejected(self, tmp_path):
        store = JsonFileSnapshotStore(tmp_path)

        with pytest.raises(SnapshotStoreError):
            store.save("../escape", _snapshot())
