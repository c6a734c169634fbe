"""Tests for the HTTP adapter."""

import pytest
from fastapi.testclient import TestClient

from api.main import app
from api.routes import assessments as assessments_routes
from api.routes.assessments import AttemptRegistry
from assessment.timer import ManualScheduler
from cases import CASES, IMAGING_OPTIONS, InMemoryCaseRepository
from storage import InMemorySnapshotStore, JsonFileSnapshotStore

SEQUENCE = ["lbp-acute-mechanical", "lbp-cancer-history", "headache-migraine"]


@pytest.fixture
def clock():
    return ManualScheduler()


@pytest.fixture
def client(monkeypatch, clock):
    registry = AttemptRegistry(
        InMemoryCaseRepository(CASES, IMAGING_OPTIONS),
        clock,
        store=InMemorySnapshotStore(),
    )
    monkeypatch.setattr(assessments_routes, "_registry", registry)
    return TestClient(app)


def _create(client, case_ids=SEQUENCE):
    response = client.post(
        "/v1/attempts", json={"assessment_id": "quick-quiz", "case_ids": case_ids}
    )
    assert response.status_code == 200
    return response.json()


class TestService:
    def test_health(self, client):
        assert client.get("/health").json()["status"] == "healthy"

    def test_list_assessments(self, client):
        data = client.get("/v1/assessments").json()

        assert data[0]["id"] == "quick-quiz"
        assert len(data) == 7

    def test_imaging_options(self, client):
        data = client.get("/v1/imaging-options").json()
        assert len(data) == len(IMAGING_OPTIONS)


class TestAttempts:
    def test_create_starts_attempt(self, client):
        attempt = _create(client)

        assert attempt["state"] == "in_progress"
        assert attempt["case_sequence"] == SEQUENCE
        assert attempt["current_case"]["id"] == SEQUENCE[0]
        assert "optimal_imaging" not in attempt["current_case"]
        assert attempt["time_limit_seconds"] == 900

    def test_create_from_catalog_with_seed(self, client):
        first = client.post("/v1/attempts", json={"assessment_id": "quick-quiz", "seed": 3})
        second = client.post("/v1/attempts", json={"assessment_id": "quick-quiz", "seed": 3})

        assert first.json()["case_sequence"] == second.json()["case_sequence"]
        assert len(first.json()["case_sequence"]) == len(CASES)

    def test_unknown_assessment_is_404(self, client):
        response = client.post("/v1/attempts", json={"assessment_id": "nope"})
        assert response.status_code == 404

    def test_no_cases_is_400(self, client):
        response = client.post(
            "/v1/attempts", json={"assessment_id": "quick-quiz", "case_ids": ["missing"]}
        )
        assert response.status_code == 400

    def test_unknown_attempt_is_404(self, client):
        assert client.get("/v1/attempts/nope").status_code == 404
        assert client.post("/v1/attempts/nope/submit").status_code == 404

    def test_select_flag_and_navigate(self, client):
        session_id = _create(client)["session_id"]

        selected = client.put(
            f"/v1/attempts/{session_id}/cases/{SEQUENCE[1]}/selection",
            json={"imaging_ids": ["mri-lumbar"]},
        ).json()
        flagged = client.post(f"/v1/attempts/{session_id}/cases/{SEQUENCE[1]}/flag").json()
        moved = client.post(f"/v1/attempts/{session_id}/navigate", json={"index": 2}).json()
        back = client.post(f"/v1/attempts/{session_id}/previous").json()

        assert selected["applied"]
        assert selected["answered_count"] == 1
        assert flagged["answers"][1]["flagged"]
        assert moved["current_case_index"] == 2
        assert back["current_case_index"] == 1

    def test_out_of_range_navigation_not_applied(self, client):
        session_id = _create(client)["session_id"]

        response = client.post(f"/v1/attempts/{session_id}/navigate", json={"index": 9})

        assert response.status_code == 200
        assert not response.json()["applied"]
        assert response.json()["current_case_index"] == 0

    def test_submit_is_idempotent(self, client, clock):
        session_id = _create(client)["session_id"]
        client.put(
            f"/v1/attempts/{session_id}/cases/{SEQUENCE[0]}/selection",
            json={"imaging_ids": ["no-imaging"]},
        )
        clock.advance(45)

        first = client.post(f"/v1/attempts/{session_id}/submit").json()
        second = client.post(f"/v1/attempts/{session_id}/submit").json()

        assert first["state"] == "completed"
        assert first["result"]["score"] == 33
        assert first["result"]["time_used"] == 45
        assert second["result"] == first["result"]

        late = client.put(
            f"/v1/attempts/{session_id}/cases/{SEQUENCE[1]}/selection",
            json={"imaging_ids": ["mri-lumbar"]},
        ).json()
        assert not late["applied"]

    def test_expiry_completes_attempt(self, client, clock):
        session_id = _create(client)["session_id"]

        clock.advance(900)

        attempt = client.get(f"/v1/attempts/{session_id}").json()
        assert attempt["state"] == "completed"
        assert attempt["time_remaining_seconds"] == 0

    def test_snapshot(self, client, clock):
        session_id = _create(client)["session_id"]
        clock.advance(10)

        snapshot = client.get(f"/v1/attempts/{session_id}/snapshot")
        assert snapshot.status_code == 200
        assert snapshot.json()["time_remaining_seconds"] == 890

        client.post(f"/v1/attempts/{session_id}/submit")
        assert client.get(f"/v1/attempts/{session_id}/snapshot").status_code == 404


class TestAiie:
    def test_score(self, client):
        response = client.post(
            "/v1/aiie/score",
            json={
                "modality": "MRI without contrast",
                "clinical_input": {
                    "age": 45,
                    "sex": "male",
                    "duration": "acute",
                    "severity": "moderate",
                    "neurologic_deficit": True,
                },
            },
        )

        data = response.json()
        assert data["final_score"] == pytest.approx(7.8)
        assert data["category"] == "appropriate"
        assert [f["factor"] for f in data["shap_factors"]] == [
            "Neurologic Deficit",
            "Acute Onset",
        ]

    def test_score_without_input(self, client):
        data = client.post("/v1/aiie/score", json={"modality": "X-ray"}).json()
        assert data["final_score"] == 5.0

    def test_invalid_input_is_422(self, client):
        response = client.post(
            "/v1/aiie/score",
            json={
                "modality": "X-ray",
                "clinical_input": {
                    "age": -1,
                    "sex": "male",
                    "duration": "acute",
                    "severity": "mild",
                },
            },
        )
        assert response.status_code == 422

    def test_rank(self, client):
        data = client.post(
            "/v1/aiie/rank", json={"modalities": ["Ultrasound", "X-ray"]}
        ).json()

        assert [r["modality"] for r in data] == ["Ultrasound", "X-ray"]

    def test_explain(self, client):
        data = client.post("/v1/aiie/explain", json={"modality": "X-ray"}).json()
        assert "baseline score applies" in data["report"]


class TestResume:
    @pytest.fixture
    def file_store(self, tmp_path):
        return JsonFileSnapshotStore(tmp_path / "snapshots")

    @pytest.fixture
    def restart(self, monkeypatch, file_store):
        """Replace the registry with an empty one over the same store."""

        def _restart():
            registry = AttemptRegistry(
                InMemoryCaseRepository(CASES, IMAGING_OPTIONS),
                ManualScheduler(),
                store=file_store,
            )
            monkeypatch.setattr(assessments_routes, "_registry", registry)
            return registry

        return _restart

    def test_resume_after_restart(self, restart):
        restart()
        client = TestClient(app)
        created = client.post(
            "/v1/attempts", json={"assessment_id": "quick-quiz", "seed": 11}
        ).json()
        session_id = created["session_id"]
        second_case = created["case_sequence"][1]
        client.put(
            f"/v1/attempts/{session_id}/cases/{second_case}/selection",
            json={"imaging_ids": ["no-imaging"]},
        )
        client.post(f"/v1/attempts/{session_id}/next")

        restart()

        assert client.get(f"/v1/attempts/{session_id}").status_code == 404
        snapshot = client.get(f"/v1/attempts/{session_id}/snapshot")
        assert snapshot.status_code == 200
        assert snapshot.json()["case_sequence"] == created["case_sequence"]

        resumed = client.post(f"/v1/attempts/{session_id}/resume").json()

        assert resumed["applied"]
        assert resumed["state"] == "in_progress"
        assert resumed["case_sequence"] == created["case_sequence"]
        assert resumed["current_case_index"] == 1
        assert resumed["answers"][1]["selected_imaging"] == ["no-imaging"]
        assert client.get(f"/v1/attempts/{session_id}").status_code == 200

    def test_resume_live_attempt_is_not_applied(self, restart):
        restart()
        client = TestClient(app)
        session_id = _create(client)["session_id"]

        response = client.post(f"/v1/attempts/{session_id}/resume").json()

        assert not response["applied"]
        assert response["state"] == "in_progress"

    def test_resume_without_snapshot_is_404(self, restart):
        restart()
        client = TestClient(app)

        assert client.post("/v1/attempts/missing/resume").status_code == 404

    def test_submitted_attempt_cannot_be_resumed(self, restart):
        restart()
        client = TestClient(app)
        session_id = _create(client)["session_id"]
        client.post(f"/v1/attempts/{session_id}/submit")

        restart()

        assert client.post(f"/v1/attempts/{session_id}/resume").status_code == 404


class TestRetention:
    def test_completed_attempts_are_evicted(self, client, clock):
        registry = assessments_routes.get_registry()
        finished = _create(client)["session_id"]
        open_attempt = client.post(
            "/v1/attempts",
            json={"assessment_id": "quick-quiz", "case_ids": SEQUENCE[:1]},
        ).json()["session_id"]
        client.post(f"/v1/attempts/{finished}/submit")

        clock.advance(600)
        _create(client)
        assert client.get(f"/v1/attempts/{finished}").status_code == 200

        registry.retention_seconds = 60
        _create(client)

        assert client.get(f"/v1/attempts/{finished}").status_code == 404
        assert client.get(f"/v1/attempts/{open_attempt}").status_code == 200
        assert registry.live_count == 3
