"""
Tests for the HTTP API.
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest
from fastapi.testclient import TestClient


@pytest.fixture
def service():
    from unctico.service import SafetyService

    return SafetyService()


@pytest.fixture
def client(service):
    from server import create_app

    return TestClient(create_app(service))


class TestCatalogue:

    def test_health(self, client):
        response = client.get("/api/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_conditions(self, client):
        conditions = client.get("/api/conditions").json()

        assert len(conditions) == 35
        dvt = next(c for c in conditions if c["key"] == "dvt")
        assert dvt["default_severity"] == "absolute"
        assert dvt["requires_physician_clearance"] is True

    def test_symptoms_most_urgent_first(self, client):
        symptoms = client.get("/api/red-flags/symptoms").json()

        assert len(symptoms) == 25
        assert symptoms[0]["urgency"] == "emergency"
        assert symptoms[-1]["urgency"] == "soon"


class TestContraindications:

    def test_detect_and_save(self, client, service):
        response = client.post(
            "/api/clients/client-1/detect",
            json={"conditions": ["type 2 diabetes"], "medications": ["coumadin"], "save": True},
        )

        assert response.status_code == 200
        assert [a["condition"] for a in response.json()] == ["diabetes", "blood_thinners"]
        assert len(service.store.for_client("client-1")) == 2

    def test_detect_without_save(self, client, service):
        response = client.post("/api/clients/client-1/detect", json={"conditions": ["dvt"]})

        assert response.status_code == 200
        assert service.store.all_contraindications() == []

    def test_clearance_and_resolve(self, client):
        created = client.post(
            "/api/contraindications",
            json={"client_id": "client-2", "condition": "fever", "notes": "38.5C at intake"},
        )
        assert created.status_code == 201
        alert_id = created.json()["id"]

        clearance = client.get("/api/clients/client-2/clearance").json()
        assert clearance["can_proceed"] is False
        assert clearance["blocking_alerts"][0]["id"] == alert_id

        resolved = client.post(f"/api/contraindications/{alert_id}/resolve", json={"action_taken": "fever broke"})
        assert resolved.status_code == 200
        assert resolved.json()["is_resolved"] is True
        assert resolved.json()["resolved_date"] is not None

        assert client.get("/api/clients/client-2/clearance").json()["can_proceed"] is True
        assert client.get("/api/clients/client-2/contraindications").json() == []
        assert len(client.get("/api/clients/client-2/contraindications?active_only=false").json()) == 1

    def test_resolve_unknown_is_404(self, client):
        response = client.post("/api/contraindications/nope/resolve", json={"action_taken": "n/a"})

        assert response.status_code == 404

    def test_resolve_twice_is_404(self, client, service):
        from unctico.models import ContraindicationCondition

        alert = service.record_contraindication("client-3", ContraindicationCondition.BURNS)
        url = f"/api/contraindications/{alert.id}/resolve"

        assert client.post(url, json={"action_taken": "healed"}).status_code == 200
        assert client.post(url, json={"action_taken": "again"}).status_code == 404

    def test_unknown_condition_rejected(self, client):
        response = client.post("/api/contraindications", json={"client_id": "c", "condition": "gout"})

        assert response.status_code == 422


class TestStorageErrors:

    def test_unreadable_store_is_503(self, monkeypatch, tmp_path):
        from server import create_app

        (tmp_path / "red_flags.json").write_text("{not json")
        monkeypatch.setenv("UNCTICO_STORAGE", "json")
        monkeypatch.setenv("UNCTICO_DATA_DIR", str(tmp_path))
        monkeypatch.setattr("unctico.config._config", None)

        response = TestClient(create_app()).get("/api/clients/c/clearance")

        assert response.status_code == 503
        assert "Cannot read" in response.json()["detail"]

    def test_unconfigured_storage_is_503(self, monkeypatch):
        from server import create_app

        monkeypatch.setenv("UNCTICO_STORAGE", "supabase")
        monkeypatch.delenv("SUPABASE_URL", raising=False)
        monkeypatch.setattr("unctico.config._config", None)

        response = TestClient(create_app()).get("/api/statistics")

        assert response.status_code == 503

    def test_catalogue_served_without_storage(self, monkeypatch):
        from server import create_app

        monkeypatch.setenv("UNCTICO_STORAGE", "supabase")
        monkeypatch.delenv("SUPABASE_URL", raising=False)
        monkeypatch.setattr("unctico.config._config", None)

        assert TestClient(create_app()).get("/api/conditions").status_code == 200


class TestRedFlagsAndReports:

    def test_red_flags_sorted_by_urgency(self, client):
        for symptom in ("pus", "chest_pain", "night_pain"):
            assert client.post("/api/red-flags", json={"client_id": "c", "symptom": symptom}).status_code == 201

        flags = client.get("/api/clients/c/red-flags").json()

        assert [f["symptom"] for f in flags] == ["chest_pain", "night_pain", "pus"]

    def test_statistics(self, client, service):
        from unctico.models import RedFlagSymptom

        service.detect("a", conditions=["thrombosis", "arthritis"], save=True)
        service.record_red_flag("a", RedFlagSymptom.SEIZURES, was_referred=True)
        service.record_red_flag("a", RedFlagSymptom.CREPITUS)

        stats = client.get("/api/statistics").json()

        assert stats["contraindications"]["total"] == 2
        assert stats["contraindications"]["by_severity"]["absolute"] == 1
        assert stats["red_flags"]["emergency"] == 1
        assert stats["red_flags"]["referral_rate"] == pytest.approx(50.0)

    def test_report(self, client, service):
        service.detect("client-9", conditions=["pregnant"], save=True)

        response = client.get("/api/clients/client-9/report")

        assert response.status_code == 200
        assert "# Safety Report: Client client-9" in response.text
        assert "Treatment may proceed" in response.text


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
