"""
Tests for the alert store and the safety gate.
"""

import sys
import threading
from datetime import datetime, timezone
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest

RESOLVED_AT = datetime(2026, 4, 2, 15, 0, tzinfo=timezone.utc)


def _store(*alerts):
    from unctico.db import InMemoryAlertRepository
    from unctico.store import AlertStore

    repo = InMemoryAlertRepository()
    store = AlertStore(repo, clock=lambda: RESOLVED_AT)
    for alert in alerts:
        store.add(alert)
    return store


def _alert(client_id="client-1", condition="dvt", severity=None, **kwargs):
    from unctico.models import ContraindicationAlert, ContraindicationCondition, Severity

    condition = ContraindicationCondition(condition)
    return ContraindicationAlert(
        client_id=client_id,
        condition=condition,
        severity=Severity(severity) if severity else condition.default_severity,
        **kwargs,
    )


class TestAlertModel:
    """Resolution invariant on the record itself."""

    def test_resolved_requires_date(self):
        from pydantic import ValidationError

        with pytest.raises(ValidationError):
            _alert(is_resolved=True)

    def test_unresolved_rejects_date(self):
        from pydantic import ValidationError

        with pytest.raises(ValidationError):
            _alert(resolved_date=RESOLVED_AT)

    def test_alerts_are_immutable(self):
        from pydantic import ValidationError

        alert = _alert()
        with pytest.raises(ValidationError):
            alert.notes = "changed"


class TestContraindicationStore:
    """Add, update, resolve and queries."""

    def test_add_persists_to_repository(self):
        alert = _alert()
        store = _store(alert)

        assert store.all_contraindications() == [alert]
        assert store.repository.get_all_contraindications() == [alert]

    def test_store_loads_existing_records(self):
        from unctico.db import InMemoryAlertRepository
        from unctico.store import AlertStore

        alert = _alert()
        store = AlertStore(InMemoryAlertRepository(contraindications=[alert]))

        assert store.get(alert.id) == alert

    def test_resolve_invariant(self):
        alert = _alert(notes="Detected from medical history")
        store = _store(alert)

        resolved = store.resolve(alert.id, "referred to physician")
        stored = store.get(alert.id)

        assert stored == resolved
        assert stored.is_resolved is True
        assert stored.resolved_date == RESOLVED_AT
        assert stored.action_taken == "referred to physician"
        unchanged = {"id", "client_id", "condition", "severity", "detected_date", "notes"}
        assert stored.model_dump(include=unchanged) == alert.model_dump(include=unchanged)
        assert store.repository.get_all_contraindications() == [stored]

    def test_resolve_unknown_id(self):
        from unctico.errors import AlertNotFoundError

        store = _store(_alert())

        with pytest.raises(AlertNotFoundError) as exc:
            store.resolve("missing", "n/a")
        assert exc.value.alert_id == "missing"

    def test_resolve_twice_fails(self):
        from unctico.errors import AlertNotFoundError

        alert = _alert()
        store = _store(alert)
        store.resolve(alert.id, "first")

        with pytest.raises(AlertNotFoundError):
            store.resolve(alert.id, "second")
        assert store.get(alert.id).action_taken == "first"

    def test_update_replaces_by_identity(self):
        alert = _alert(notes="original")
        store = _store(alert)

        edited = alert.model_copy(update={"notes": "clinician override"})
        store.update(edited)

        assert len(store.all_contraindications()) == 1
        assert store.get(alert.id).notes == "clinician override"

    def test_update_unknown_id_raises(self):
        from unctico.errors import AlertNotFoundError

        store = _store(_alert())

        with pytest.raises(AlertNotFoundError):
            store.update(_alert())
        assert len(store.all_contraindications()) == 1

    def test_resolve_fails_when_storage_lost_the_alert(self):
        from unctico.errors import RepositoryError

        alert = _alert()
        store = _store(alert)
        store.repository._contraindications.clear()

        with pytest.raises(RepositoryError):
            store.resolve(alert.id, "cleared")
        assert store.get(alert.id).is_resolved is False
        assert store.repository.get_all_contraindications() == []

    def test_active_and_absolute_queries(self):
        dvt = _alert(condition="dvt")
        fever = _alert(condition="fever")
        anxiety = _alert(condition="anxiety")
        other = _alert(client_id="client-2", condition="fever")
        store = _store(dvt, fever, anxiety, other)
        store.resolve(fever.id, "fever gone")

        assert store.active_for_client("client-1") == [dvt, anxiety]
        assert store.absolute_for_client("client-1") == [dvt]
        assert len(store.for_client("client-1")) == 3

    def test_search(self):
        store = _store(
            _alert(condition="cancer", notes="left breast"),
            _alert(condition="arthritis", notes="knees"),
        )

        assert [a.condition.value for a in store.search("TUMORS")] == ["cancer"]
        assert [a.condition.value for a in store.search("knee")] == ["arthritis"]
        assert len(store.search("  ")) == 2

    def test_concurrent_resolves_only_one_wins(self):
        from unctico.errors import AlertNotFoundError

        alert = _alert()
        store = _store(alert)
        outcomes = []

        def attempt(action):
            try:
                store.resolve(alert.id, action)
                outcomes.append(action)
            except AlertNotFoundError:
                outcomes.append(None)

        threads = [threading.Thread(target=attempt, args=(f"action-{i}",)) for i in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        winners = [o for o in outcomes if o is not None]
        assert len(winners) == 1
        assert store.get(alert.id).action_taken == winners[0]


class TestRedFlagStore:
    """Red flag records."""

    def test_add_and_query(self):
        from unctico.models import RedFlagAlert, RedFlagSymptom

        chest = RedFlagAlert(client_id="client-1", symptom=RedFlagSymptom.CHEST_PAIN)
        crepitus = RedFlagAlert(client_id="client-1", symptom=RedFlagSymptom.CREPITUS)
        store = _store()
        store.add_red_flag(chest)
        store.add_red_flag(crepitus)

        assert store.red_flags_for_client("client-1") == [chest, crepitus]
        assert store.emergency_red_flags_for_client("client-1") == [chest]
        assert store.red_flags_for_client("client-2") == []

    def test_record_referral(self):
        from unctico.models import RedFlagAlert, RedFlagSymptom

        flag = RedFlagAlert(client_id="client-1", symptom=RedFlagSymptom.NIGHT_PAIN, notes="wakes at 3am")
        store = _store()
        store.add_red_flag(flag)

        referred = store.record_referral(flag.id, "Dr. Okafor, orthopedics")

        assert referred.was_referred is True
        assert referred.referral_details == "Dr. Okafor, orthopedics"
        assert referred.notes == "wakes at 3am"
        assert store.repository.get_all_red_flags() == [referred]

    def test_referral_fails_when_storage_lost_the_flag(self):
        from unctico.errors import RepositoryError
        from unctico.models import RedFlagAlert, RedFlagSymptom

        flag = RedFlagAlert(client_id="client-1", symptom=RedFlagSymptom.CREPITUS)
        store = _store()
        store.add_red_flag(flag)
        store.repository._red_flags.clear()

        with pytest.raises(RepositoryError):
            store.record_referral(flag.id, "orthopedics")
        assert store.get_red_flag(flag.id).was_referred is False

    def test_update_unknown_red_flag(self):
        from unctico.errors import AlertNotFoundError
        from unctico.models import RedFlagAlert, RedFlagSymptom

        with pytest.raises(AlertNotFoundError):
            _store().update_red_flag(RedFlagAlert(client_id="c", symptom=RedFlagSymptom.PUS))

    def test_search_red_flags(self):
        from unctico.models import RedFlagAlert, RedFlagSymptom

        store = _store()
        store.add_red_flag(RedFlagAlert(client_id="c", symptom=RedFlagSymptom.CHEST_PAIN))
        store.add_red_flag(RedFlagAlert(client_id="c", symptom=RedFlagSymptom.PUS, notes="wound on shin"))

        assert [f.symptom for f in store.search_red_flags("chest")] == [RedFlagSymptom.CHEST_PAIN]
        assert [f.symptom for f in store.search_red_flags("shin")] == [RedFlagSymptom.PUS]


class TestSafetyGate:
    """Treatment go/no-go."""

    def test_no_alerts_can_proceed(self):
        from unctico.engines import SafetyGate

        assert SafetyGate(_store()).can_proceed("client-1") == (True, [])

    def test_single_absolute_blocks(self):
        from unctico.engines import SafetyGate

        dvt = _alert(condition="dvt")
        gate = SafetyGate(_store(dvt, _alert(condition="asthma")))

        assert gate.can_proceed("client-1") == (False, [dvt])

    def test_non_absolute_alerts_never_block(self):
        from unctico.engines import SafetyGate

        store = _store(
            _alert(condition="bruising"),
            _alert(condition="cancer"),
            _alert(condition="arthritis"),
            _alert(condition="varicose_veins"),
            _alert(condition="pregnancy"),
        )

        assert SafetyGate(store).can_proceed("client-1") == (True, [])

    def test_severity_override_is_what_counts(self):
        from unctico.engines import SafetyGate

        # A caution condition escalated to absolute blocks; an absolute condition downgraded does not
        escalated = _alert(condition="cancer", severity="absolute")
        downgraded = _alert(client_id="client-2", condition="fever", severity="caution")
        gate = SafetyGate(_store(escalated, downgraded))

        assert gate.can_proceed("client-1") == (False, [escalated])
        assert gate.can_proceed("client-2") == (True, [])

    def test_resolving_flips_gate(self):
        from unctico.engines import SafetyGate

        dvt = _alert(condition="dvt")
        store = _store(dvt)
        gate = SafetyGate(store)

        assert gate.can_proceed("client-1") == (False, [dvt])
        store.resolve(dvt.id, "cleared by physician")
        assert gate.can_proceed("client-1") == (True, [])

    def test_other_clients_do_not_block(self):
        from unctico.engines import SafetyGate

        gate = SafetyGate(_store(_alert(client_id="client-2", condition="fever")))

        assert gate.can_proceed("client-1") == (True, [])

    def test_clearance_details(self):
        from unctico.engines import SafetyGate
        from unctico.models import ContraindicationCondition

        dvt = _alert(condition="dvt")
        cancer = _alert(condition="cancer")
        cancer_again = _alert(condition="cancer")
        anxiety = _alert(condition="anxiety")
        clearance = SafetyGate(_store(dvt, cancer, cancer_again, anxiety)).clearance("client-1")

        assert clearance.allowed is False
        assert clearance.blocking_alerts == [dvt]
        assert clearance.advisory_alerts == [cancer, cancer_again, anxiety]
        assert clearance.physician_clearance_required == [
            ContraindicationCondition.DVT,
            ContraindicationCondition.CANCER,
        ]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
