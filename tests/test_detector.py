"""
Tests for contraindication detection.
"""

import sys
from datetime import datetime, timezone
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest

FIXED_TIME = datetime(2026, 3, 1, 9, 30, tzinfo=timezone.utc)


def _detector():
    from unctico.engines import ContraindicationDetector

    return ContraindicationDetector(clock=lambda: FIXED_TIME)


class TestKeywordMatching:
    """Condition keyword table."""

    @pytest.mark.parametrize("text,expected", [
        ("Breast CANCER, in remission", "cancer"),
        ("benign tumor removed 2019", "cancer"),
        ("currently pregnant, 20 weeks", "pregnancy"),
        ("type 1 diabetic", "diabetes"),
        ("cardiac arrhythmia", "heart_condition"),
        ("hypertension, medicated", "high_blood_pressure"),
        ("high blood pressure", "high_blood_pressure"),
        ("seizure disorder", "epilepsy"),
        ("osteoporosis of the spine", "severe_osteoporosis"),
        ("rheumatoid flare", "autoimmune"),
        ("chronic migraines", "migraines"),
        ("varicose veins both legs", "varicose_veins"),
        ("history of DVT", "dvt"),
    ])
    def test_match_condition(self, text, expected):
        from unctico.engines import match_condition

        assert match_condition(text).value == expected

    def test_unmatched_text(self):
        from unctico.engines import match_condition

        assert match_condition("broken toe") is None
        assert match_condition("") is None

    def test_first_match_wins(self):
        from unctico.models import ContraindicationCondition

        alerts = _detector().detect(["lupus and diabetes"], [], "client-1")

        # diabetes is declared before lupus in the keyword table
        assert len(alerts) == 1
        assert alerts[0].condition == ContraindicationCondition.DIABETES

    def test_heart_checked_before_hypertension(self):
        from unctico.models import ContraindicationCondition

        alerts = _detector().detect(["hypertension and heart disease"], [], "client-1")

        assert [a.condition for a in alerts] == [ContraindicationCondition.HEART_CONDITION]

    def test_keyword_table_is_ordered_pairs(self):
        from unctico.engines import CONDITION_KEYWORDS

        keywords = [k for k, _ in CONDITION_KEYWORDS]
        assert keywords[0] == "cancer"
        assert keywords[-1] == "thrombosis"
        assert keywords.index("diabetes") < keywords.index("lupus")


class TestBloodThinners:
    """Medication screening."""

    @pytest.mark.parametrize("medication", [
        "Warfarin 5mg", "coumadin", "baby aspirin", "Plavix", "clopidogrel 75 mg",
        "Eliquis", "apixaban", "XARELTO", "rivaroxaban", "heparin injection",
    ])
    def test_known_blood_thinners(self, medication):
        from unctico.engines import is_blood_thinner

        assert is_blood_thinner(medication)

    def test_other_medication(self):
        from unctico.engines import is_blood_thinner

        assert not is_blood_thinner("metformin")

    def test_medication_alert(self):
        from unctico.models import ContraindicationCondition, Severity

        alerts = _detector().detect([], ["80mg Aspirin daily", "metformin"], "client-1")

        assert len(alerts) == 1
        alert = alerts[0]
        assert alert.condition == ContraindicationCondition.BLOOD_THINNERS
        assert alert.severity == Severity.CAUTION
        assert alert.notes == "Taking blood thinning medication: 80mg aspirin daily"


class TestDetect:
    """Full detection runs."""

    def test_empty_inputs(self):
        assert _detector().detect([], [], "client-1") == []

    def test_alert_fields(self):
        from unctico.models import Severity

        [alert] = _detector().detect(["Deep vein thrombosis"], [], "client-9")

        assert alert.client_id == "client-9"
        assert alert.severity == Severity.ABSOLUTE
        assert alert.detected_date == FIXED_TIME
        assert alert.notes == "Detected from medical history"
        assert alert.is_resolved is False
        assert alert.resolved_date is None
        assert alert.action_taken is None

    def test_severity_is_condition_default(self):
        alerts = _detector().detect(["arthritis", "varicose veins", "asthma"], [], "client-1")

        for alert in alerts:
            assert alert.severity == alert.condition.default_severity

    def test_determinism(self):
        detector = _detector()
        history = ["Stage 2 breast cancer", "type 2 diabetes", "knee pain"]
        meds = ["80mg aspirin daily"]

        first = detector.detect(history, meds, "client-1")
        second = detector.detect(history, meds, "client-1")

        strip = lambda alerts: [a.model_dump(exclude={"id", "detected_date"}) for a in alerts]
        assert strip(first) == strip(second)
        assert {a.id for a in first}.isdisjoint({a.id for a in second})

    def test_no_deduplication(self):
        alerts = _detector().detect(["diabetes", "diabetic"], [], "client-1")

        assert len(alerts) == 2
        assert alerts[0].id != alerts[1].id

    def test_injected_id_factory(self):
        from unctico.engines import ContraindicationDetector

        ids = iter(["a1", "a2"])
        detector = ContraindicationDetector(id_factory=lambda: next(ids))

        alerts = detector.detect(["cancer"], ["warfarin"], "client-1")

        assert [a.id for a in alerts] == ["a1", "a2"]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
