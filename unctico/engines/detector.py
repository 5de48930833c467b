"""
Contraindication detection from medical history.

A simple classifier: lower-cased substring containment against
a fixed keyword table, plus a fixed list of blood-thinning medications. The
detector only produces candidate alerts; persisting them (and any
de-duplication policy) is up to the caller.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Iterable

from unctico.models import (
    ContraindicationAlert,
    ContraindicationCondition,
    Severity,
    generate_id,
    utcnow,
)

logger = logging.getLogger(__name__)

C = ContraindicationCondition

# Checked top to bottom; the first keyword found in a history line wins, so a
# line such as "lupus and diabetes" maps to diabetes only.
CONDITION_KEYWORDS: tuple[tuple[str, ContraindicationCondition], ...] = (
    ("cancer", C.CANCER),
    ("tumor", C.CANCER),
    ("pregnancy", C.PREGNANCY),
    ("pregnant", C.PREGNANCY),
    ("diabetes", C.DIABETES),
    ("diabetic", C.DIABETES),
    ("heart", C.HEART_CONDITION),
    ("cardiac", C.HEART_CONDITION),
    ("hypertension", C.HIGH_BLOOD_PRESSURE),
    ("blood pressure", C.HIGH_BLOOD_PRESSURE),
    ("epilepsy", C.EPILEPSY),
    ("seizure", C.EPILEPSY),
    ("osteoporosis", C.SEVERE_OSTEOPOROSIS),
    ("arthritis", C.ARTHRITIS),
    ("fibromyalgia", C.FIBROMYALGIA),
    ("autoimmune", C.AUTOIMMUNE),
    ("lupus", C.AUTOIMMUNE),
    ("rheumatoid", C.AUTOIMMUNE),
    ("asthma", C.ASTHMA),
    ("anxiety", C.ANXIETY),
    ("depression", C.DEPRESSION),
    ("migraine", C.MIGRAINES),
    ("varicose", C.VARICOSE_VEINS),
    ("dvt", C.DVT),
    ("thrombosis", C.DVT),
)

BLOOD_THINNERS: tuple[str, ...] = (
    "warfarin",
    "coumadin",
    "aspirin",
    "plavix",
    "clopidogrel",
    "eliquis",
    "apixaban",
    "xarelto",
    "rivaroxaban",
    "heparin",
)

HISTORY_NOTE = "Detected from medical history"


def match_condition(text: str) -> ContraindicationCondition | None:
    """Return the condition for the first keyword contained in ``text``."""
    lowered = text.lower()
    for keyword, condition in CONDITION_KEYWORDS:
        if keyword in lowered:
            return condition
    return None


def is_blood_thinner(medication: str) -> bool:
    lowered = medication.lower()
    return any(name in lowered for name in BLOOD_THINNERS)


class ContraindicationDetector:
    """
    Turns free-text history into contraindication alert candidates.

    Args:
        clock: Returns the detection timestamp (defaults to UTC now)
        id_factory: Returns a fresh alert id
    """

    def __init__(
        self,
        clock: Callable[[], datetime] = utcnow,
        id_factory: Callable[[], str] = generate_id,
    ):
        self.clock = clock
        self.id_factory = id_factory

    def detect(
        self,
        conditions: Iterable[str],
        medications: Iterable[str],
        client_id: str,
    ) -> list[ContraindicationAlert]:
        """
        Detect contraindications for one client.

        Each condition line yields at most one alert. Each medication that
        names a blood thinner yields a ``blood_thinners`` alert at caution
        severity. Running twice on the same input yields two sets of alerts.
        """
        detected: list[ContraindicationAlert] = []

        for condition in (c.lower() for c in conditions):
            match = match_condition(condition)
            if match is None:
                continue
            logger.debug("matched %r -> %s for client %s", condition, match.value, client_id)
            detected.append(self._alert(
                client_id,
                match,
                match.default_severity,
                HISTORY_NOTE,
            ))

        for medication in (m.lower() for m in medications):
            if not is_blood_thinner(medication):
                continue
            logger.debug("blood thinner %r for client %s", medication, client_id)
            detected.append(self._alert(
                client_id,
                C.BLOOD_THINNERS,
                Severity.CAUTION,
                f"Taking blood thinning medication: {medication}",
            ))

        if detected:
            logger.info("detected %d contraindication(s) for client %s", len(detected), client_id)
        return detected

    def _alert(
        self,
        client_id: str,
        condition: ContraindicationCondition,
        severity: Severity,
        notes: str,
    ) -> ContraindicationAlert:
        return ContraindicationAlert(
            id=self.id_factory(),
            client_id=client_id,
            condition=condition,
            severity=severity,
            detected_date=self.clock(),
            notes=notes,
        )
