"""
Safety service: the composition root for the engine.

Wires a repository, the alert store, the detector, the safety gate and the
statistics functions together. The CLI and the web server each build one
service and pass it around; nothing here is a global.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional

from unctico.config import SafetyConfig, get_config
from unctico.db.client import client_for
from unctico.db.repositories import (
    AlertRepository,
    InMemoryAlertRepository,
    JsonFileAlertRepository,
    SupabaseAlertRepository,
)
from unctico.engines import (
    ContraindicationDetector,
    SafetyGate,
    contraindication_statistics,
    red_flag_statistics,
)
from unctico.models import (
    ContraindicationAlert,
    ContraindicationCondition,
    ContraindicationStatistics,
    RedFlagAlert,
    RedFlagStatistics,
    RedFlagSymptom,
    SafetyClearance,
    Severity,
)
from unctico.store import AlertStore

logger = logging.getLogger(__name__)


def build_repository(config: Optional[SafetyConfig] = None, data_dir: Path | None = None) -> AlertRepository:
    """Create the repository selected by configuration."""
    config = config or get_config()
    config.validate()

    if config.storage == "memory":
        return InMemoryAlertRepository()
    if config.storage == "supabase":
        return SupabaseAlertRepository(client_for(config))
    return JsonFileAlertRepository(data_dir or config.data_dir)


class SafetyService:
    """High-level operations over one alert store."""

    def __init__(
        self,
        repository: Optional[AlertRepository] = None,
        detector: Optional[ContraindicationDetector] = None,
    ):
        self.store = AlertStore(repository or InMemoryAlertRepository())
        self.detector = detector or ContraindicationDetector()
        self.gate = SafetyGate(self.store)

    @classmethod
    def from_config(cls, config: Optional[SafetyConfig] = None, data_dir: Path | None = None) -> SafetyService:
        return cls(build_repository(config, data_dir))

    # -------------------------------------------------------------------------
    # Contraindications
    # -------------------------------------------------------------------------

    def detect(
        self,
        client_id: str,
        conditions: Iterable[str] = (),
        medications: Iterable[str] = (),
        save: bool = False,
    ) -> list[ContraindicationAlert]:
        """
        Run detection over a client's history.

        With ``save`` the candidates are added to the store. No
        de-duplication against existing alerts is attempted.
        """
        alerts = self.detector.detect(list(conditions), list(medications), client_id)
        if save:
            self.store.add_many(alerts)
            logger.info("saved %d detected alert(s) for client %s", len(alerts), client_id)
        return alerts

    def record_contraindication(
        self,
        client_id: str,
        condition: ContraindicationCondition,
        severity: Severity | None = None,
        notes: str = "",
    ) -> ContraindicationAlert:
        """Manually enter a contraindication; severity defaults to the condition's."""
        alert = ContraindicationAlert(
            client_id=client_id,
            condition=condition,
            severity=severity or condition.default_severity,
            notes=notes,
        )
        return self.store.add(alert)

    def resolve(self, alert_id: str, action_taken: str) -> ContraindicationAlert:
        return self.store.resolve(alert_id, action_taken)

    def can_proceed(self, client_id: str) -> tuple[bool, list[ContraindicationAlert]]:
        return self.gate.can_proceed(client_id)

    def clearance(self, client_id: str) -> SafetyClearance:
        return self.gate.clearance(client_id)

    # -------------------------------------------------------------------------
    # Red flags
    # -------------------------------------------------------------------------

    def record_red_flag(
        self,
        client_id: str,
        symptom: RedFlagSymptom,
        notes: str = "",
        action_taken: str | None = None,
        was_referred: bool = False,
        referral_details: str | None = None,
    ) -> RedFlagAlert:
        alert = RedFlagAlert(
            client_id=client_id,
            symptom=symptom,
            notes=notes,
            action_taken=action_taken,
            was_referred=was_referred,
            referral_details=referral_details,
        )
        return self.store.add_red_flag(alert)

    # -------------------------------------------------------------------------
    # Statistics
    # -------------------------------------------------------------------------

    def contraindication_statistics(self) -> ContraindicationStatistics:
        return contraindication_statistics(self.store.all_contraindications())

    def red_flag_statistics(self) -> RedFlagStatistics:
        return red_flag_statistics(self.store.all_red_flags())
