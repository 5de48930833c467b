"""
In-memory alert store.

Holds the working set of contraindication and red-flag alerts for every
client and writes changes through to an ``AlertRepository``. Consumers (the
safety gate, statistics, the CLI and the server) receive a store instance;
there is no module-level alert state.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import Callable

from unctico.db.repositories import AlertRepository
from unctico.errors import AlertNotFoundError, RepositoryError
from unctico.models import ContraindicationAlert, RedFlagAlert, Severity, Urgency, utcnow

logger = logging.getLogger(__name__)


class AlertStore:
    """
    Working set of alerts backed by a repository.

    Mutations are serialised with a re-entrant lock. ``resolve`` reads then
    writes, and two concurrent resolutions of one alert must not both win.
    """

    def __init__(self, repository: AlertRepository, clock: Callable[[], datetime] = utcnow):
        self.repository = repository
        self.clock = clock
        self._lock = threading.RLock()
        self._contraindications: list[ContraindicationAlert] = []
        self._red_flags: list[RedFlagAlert] = []
        self.reload()

    def reload(self) -> None:
        """Replace the working set with what the repository holds."""
        with self._lock:
            self._contraindications = list(self.repository.get_all_contraindications())
            self._red_flags = list(self.repository.get_all_red_flags())
        logger.debug(
            "loaded %d contraindication(s) and %d red flag(s)",
            len(self._contraindications), len(self._red_flags),
        )

    # -------------------------------------------------------------------------
    # Contraindications
    # -------------------------------------------------------------------------

    def add(self, alert: ContraindicationAlert) -> ContraindicationAlert:
        with self._lock:
            self.repository.save_contraindication(alert)
            self._contraindications.append(alert)
        logger.info(
            "added %s contraindication %s for client %s",
            alert.severity.value, alert.condition.value, alert.client_id,
        )
        return alert

    def add_many(self, alerts: list[ContraindicationAlert]) -> list[ContraindicationAlert]:
        with self._lock:
            return [self.add(alert) for alert in alerts]

    def update(self, alert: ContraindicationAlert) -> ContraindicationAlert:
        """
        Replace the stored alert with the same id.

        Raises:
            AlertNotFoundError: if no alert with that id was ever added
            RepositoryError: if the repository no longer holds the alert
        """
        with self._lock:
            index = self._index_of(self._contraindications, alert.id)
            if index is None:
                raise AlertNotFoundError(alert.id, "cannot update unknown contraindication")
            if not self.repository.update_contraindication(alert):
                raise RepositoryError(f"Contraindication {alert.id} is missing from storage")
            self._contraindications[index] = alert
        logger.info("updated contraindication %s", alert.id)
        return alert

    def resolve(self, alert_id: str, action_taken: str) -> ContraindicationAlert:
        """
        Mark an active alert as resolved.

        Raises:
            AlertNotFoundError: if there is no active alert with that id
        """
        with self._lock:
            current = self.get(alert_id)
            if current is None or current.is_resolved:
                raise AlertNotFoundError(alert_id, "no active contraindication")
            resolved = current.resolved(action_taken, when=self.clock())
            self.update(resolved)
        logger.info("resolved contraindication %s: %s", alert_id, action_taken)
        return resolved

    def get(self, alert_id: str) -> ContraindicationAlert | None:
        with self._lock:
            index = self._index_of(self._contraindications, alert_id)
            return None if index is None else self._contraindications[index]

    def all_contraindications(self) -> list[ContraindicationAlert]:
        with self._lock:
            return list(self._contraindications)

    def for_client(self, client_id: str) -> list[ContraindicationAlert]:
        return [a for a in self.all_contraindications() if a.client_id == client_id]

    def active_for_client(self, client_id: str) -> list[ContraindicationAlert]:
        return [a for a in self.for_client(client_id) if not a.is_resolved]

    def absolute_for_client(self, client_id: str) -> list[ContraindicationAlert]:
        return [a for a in self.active_for_client(client_id) if a.severity == Severity.ABSOLUTE]

    def search(self, text: str) -> list[ContraindicationAlert]:
        """Alerts whose condition name or notes contain ``text``, ignoring case."""
        needle = text.strip().lower()
        alerts = self.all_contraindications()
        if not needle:
            return alerts
        return [
            a for a in alerts
            if needle in a.condition.display_name.lower() or needle in a.notes.lower()
        ]

    # -------------------------------------------------------------------------
    # Red flags
    # -------------------------------------------------------------------------

    def add_red_flag(self, alert: RedFlagAlert) -> RedFlagAlert:
        with self._lock:
            self.repository.save_red_flag(alert)
            self._red_flags.append(alert)
        logger.info(
            "recorded %s red flag %s for client %s",
            alert.urgency.value, alert.symptom.value, alert.client_id,
        )
        return alert

    def update_red_flag(self, alert: RedFlagAlert) -> RedFlagAlert:
        """
        Replace the stored red flag with the same id.

        Raises:
            AlertNotFoundError: if no red flag with that id exists
            RepositoryError: if the repository no longer holds the red flag
        """
        with self._lock:
            index = self._index_of(self._red_flags, alert.id)
            if index is None:
                raise AlertNotFoundError(alert.id, "cannot update unknown red flag")
            if not self.repository.update_red_flag(alert):
                raise RepositoryError(f"Red flag {alert.id} is missing from storage")
            self._red_flags[index] = alert
        logger.info("updated red flag %s", alert.id)
        return alert

    def record_referral(self, alert_id: str, details: str | None = None) -> RedFlagAlert:
        """Mark a red flag as referred out, keeping every other field."""
        with self._lock:
            current = self.get_red_flag(alert_id)
            if current is None:
                raise AlertNotFoundError(alert_id, "no red flag")
            referred = current.model_copy(update={"was_referred": True, "referral_details": details})
            return self.update_red_flag(referred)

    def get_red_flag(self, alert_id: str) -> RedFlagAlert | None:
        with self._lock:
            index = self._index_of(self._red_flags, alert_id)
            return None if index is None else self._red_flags[index]

    def all_red_flags(self) -> list[RedFlagAlert]:
        with self._lock:
            return list(self._red_flags)

    def red_flags_for_client(self, client_id: str) -> list[RedFlagAlert]:
        return [a for a in self.all_red_flags() if a.client_id == client_id]

    def emergency_red_flags_for_client(self, client_id: str) -> list[RedFlagAlert]:
        return [a for a in self.red_flags_for_client(client_id) if a.urgency == Urgency.EMERGENCY]

    def search_red_flags(self, text: str) -> list[RedFlagAlert]:
        needle = text.strip().lower()
        flags = self.all_red_flags()
        if not needle:
            return flags
        return [
            f for f in flags
            if needle in f.symptom.display_name.lower() or needle in f.notes.lower()
        ]

    @staticmethod
    def _index_of(records: list, alert_id: str) -> int | None:
        for index, record in enumerate(records):
            if record.id == alert_id:
                return index
        return None
