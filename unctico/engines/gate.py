"""
Treatment safety gate.

Treatment may proceed if and only if the client has no active alert of
absolute severity. Local, caution and modified alerts are advisory and never
block, however many of them there are.
"""

from __future__ import annotations

import logging

from unctico.models import ContraindicationAlert, SafetyClearance
from unctico.store import AlertStore

logger = logging.getLogger(__name__)


class SafetyGate:
    """Decides whether a session may go ahead for a client."""

    def __init__(self, store: AlertStore):
        self.store = store

    def can_proceed(self, client_id: str) -> tuple[bool, list[ContraindicationAlert]]:
        """
        Check whether treatment may proceed.

        Returns:
            (allowed, blocking_alerts) where blocking_alerts are the client's
            active absolute contraindications
        """
        blocking = self.store.absolute_for_client(client_id)
        if blocking:
            logger.warning(
                "treatment blocked for client %s by %d absolute contraindication(s)",
                client_id, len(blocking),
            )
        return (not blocking, blocking)

    def clearance(self, client_id: str) -> SafetyClearance:
        """Gate decision plus the advisory context a practitioner needs."""
        allowed, blocking = self.can_proceed(client_id)
        active = self.store.active_for_client(client_id)

        needs_physician = []
        for alert in active:
            if alert.condition.requires_physician_clearance and alert.condition not in needs_physician:
                needs_physician.append(alert.condition)

        return SafetyClearance(
            client_id=client_id,
            allowed=allowed,
            blocking_alerts=blocking,
            active_alerts=active,
            physician_clearance_required=needs_physician,
        )
