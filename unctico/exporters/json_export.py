"""
JSON exporter for safety alerts.

Exports a client's alerts and gate decision as clean, human-readable JSON.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from unctico.models import ContraindicationAlert, RedFlagAlert, SafetyClearance


def alert_summary(alert: ContraindicationAlert) -> dict[str, Any]:
    """
    Flatten an alert with its taxonomy facts (useful for listings).
    """
    return {
        "id": alert.id,
        "client_id": alert.client_id,
        "condition": alert.condition.value,
        "condition_name": alert.condition.display_name,
        "category": alert.condition.category.value,
        "severity": alert.severity.value,
        "detected_date": alert.detected_date.isoformat(),
        "notes": alert.notes,
        "is_resolved": alert.is_resolved,
        "requires_physician_clearance": alert.condition.requires_physician_clearance,
    }


def red_flag_summary(alert: RedFlagAlert) -> dict[str, Any]:
    return {
        "id": alert.id,
        "client_id": alert.client_id,
        "symptom": alert.symptom.value,
        "symptom_name": alert.symptom.display_name,
        "urgency": alert.urgency.value,
        "recommended_action": alert.symptom.recommended_action,
        "detected_date": alert.detected_date.isoformat(),
        "was_referred": alert.was_referred,
    }


def export_json(
    clearance: SafetyClearance,
    red_flags: list[RedFlagAlert] | None = None,
    output_path: Path | None = None,
    indent: int = 2,
) -> str:
    """
    Export a client's safety picture to JSON.

    Args:
        clearance: Gate decision for the client
        red_flags: The client's red flags, if any
        output_path: Optional path to write the JSON file
        indent: JSON indentation level

    Returns:
        JSON string
    """
    data = {
        "client_id": clearance.client_id,
        "can_proceed": clearance.allowed,
        "blocking_alerts": [alert_summary(a) for a in clearance.blocking_alerts],
        "active_alerts": [alert_summary(a) for a in clearance.active_alerts],
        "physician_clearance_required": [c.value for c in clearance.physician_clearance_required],
        "red_flags": [red_flag_summary(f) for f in red_flags or []],
    }
    json_str = json.dumps(data, indent=indent)

    if output_path:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(json_str)

    return json_str
