"""
Safety statistics for reporting and dashboards.

Pure reductions over alert collections; nothing here touches the store.
"""

from __future__ import annotations

from collections import Counter
from typing import Iterable

from unctico.models import (
    ContraindicationAlert,
    ContraindicationStatistics,
    RedFlagAlert,
    RedFlagStatistics,
    Severity,
    Urgency,
)


def contraindication_statistics(alerts: Iterable[ContraindicationAlert]) -> ContraindicationStatistics:
    """
    Summarise contraindication alerts.

    Severity and category counts cover active alerts only; ``total`` and
    ``resolved`` cover everything.
    """
    alerts = list(alerts)
    active = [a for a in alerts if not a.is_resolved]

    by_severity = {severity: 0 for severity in Severity}
    by_severity.update(Counter(a.severity for a in active))
    by_category = dict(Counter(a.condition.category.value for a in active))

    return ContraindicationStatistics(
        total=len(alerts),
        active=len(active),
        resolved=len(alerts) - len(active),
        by_severity=by_severity,
        by_category=by_category,
    )


def red_flag_statistics(flags: Iterable[RedFlagAlert]) -> RedFlagStatistics:
    """
    Summarise red flags.

    ``referral_rate`` is a percentage and is 0.0 when there are no flags.
    """
    flags = list(flags)
    total = len(flags)
    urgencies = Counter(f.urgency for f in flags)
    referred = sum(1 for f in flags if f.was_referred)

    return RedFlagStatistics(
        total=total,
        emergency=urgencies[Urgency.EMERGENCY],
        urgent=urgencies[Urgency.URGENT],
        prompt=urgencies[Urgency.PROMPT],
        referred=referred,
        referral_rate=referred / total * 100 if total > 0 else 0.0,
    )
