"""
Data models for the Unctico safety engine.
"""

from .safety import (
    ContraindicationAlert,
    ContraindicationCategory,
    ContraindicationCondition,
    ContraindicationStatistics,
    RedFlagAlert,
    RedFlagCategory,
    RedFlagStatistics,
    RedFlagSymptom,
    SafetyClearance,
    Severity,
    Urgency,
    generate_id,
    utcnow,
)

__all__ = [
    "ContraindicationAlert",
    "ContraindicationCategory",
    "ContraindicationCondition",
    "ContraindicationStatistics",
    "RedFlagAlert",
    "RedFlagCategory",
    "RedFlagStatistics",
    "RedFlagSymptom",
    "SafetyClearance",
    "Severity",
    "Urgency",
    "generate_id",
    "utcnow",
]
