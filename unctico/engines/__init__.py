"""
Safety engines: detection, gating and statistics.
"""

from .detector import (
    BLOOD_THINNERS,
    CONDITION_KEYWORDS,
    ContraindicationDetector,
    is_blood_thinner,
    match_condition,
)
from .gate import SafetyGate
from .statistics import contraindication_statistics, red_flag_statistics

__all__ = [
    "BLOOD_THINNERS",
    "CONDITION_KEYWORDS",
    "ContraindicationDetector",
    "is_blood_thinner",
    "match_condition",
    "SafetyGate",
    "contraindication_statistics",
    "red_flag_statistics",
]
