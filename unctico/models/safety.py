"""
Core data models for the clinical safety engine.

These Pydantic models describe contraindications, red-flag symptoms and the
alerts recorded against a client. The fixed clinical metadata for each
condition and symptom lives in the knowledge base (``knowledge``); the enum
properties below look it up there.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, model_validator

if TYPE_CHECKING:
    from knowledge.contraindications import ConditionProfile
    from knowledge.red_flags import SymptomProfile


def generate_id() -> str:
    """Generate a unique identifier."""
    return str(uuid4())


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


# =============================================================================
# ENUMS
# =============================================================================


class Severity(str, Enum):
    ABSOLUTE = "absolute"
    LOCAL = "local"
    CAUTION = "caution"
    MODIFIED = "modified"

    @property
    def label(self) -> str:
        return _SEVERITY_LABELS[self]

    @property
    def description(self) -> str:
        """Practitioner guidance for this severity level."""
        return _SEVERITY_DESCRIPTIONS[self]

    @property
    def blocks_treatment(self) -> bool:
        return self is Severity.ABSOLUTE


_SEVERITY_LABELS = {
    Severity.ABSOLUTE: "Absolute Contraindication",
    Severity.LOCAL: "Local Contraindication",
    Severity.CAUTION: "Requires Caution",
    Severity.MODIFIED: "Modified Treatment",
}

_SEVERITY_DESCRIPTIONS = {
    Severity.ABSOLUTE: "Do not proceed with massage therapy",
    Severity.LOCAL: "Avoid specific area, may treat elsewhere",
    Severity.CAUTION: "Proceed with care and modified approach",
    Severity.MODIFIED: "Adjust techniques and pressure accordingly",
}


class ContraindicationCategory(str, Enum):
    """Clinical grouping of a condition. Values are the display strings."""

    ABSOLUTE = "Absolute Contraindication"
    LOCAL = "Local Contraindication"
    CAUTION = "Requires Caution"
    MODIFIED = "Modified Treatment"

    @property
    def severity(self) -> Severity:
        return _CATEGORY_SEVERITY[self]


_CATEGORY_SEVERITY = {
    ContraindicationCategory.ABSOLUTE: Severity.ABSOLUTE,
    ContraindicationCategory.LOCAL: Severity.LOCAL,
    ContraindicationCategory.CAUTION: Severity.CAUTION,
    ContraindicationCategory.MODIFIED: Severity.MODIFIED,
}


class ContraindicationCondition(str, Enum):
    # Absolute contraindications
    FEVER = "fever"
    ACTIVE_INFECTION = "active_infection"
    OPEN_WOUNDS = "open_wounds"
    SEVERE_OSTEOPOROSIS = "severe_osteoporosis"
    DVT = "dvt"
    RECENT_SURGERY = "recent_surgery"
    SEVERE_HYPERTENSION = "severe_hypertension"
    ACTIVE_INFLAMMATION = "active_inflammation"
    CONTAGIOUS_SKIN_CONDITION = "contagious_skin_condition"
    HEMOPHILIA = "hemophilia"

    # Local contraindications
    BRUISING = "bruising"
    VARICOSE_VEINS = "varicose_veins"
    SKIN_RASH = "skin_rash"
    RECENT_INJURY = "recent_injury"
    BURSITIS = "bursitis"
    TENDINITIS = "tendinitis"
    FRACTURE = "fracture"
    BURNS = "burns"

    # Caution required
    PREGNANCY = "pregnancy"
    CANCER = "cancer"
    HEART_CONDITION = "heart_condition"
    DIABETES = "diabetes"
    EPILEPSY = "epilepsy"
    AUTOIMMUNE = "autoimmune"
    BLOOD_THINNERS = "blood_thinners"
    NERVE_DAMAGE = "nerve_damage"
    CHRONIC_PAIN = "chronic_pain"
    ASTHMA = "asthma"

    # Modified treatment
    ARTHRITIS = "arthritis"
    FIBROMYALGIA = "fibromyalgia"
    MIGRAINES = "migraines"
    ANXIETY = "anxiety"
    DEPRESSION = "depression"
    HIGH_BLOOD_PRESSURE = "high_blood_pressure"
    PREVIOUS_MASSAGE_REACTION = "previous_massage_reaction"

    @property
    def profile(self) -> ConditionProfile:
        from knowledge.contraindications import profile_for

        return profile_for(self)

    @property
    def display_name(self) -> str:
        return self.profile.display_name

    @property
    def category(self) -> ContraindicationCategory:
        return self.profile.category

    @property
    def default_severity(self) -> Severity:
        return self.profile.category.severity

    @property
    def recommendations(self) -> list[str]:
        return list(self.profile.recommendations)

    @property
    def requires_physician_clearance(self) -> bool:
        return self.profile.requires_physician_clearance


class Urgency(str, Enum):
    """Red-flag triage level, most urgent first."""

    EMERGENCY = "emergency"
    URGENT = "urgent"
    PROMPT = "prompt"
    SOON = "soon"

    @property
    def rank(self) -> int:
        """Higher is more urgent."""
        return _URGENCY_RANK[self]

    @property
    def label(self) -> str:
        return _URGENCY_LABELS[self]

    @property
    def recommended_action(self) -> str:
        from knowledge.red_flags import recommended_action

        return recommended_action(self)

    def outranks(self, other: Urgency) -> bool:
        return self.rank > other.rank


_URGENCY_RANK = {
    Urgency.EMERGENCY: 4,
    Urgency.URGENT: 3,
    Urgency.PROMPT: 2,
    Urgency.SOON: 1,
}

_URGENCY_LABELS = {
    Urgency.EMERGENCY: "Emergency - 911",
    Urgency.URGENT: "Urgent - ER Today",
    Urgency.PROMPT: "Prompt - 24-48 Hours",
    Urgency.SOON: "Soon - Within 1 Week",
}


class RedFlagCategory(str, Enum):
    NEUROLOGICAL = "neurological"
    CARDIOVASCULAR = "cardiovascular"
    MUSCULOSKELETAL = "musculoskeletal"
    SYSTEMIC = "systemic"
    INFECTION = "infection"


class RedFlagSymptom(str, Enum):
    # Neurological
    SUDDEN_WEAKNESS = "sudden_weakness"
    VISION_CHANGES = "vision_changes"
    SEVERE_HEADACHE = "severe_headache"
    DIFFICULTY_WALKING = "difficulty_walking"
    CONFUSION_SPEECH = "confusion_speech"
    SEIZURES = "seizures"

    # Cardiovascular
    CHEST_PAIN = "chest_pain"
    SHORTNESS_OF_BREATH = "shortness_of_breath"
    IRREGULAR_HEARTBEAT = "irregular_heartbeat"
    LEG_SWELLING = "leg_swelling"
    CYANOSIS = "cyanosis"

    # Musculoskeletal
    TRAUMATIC_INJURY = "traumatic_injury"
    PROGRESSIVE_WEAKNESS = "progressive_weakness"
    NIGHT_PAIN = "night_pain"
    BONE_DEFORMITY = "bone_deformity"
    CREPITUS = "crepitus"

    # Systemic
    UNEXPLAINED_WEIGHT_LOSS = "unexplained_weight_loss"
    NIGHT_SWEATS = "night_sweats"
    UNCONTROLLED_BLEEDING = "uncontrolled_bleeding"
    HIGH_FEVER = "high_fever"
    SEVERE_ABDOMINAL_PAIN = "severe_abdominal_pain"

    # Infection
    RED_STREAKING = "red_streaking"
    RAPIDLY_SPREADING_RASH = "rapidly_spreading_rash"
    PUS = "pus"
    HOT_JOINT = "hot_joint"

    @property
    def profile(self) -> SymptomProfile:
        from knowledge.red_flags import symptom_profile

        return symptom_profile(self)

    @property
    def display_name(self) -> str:
        return self.profile.display_name

    @property
    def urgency(self) -> Urgency:
        return self.profile.urgency

    @property
    def category(self) -> RedFlagCategory:
        return self.profile.category

    @property
    def recommended_action(self) -> str:
        return self.urgency.recommended_action


# =============================================================================
# ALERTS
# =============================================================================


class ContraindicationAlert(BaseModel):
    """
    One detected or declared instance of a condition for one client.

    Records are immutable. Resolution produces a new record with the same id;
    alerts are never deleted so the history stays auditable.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=generate_id)
    client_id: str
    condition: ContraindicationCondition
    severity: Severity = Field(description="May differ from the condition's default if overridden")
    detected_date: datetime = Field(default_factory=utcnow)
    notes: str = ""
    action_taken: str | None = None
    is_resolved: bool = False
    resolved_date: datetime | None = None

    @model_validator(mode="after")
    def _check_resolution(self) -> ContraindicationAlert:
        if self.is_resolved and self.resolved_date is None:
            raise ValueError("resolved alerts must carry a resolved_date")
        if not self.is_resolved and self.resolved_date is not None:
            raise ValueError("unresolved alerts cannot carry a resolved_date")
        return self

    @property
    def is_active(self) -> bool:
        return not self.is_resolved

    @property
    def blocks_treatment(self) -> bool:
        return self.is_active and self.severity.blocks_treatment

    def resolved(self, action_taken: str, when: datetime | None = None) -> ContraindicationAlert:
        """Return a resolved copy of this alert; every other field is kept."""
        data = self.model_dump()
        data.update(
            action_taken=action_taken,
            is_resolved=True,
            resolved_date=when or utcnow(),
        )
        return ContraindicationAlert.model_validate(data)


class RedFlagAlert(BaseModel):
    """A point-in-time emergent symptom observed for a client."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=generate_id)
    client_id: str
    symptom: RedFlagSymptom
    detected_date: datetime = Field(default_factory=utcnow)
    notes: str = ""
    action_taken: str | None = None
    was_referred: bool = False
    referral_details: str | None = None

    @property
    def urgency(self) -> Urgency:
        return self.symptom.urgency


# =============================================================================
# DERIVED VIEWS
# =============================================================================


class ContraindicationStatistics(BaseModel):
    total: int = 0
    active: int = 0
    resolved: int = 0
    by_severity: dict[Severity, int] = Field(
        default_factory=lambda: {severity: 0 for severity in Severity},
        description="Active alerts per severity",
    )
    by_category: dict[str, int] = Field(
        default_factory=dict,
        description="Active alerts per condition category label",
    )

    @property
    def absolute(self) -> int:
        return self.by_severity.get(Severity.ABSOLUTE, 0)

    @property
    def local(self) -> int:
        return self.by_severity.get(Severity.LOCAL, 0)

    @property
    def caution(self) -> int:
        return self.by_severity.get(Severity.CAUTION, 0)

    @property
    def modified(self) -> int:
        return self.by_severity.get(Severity.MODIFIED, 0)


class RedFlagStatistics(BaseModel):
    total: int = 0
    emergency: int = 0
    urgent: int = 0
    prompt: int = 0
    referred: int = 0
    referral_rate: float = Field(0.0, description="Referred flags as a percentage of all flags")


class SafetyClearance(BaseModel):
    """Outcome of the safety gate for one client."""

    client_id: str
    allowed: bool
    blocking_alerts: list[ContraindicationAlert] = Field(default_factory=list)
    active_alerts: list[ContraindicationAlert] = Field(default_factory=list)
    physician_clearance_required: list[ContraindicationCondition] = Field(default_factory=list)

    @property
    def advisory_alerts(self) -> list[ContraindicationAlert]:
        """Active alerts that do not block treatment."""
        return [a for a in self.active_alerts if not a.blocks_treatment]
