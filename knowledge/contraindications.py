"""
Contraindication catalogue for massage therapy.

Each condition the engine knows about has a fixed profile: its clinical
category (which also fixes its default severity), an ordered list of
practitioner recommendations, and whether a physician must clear the client
before treatment. The table is checked for completeness at import time, so a
condition added to ``ContraindicationCondition`` without a profile fails
loudly instead of surfacing as a missing key in the middle of a session.
"""

from __future__ import annotations

from dataclasses import dataclass

from unctico.models.safety import ContraindicationCategory, ContraindicationCondition

C = ContraindicationCondition
ABSOLUTE = ContraindicationCategory.ABSOLUTE
LOCAL = ContraindicationCategory.LOCAL
CAUTION = ContraindicationCategory.CAUTION
MODIFIED = ContraindicationCategory.MODIFIED


@dataclass(frozen=True)
class ConditionProfile:
    """Fixed clinical facts about a condition."""
    display_name: str
    category: ContraindicationCategory
    recommendations: tuple[str, ...]
    requires_physician_clearance: bool = False


CONDITION_PROFILES: dict[ContraindicationCondition, ConditionProfile] = {
    # -------------------------------------------------------------------------
    # Absolute contraindications
    # -------------------------------------------------------------------------
    C.FEVER: ConditionProfile(
        "Fever", ABSOLUTE,
        (
            "Do not proceed with massage",
            "Reschedule after fever subsides",
            "Client should rest and recover",
        ),
    ),
    C.ACTIVE_INFECTION: ConditionProfile(
        "Active Infection", ABSOLUTE,
        (
            "Do not proceed with massage",
            "Risk of spreading infection",
            "Reschedule after infection clears",
        ),
    ),
    C.OPEN_WOUNDS: ConditionProfile(
        "Open Wounds", ABSOLUTE,
        (
            "Do not proceed with massage",
            "Risk of infection at the wound site",
            "Reschedule once wounds have closed",
        ),
    ),
    C.SEVERE_OSTEOPOROSIS: ConditionProfile(
        "Severe Osteoporosis", ABSOLUTE,
        (
            "Do not proceed with massage",
            "Risk of fracture under pressure",
            "Request physician guidance on safe touch",
        ),
    ),
    C.DVT: ConditionProfile(
        "Deep Vein Thrombosis (DVT)", ABSOLUTE,
        (
            "Absolutely no massage",
            "Risk of blood clot dislodgement",
            "Refer to physician immediately",
        ),
        requires_physician_clearance=True,
    ),
    C.RECENT_SURGERY: ConditionProfile(
        "Recent Surgery", ABSOLUTE,
        (
            "Do not proceed with massage",
            "Obtain surgeon or physician clearance",
            "Avoid incision sites once cleared",
        ),
        requires_physician_clearance=True,
    ),
    C.SEVERE_HYPERTENSION: ConditionProfile(
        "Severe Uncontrolled Hypertension", ABSOLUTE,
        (
            "Do not proceed with massage",
            "Refer to physician for blood pressure management",
            "Reschedule once blood pressure is controlled",
        ),
        requires_physician_clearance=True,
    ),
    C.ACTIVE_INFLAMMATION: ConditionProfile(
        "Acute Inflammation", ABSOLUTE,
        (
            "Do not proceed with massage",
            "Massage may aggravate the inflammatory response",
            "Reschedule after the acute phase",
        ),
    ),
    C.CONTAGIOUS_SKIN_CONDITION: ConditionProfile(
        "Contagious Skin Condition", ABSOLUTE,
        (
            "Do not proceed with massage",
            "Risk of transmission to therapist and other clients",
            "Launder linens and disinfect the treatment area",
        ),
    ),
    C.HEMOPHILIA: ConditionProfile(
        "Hemophilia", ABSOLUTE,
        (
            "Do not proceed with massage",
            "Risk of internal bleeding and bruising",
            "Obtain physician clearance before any bodywork",
        ),
        requires_physician_clearance=True,
    ),

    # -------------------------------------------------------------------------
    # Local contraindications
    # -------------------------------------------------------------------------
    C.BRUISING: ConditionProfile(
        "Bruising/Hematoma", LOCAL,
        (
            "Avoid the bruised area",
            "May treat unaffected areas",
            "Ask about unexplained or frequent bruising",
        ),
    ),
    C.VARICOSE_VEINS: ConditionProfile(
        "Varicose Veins", LOCAL,
        (
            "Avoid direct pressure on affected veins",
            "May work above area with light effleurage",
            "Do not use deep pressure or friction",
        ),
    ),
    C.SKIN_RASH: ConditionProfile(
        "Skin Rash", LOCAL,
        (
            "Avoid the affected skin",
            "Do not apply lotion or oil to the rash",
            "Refer if the rash is spreading or of unknown cause",
        ),
    ),
    C.RECENT_INJURY: ConditionProfile(
        "Recent Injury", LOCAL,
        (
            "Avoid the injured area during the acute phase",
            "Treat compensating areas gently",
            "Reassess the area at the next session",
        ),
    ),
    C.BURSITIS: ConditionProfile(
        "Bursitis", LOCAL,
        (
            "Avoid direct pressure on the inflamed bursa",
            "Work surrounding musculature with light pressure",
            "Cold application may help",
        ),
    ),
    C.TENDINITIS: ConditionProfile(
        "Acute Tendinitis", LOCAL,
        (
            "Avoid friction on the affected tendon",
            "Work proximal muscles gently",
            "Encourage rest of the affected area",
        ),
    ),
    C.FRACTURE: ConditionProfile(
        "Recent Fracture", LOCAL,
        (
            "Avoid the fracture site",
            "Work other areas with care for positioning",
            "Confirm healing status before working the area",
        ),
    ),
    C.BURNS: ConditionProfile(
        "Burns", LOCAL,
        (
            "Avoid burned skin entirely",
            "Do not apply lubricant to healing tissue",
            "Scar work only once fully healed",
        ),
    ),

    # -------------------------------------------------------------------------
    # Caution required
    # -------------------------------------------------------------------------
    C.PREGNANCY: ConditionProfile(
        "Pregnancy", CAUTION,
        (
            "Use prenatal positioning (side-lying)",
            "Avoid deep abdominal work",
            "Modify pressure as needed",
            "Get physician clearance for high-risk pregnancies",
        ),
    ),
    C.CANCER: ConditionProfile(
        "Cancer/Tumors", CAUTION,
        (
            "Obtain physician clearance before massage",
            "Avoid tumor sites",
            "Use light to moderate pressure only",
            "Be aware of treatment side effects (chemo, radiation)",
        ),
        requires_physician_clearance=True,
    ),
    C.HEART_CONDITION: ConditionProfile(
        "Heart Condition", CAUTION,
        (
            "Obtain physician clearance before massage",
            "Use shorter sessions with moderate pressure",
            "Monitor for dizziness or shortness of breath",
        ),
        requires_physician_clearance=True,
    ),
    C.DIABETES: ConditionProfile(
        "Diabetes", CAUTION,
        (
            "Check blood sugar before session",
            "Have client eat beforehand",
            "Monitor for signs of hypoglycemia",
            "Avoid deep tissue on extremities",
        ),
    ),
    C.EPILEPSY: ConditionProfile(
        "Epilepsy", CAUTION,
        (
            "Obtain physician clearance before massage",
            "Ask about seizure triggers and warning signs",
            "Avoid strong scents and flashing light",
        ),
        requires_physician_clearance=True,
    ),
    C.AUTOIMMUNE: ConditionProfile(
        "Autoimmune Disorder", CAUTION,
        (
            "Avoid massage during flare-ups",
            "Use gentle pressure",
            "Check in about fatigue after sessions",
        ),
    ),
    C.BLOOD_THINNERS: ConditionProfile(
        "Blood Thinning Medication", CAUTION,
        (
            "Use light pressure to avoid bruising",
            "Avoid deep tissue and percussive techniques",
            "Watch for unusual bruising",
        ),
    ),
    C.NERVE_DAMAGE: ConditionProfile(
        "Nerve Damage", CAUTION,
        (
            "Reduced sensation may hide excessive pressure",
            "Use light pressure over affected areas",
            "Check in frequently about comfort",
        ),
    ),
    C.CHRONIC_PAIN: ConditionProfile(
        "Chronic Pain Syndrome", CAUTION,
        (
            "Work within client's pain tolerance",
            "Start with lighter pressure and build gradually",
            "Track response between sessions",
        ),
    ),
    C.ASTHMA: ConditionProfile(
        "Asthma", CAUTION,
        (
            "Ensure client has their inhaler available",
            "Avoid strong scents and oils",
            "Adjust positioning if breathing becomes difficult",
        ),
    ),

    # -------------------------------------------------------------------------
    # Modified treatment
    # -------------------------------------------------------------------------
    C.ARTHRITIS: ConditionProfile(
        "Arthritis", MODIFIED,
        (
            "Use gentle techniques",
            "Avoid inflamed joints",
            "Heat or cold therapy may help",
            "Work within client's pain tolerance",
        ),
    ),
    C.FIBROMYALGIA: ConditionProfile(
        "Fibromyalgia", MODIFIED,
        (
            "Use light to moderate pressure",
            "Avoid aggressive trigger point work",
            "Expect variable tolerance between sessions",
        ),
    ),
    C.MIGRAINES: ConditionProfile(
        "Chronic Migraines", MODIFIED,
        (
            "Do not treat during an active migraine",
            "Keep lighting dim and scents minimal",
            "Gentle neck and shoulder work may help",
        ),
    ),
    C.ANXIETY: ConditionProfile(
        "Anxiety/Panic Disorder", MODIFIED,
        (
            "Explain each step before beginning",
            "Let the client control draping and positioning",
            "Use slow, rhythmic strokes",
        ),
    ),
    C.DEPRESSION: ConditionProfile(
        "Depression", MODIFIED,
        (
            "Check whether medication affects sensation or bruising",
            "Keep a calm, consistent session structure",
            "Respect the client's communication preferences",
        ),
    ),
    C.HIGH_BLOOD_PRESSURE: ConditionProfile(
        "Controlled High Blood Pressure", MODIFIED,
        (
            "Avoid prolonged deep pressure",
            "Have client rise slowly after the session",
            "Watch for dizziness",
        ),
    ),
    C.PREVIOUS_MASSAGE_REACTION: ConditionProfile(
        "Previous Adverse Reaction to Massage", MODIFIED,
        (
            "Review what happened in the previous reaction",
            "Start conservatively and reassess",
            "Communicate with client throughout session",
        ),
    ),
}


def profile_for(condition: ContraindicationCondition) -> ConditionProfile:
    """Get the fixed profile for a condition."""
    return CONDITION_PROFILES[condition]


def conditions_in_category(category: ContraindicationCategory) -> list[ContraindicationCondition]:
    """All conditions in a category, in declaration order."""
    return [c for c in ContraindicationCondition if CONDITION_PROFILES[c].category == category]


def conditions_requiring_clearance() -> list[ContraindicationCondition]:
    return [c for c in ContraindicationCondition if CONDITION_PROFILES[c].requires_physician_clearance]


def _check_exhaustive() -> None:
    missing = [c.value for c in ContraindicationCondition if c not in CONDITION_PROFILES]
    if missing:
        raise RuntimeError(f"Contraindication profiles missing for: {', '.join(missing)}")
    empty = [c.value for c, p in CONDITION_PROFILES.items() if not p.recommendations]
    if empty:
        raise RuntimeError(f"Contraindication profiles without recommendations: {', '.join(empty)}")


_check_exhaustive()
