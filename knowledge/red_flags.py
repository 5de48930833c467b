"""
Red-flag symptom catalogue.

Red flags are symptoms that call for referral rather than treatment. Every
symptom has a fixed urgency; the recommended action is keyed off urgency
alone.
"""

from __future__ import annotations

from dataclasses import dataclass

from unctico.models.safety import RedFlagCategory, RedFlagSymptom, Urgency

S = RedFlagSymptom
NEURO = RedFlagCategory.NEUROLOGICAL
CARDIO = RedFlagCategory.CARDIOVASCULAR
MSK = RedFlagCategory.MUSCULOSKELETAL
SYSTEMIC = RedFlagCategory.SYSTEMIC
INFECTION = RedFlagCategory.INFECTION


@dataclass(frozen=True)
class SymptomProfile:
    display_name: str
    category: RedFlagCategory
    urgency: Urgency


SYMPTOM_PROFILES: dict[RedFlagSymptom, SymptomProfile] = {
    S.SUDDEN_WEAKNESS: SymptomProfile("Sudden Weakness/Numbness", NEURO, Urgency.EMERGENCY),
    S.VISION_CHANGES: SymptomProfile("Vision Changes/Loss", NEURO, Urgency.EMERGENCY),
    S.SEVERE_HEADACHE: SymptomProfile("Severe Sudden Headache", NEURO, Urgency.URGENT),
    S.DIFFICULTY_WALKING: SymptomProfile("Difficulty Walking/Balance Issues", NEURO, Urgency.SOON),
    S.CONFUSION_SPEECH: SymptomProfile("Confusion/Speech Difficulty", NEURO, Urgency.EMERGENCY),
    S.SEIZURES: SymptomProfile("Seizures", NEURO, Urgency.EMERGENCY),

    S.CHEST_PAIN: SymptomProfile("Chest Pain/Pressure", CARDIO, Urgency.EMERGENCY),
    S.SHORTNESS_OF_BREATH: SymptomProfile("Severe Shortness of Breath", CARDIO, Urgency.EMERGENCY),
    S.IRREGULAR_HEARTBEAT: SymptomProfile("Irregular Heartbeat", CARDIO, Urgency.URGENT),
    S.LEG_SWELLING: SymptomProfile("Sudden Leg Swelling (one leg)", CARDIO, Urgency.URGENT),
    S.CYANOSIS: SymptomProfile("Bluish Skin Color", CARDIO, Urgency.EMERGENCY),

    S.TRAUMATIC_INJURY: SymptomProfile("Recent Traumatic Injury", MSK, Urgency.URGENT),
    S.PROGRESSIVE_WEAKNESS: SymptomProfile("Progressive Muscle Weakness", MSK, Urgency.PROMPT),
    S.NIGHT_PAIN: SymptomProfile("Severe Night Pain", MSK, Urgency.PROMPT),
    S.BONE_DEFORMITY: SymptomProfile("Visible Bone Deformity", MSK, Urgency.SOON),
    S.CREPITUS: SymptomProfile("Grinding/Popping with Pain", MSK, Urgency.SOON),

    S.UNEXPLAINED_WEIGHT_LOSS: SymptomProfile("Unexplained Weight Loss", SYSTEMIC, Urgency.PROMPT),
    S.NIGHT_SWEATS: SymptomProfile("Night Sweats/Chills", SYSTEMIC, Urgency.PROMPT),
    S.UNCONTROLLED_BLEEDING: SymptomProfile("Uncontrolled Bleeding", SYSTEMIC, Urgency.EMERGENCY),
    S.HIGH_FEVER: SymptomProfile("High Fever (>103°F)", SYSTEMIC, Urgency.URGENT),
    S.SEVERE_ABDOMINAL_PAIN: SymptomProfile("Severe Abdominal Pain", SYSTEMIC, Urgency.URGENT),

    S.RED_STREAKING: SymptomProfile("Red Streaking on Skin", INFECTION, Urgency.URGENT),
    S.RAPIDLY_SPREADING_RASH: SymptomProfile("Rapidly Spreading Rash", INFECTION, Urgency.PROMPT),
    S.PUS: SymptomProfile("Pus or Discharge", INFECTION, Urgency.SOON),
    S.HOT_JOINT: SymptomProfile("Hot, Swollen Joint", INFECTION, Urgency.PROMPT),
}

RECOMMENDED_ACTIONS: dict[Urgency, str] = {
    Urgency.EMERGENCY: "CALL 911 IMMEDIATELY - Do not massage",
    Urgency.URGENT: "Refer to emergency room TODAY - Do not massage",
    Urgency.PROMPT: "Refer to physician within 24-48 hours - Do not massage",
    Urgency.SOON: "Advise to see physician within 1 week - Proceed with caution",
}


def symptom_profile(symptom: RedFlagSymptom) -> SymptomProfile:
    return SYMPTOM_PROFILES[symptom]


def recommended_action(urgency: Urgency) -> str:
    return RECOMMENDED_ACTIONS[urgency]


def symptoms_by_urgency(urgency: Urgency) -> list[RedFlagSymptom]:
    """Symptoms at one urgency level, in declaration order."""
    return [s for s in RedFlagSymptom if SYMPTOM_PROFILES[s].urgency == urgency]


def _check_exhaustive() -> None:
    missing = [s.value for s in RedFlagSymptom if s not in SYMPTOM_PROFILES]
    if missing:
        raise RuntimeError(f"Red flag profiles missing for: {', '.join(missing)}")
    unmapped = [u.value for u in Urgency if u not in RECOMMENDED_ACTIONS]
    if unmapped:
        raise RuntimeError(f"No recommended action for urgency: {', '.join(unmapped)}")


_check_exhaustive()
