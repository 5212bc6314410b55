"""Calorie estimation for finished or paused sessions.

MET-based formula (2024 Compendium): kcal = MET x 3.5 x weight_kg / 200 x minutes.
Sessions carry no reported intensity, so it is inferred from work density
(tonnage of completed sets per minute of session time).
"""

from __future__ import annotations

from collections.abc import Iterable

from training_tracker.schemas.session import CompletedExercise

# MET values from 2024 Adult Compendium of Physical Activities (Conditioning / Resistance).
MET_LIGHT = 3.5    # Resistance training, multiple exercises, 8-15 reps
MET_MODERATE = 5.0  # Health club / gym, squats, deadlift
MET_VIGOROUS = 6.0  # Free weights, powerlifting, bodybuilding

DEFAULT_MET = MET_MODERATE
MINUTES_PER_SET_ESTIMATE = 2.5  # Work + rest per set when duration unknown

# Tonnage (kg per minute) thresholds.
TONNAGE_PER_MIN_LIGHT_MAX = 80.0   # < 80 kg/min -> light
TONNAGE_PER_MIN_VIGOROUS_MIN = 200.0  # >= 200 kg/min -> vigorous


def get_met_for_intensity(intensity: str | None) -> float:
    """Map intensity to MET. Default moderate."""
    i = (intensity or "").strip().lower()
    if i == "light":
        return MET_LIGHT
    if i == "vigorous":
        return MET_VIGOROUS
    return DEFAULT_MET


def infer_intensity_from_tonnage(tonnage_kg: float, duration_minutes: float) -> str:
    """Infer light/moderate/vigorous from tonnage per minute."""
    if duration_minutes <= 0 or tonnage_kg <= 0:
        return "moderate"
    kg_per_min = tonnage_kg / duration_minutes
    if kg_per_min < TONNAGE_PER_MIN_LIGHT_MAX:
        return "light"
    if kg_per_min >= TONNAGE_PER_MIN_VIGOROUS_MIN:
        return "vigorous"
    return "moderate"


def completed_tonnage(exercises: Iterable[CompletedExercise]) -> float:
    """Sum of weight x reps over completed sets that have a weight."""
    return sum(
        float(s.weight) * s.reps
        for ex in exercises
        for s in ex.sets
        if s.completed and s.weight
    )


def completed_set_count(exercises: Iterable[CompletedExercise]) -> int:
    return sum(1 for ex in exercises for s in ex.sets if s.completed)


def estimate_calories(
    weight_kg: float,
    duration_minutes: float,
    intensity: str | None = None,
    tonnage_kg: float | None = None,
) -> float:
    """Estimate calories burned; intensity is inferred from tonnage when not given."""
    if weight_kg <= 0 or duration_minutes <= 0:
        return 0.0
    if intensity is None and tonnage_kg is not None and tonnage_kg > 0:
        intensity = infer_intensity_from_tonnage(tonnage_kg, duration_minutes)
    met = get_met_for_intensity(intensity)
    return round(met * 3.5 * weight_kg / 200 * duration_minutes, 1)


def get_active_duration_minutes(duration_minutes: int | None, sets_count: int) -> float:
    """Session minutes when recorded; otherwise estimated from the number of completed sets."""
    if duration_minutes is not None and duration_minutes > 0:
        return float(duration_minutes)
    if sets_count <= 0:
        return 0.0
    return sets_count * MINUTES_PER_SET_ESTIMATE


def estimate_session_calories(
    exercises: list[CompletedExercise],
    weight_kg: float | None,
    duration_minutes: int | None,
) -> float | None:
    """Calories for a session, or None when body weight is unknown or nothing was done."""
    if not weight_kg or weight_kg <= 0:
        return None
    minutes = get_active_duration_minutes(duration_minutes, completed_set_count(exercises))
    if minutes <= 0:
        return None
    tonnage = completed_tonnage(exercises)
    return estimate_calories(weight_kg, minutes, tonnage_kg=tonnage if tonnage > 0 else None)
