import pytest

from training_tracker.schemas.session import CompletedExercise, CompletedSet
from training_tracker.services.calorie_estimation import (
    MET_LIGHT,
    MET_MODERATE,
    MET_VIGOROUS,
    completed_tonnage,
    estimate_calories,
    estimate_session_calories,
    get_active_duration_minutes,
    get_met_for_intensity,
    infer_intensity_from_tonnage,
)


def bench(done: int, total: int = 3, weight: float | None = 100.0) -> CompletedExercise:
    return CompletedExercise(
        exercise_id="bench",
        exercise_name="Bench Press",
        sets=[
            CompletedSet(set_number=n, reps=10, weight=weight, completed=n <= done)
            for n in range(1, total + 1)
        ],
        total_sets=total,
        completed_sets=done,
    )


@pytest.mark.parametrize(
    "intensity,met",
    [("light", MET_LIGHT), ("Vigorous ", MET_VIGOROUS), (None, MET_MODERATE), ("unknown", MET_MODERATE)],
)
def test_met_for_intensity(intensity, met):
    assert get_met_for_intensity(intensity) == met


def test_intensity_from_tonnage():
    assert infer_intensity_from_tonnage(1000, 20) == "light"
    assert infer_intensity_from_tonnage(3000, 20) == "moderate"
    assert infer_intensity_from_tonnage(5000, 20) == "vigorous"
    assert infer_intensity_from_tonnage(0, 20) == "moderate"


def test_estimate_calories_formula():
    # 5.0 MET x 3.5 x 80 / 200 x 60
    assert estimate_calories(80, 60, "moderate") == 420.0
    assert estimate_calories(0, 60) == 0.0
    assert estimate_calories(80, 0) == 0.0


def test_only_completed_sets_count_towards_tonnage():
    assert completed_tonnage([bench(done=2)]) == 2000.0
    assert completed_tonnage([bench(done=3, weight=None)]) == 0.0


def test_duration_falls_back_to_set_estimate():
    assert get_active_duration_minutes(40, 3) == 40.0
    assert get_active_duration_minutes(0, 4) == 10.0
    assert get_active_duration_minutes(None, 0) == 0.0


def test_session_estimate_needs_body_weight_and_work():
    assert estimate_session_calories([bench(done=3)], None, 30) is None
    assert estimate_session_calories([bench(done=0)], 80, 0) is None
    # 3000 kg over 30 min = 100 kg/min -> moderate
    assert estimate_session_calories([bench(done=3)], 80, 30) == estimate_calories(80, 30, "moderate")
