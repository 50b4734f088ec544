"""
Tests for muscle-group assessments, drills and weakness selection.
"""

import random

import pytest

from kinetics.metrics import derive_metrics
from kinetics.models import Activity, CategoryAssessment, StatusTier
from kinetics.narrative import (
    FALLBACK_WEAKNESS,
    compose_narrative,
    projected_improvement,
    weakest_category,
)


def _narrative(energy, activity, seed=5):
    bundle = derive_metrics(energy, activity, rng=random.Random(seed))
    return bundle, compose_narrative(bundle, activity)


@pytest.mark.parametrize("activity", list(Activity))
@pytest.mark.parametrize("energy", [0.0, 30.0, 250.0])
def test_shape_of_every_branch(activity, energy):
    _, narrative = _narrative(energy, activity)

    assert len(narrative.categories) == 3
    assert len(narrative.actions) >= 2
    assert len(narrative.tips) == 3
    assert narrative.summary
    for category in narrative.categories:
        assert 0 <= category.score <= 100
        assert isinstance(category.score, int)


def test_athletics_at_rest():
    bundle, narrative = _narrative(0.0, Activity.ATHLETICS)
    glutes, calves, hips = narrative.categories

    assert glutes.name == "Gluteus Maximus"
    assert glutes.status == StatusTier.WEAK
    assert glutes.score == 40
    assert calves.status == StatusTier.AVERAGE
    assert hips.status == StatusTier.AVERAGE
    assert hips.score == 100
    assert narrative.tips[0] == f"Target Stride Rate: {bundle.universal.stride_rate + 5} spm"
    assert "GRF: 2.0x BW" in narrative.summary
    assert weakest_category(narrative.categories) == "Gluteus Maximus"


def test_athletics_high_energy_tightens_hip_flexors():
    _, narrative = _narrative(30.0, Activity.ATHLETICS)
    hips = narrative.categories[2]

    assert hips.status == StatusTier.WEAK
    assert hips.score == 50


def test_soccer_without_weakness_falls_back_to_general():
    _, narrative = _narrative(0.0, Activity.SOCCER)

    assert all(c.status != StatusTier.WEAK for c in narrative.categories)
    assert weakest_category(narrative.categories) == FALLBACK_WEAKNESS


def test_soccer_unstable_plant_foot_is_weak():
    bundle, narrative = _narrative(100.0, Activity.SOCCER)
    adductors = narrative.categories[1]

    assert adductors.name == "Hip Adductors"
    assert adductors.status == StatusTier.WEAK
    assert adductors.score == 50
    assert "Kick Velocity: 140.0 km/h" in narrative.summary


def test_swimming_drag_branches():
    _, calm = _narrative(0.0, Activity.SWIMMING)
    _, rough = _narrative(100.0, Activity.SWIMMING)

    assert calm.categories[2].status == StatusTier.STRONG
    assert rough.categories[2].status == StatusTier.WEAK
    assert rough.categories[2].observation == "Excessive body roll creating hydrodynamic drag."
    assert len(calm.actions) == 2


def test_boxing_slow_retraction_flags_deltoids():
    _, narrative = _narrative(0.0, Activity.BOXING)

    assert narrative.categories[0].name == "Posterior Deltoids"
    assert narrative.categories[0].status == StatusTier.WEAK
    assert weakest_category(narrative.categories) == "Posterior Deltoids"
    assert [a.name for a in narrative.actions] == [
        "Slip Rope", "Heavy Bag Tabata", "Shadow Boxing with Resistance",
    ]
    assert all(a.audio_cue for a in narrative.actions)


def test_weakest_is_first_in_table_order():
    categories = [
        CategoryAssessment("A", StatusTier.STRONG, 90, ""),
        CategoryAssessment("B", StatusTier.WEAK, 20, ""),
        CategoryAssessment("C", StatusTier.WEAK, 10, ""),
    ]
    assert weakest_category(categories) == "B"
    assert weakest_category([]) == FALLBACK_WEAKNESS


def test_same_bundle_same_narrative():
    bundle = derive_metrics(64.0, Activity.BOXING, rng=random.Random(9))
    assert compose_narrative(bundle, 'Boxing') == compose_narrative(bundle, 'Boxing')


def test_projected_improvement_text():
    assert projected_improvement(0.0) == "10% gain in 30 days"
    assert projected_improvement(100.0) == "15% gain in 30 days"
