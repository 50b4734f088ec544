"""
Tests for the weekly training plan.
"""

import pytest

from kinetics.models import Activity, Intensity
from kinetics.schedule import WEEK_DAYS, generate_schedule


@pytest.mark.parametrize("activity", list(Activity))
def test_week_structure(activity):
    days = generate_schedule(activity, "General")

    assert len(days) == 7
    assert tuple(d.day for d in days) == WEEK_DAYS

    assert days[6].intensity == Intensity.LOW
    assert days[6].focus == "Active Recovery"
    assert days[6].drills == ("Light Stretching", "Mobility Work", "Visualization")

    for idx in (0, 2, 4):
        assert days[idx].intensity == Intensity.HIGH
    for idx in (1, 3, 5):
        assert days[idx].intensity == Intensity.MEDIUM
        assert days[idx].focus == "Technique & Biomechanics"
        assert days[idx].drills == ("Slow Motion Form", "Resistance Band Work", "Balance Drills")


def test_boxing_deltoid_weakness_swaps_finisher():
    weak = generate_schedule(Activity.BOXING, "Posterior Deltoids")
    general = generate_schedule(Activity.BOXING, "General")

    assert weak[0].focus == "Explosive Power & Speed"
    assert weak[0].drills[-1] == "Shoulder Conditioning"
    assert general[0].drills[-1] == "Core Rotations"


def test_sport_specific_high_days():
    assert generate_schedule('Soccer')[2].drills == ("Cone Weaving", "Box Jumps", "Target Shooting")
    assert generate_schedule('Swimming')[4].focus == "Strength & Conditioning"
    assert generate_schedule('Other')[0].drills == ("Squats", "Deadlifts", "Sprints")


def test_empty_weakness_treated_as_general():
    assert generate_schedule(Activity.BOXING, "")[0].drills[-1] == "Core Rotations"
