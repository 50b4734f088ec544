"""
Tests for the synthetic velocity / force / efficiency series.
"""

import random

import pytest

from kinetics.models import Activity
from kinetics.timeseries import synthesize_time_series, time_series_frame


def _seconds(label):
    minutes, seconds = label.split(':')
    return int(seconds)


@pytest.mark.parametrize("activity", list(Activity))
@pytest.mark.parametrize("duration", [0.5, 5.0, 12.0, 59.0])
def test_always_21_non_negative_points(activity, duration):
    points = synthesize_time_series(activity, duration, rng=random.Random(2))

    assert len(points) == 21
    assert all(p.velocity >= 0 and p.force >= 0 for p in points)

    seconds = [_seconds(p.time_label) for p in points]
    assert seconds == sorted(seconds)
    assert points[0].time_label == "00:00"


def test_boxing_peak_at_midpoint():
    points = synthesize_time_series(Activity.BOXING, 10, rng=random.Random(0))
    mid = points[10]

    assert mid.time_label == "00:05"
    assert mid.velocity == pytest.approx(12.0)
    assert mid.force == 2500
    assert 80 <= mid.efficiency <= 90


def test_athletics_curve_is_deterministic():
    points = synthesize_time_series(Activity.ATHLETICS, 5)

    assert points[0].velocity == 0.0
    assert points[0].force == 800
    assert points[0].efficiency == 70
    assert points[-1].velocity == pytest.approx(24.0)
    assert points[-1].efficiency == 90
    assert points[-1].time_label == "00:05"


def test_generic_curve_ranges():
    for p in synthesize_time_series(Activity.SOCCER, 5, rng=random.Random(8)):
        assert 5.0 <= p.velocity <= 6.0
        assert 500 <= p.force <= 600
        assert p.efficiency == 75


def test_missing_duration_falls_back_to_five_seconds():
    points = synthesize_time_series(Activity.SWIMMING, None)
    assert points[-1].time_label == "00:05"


def test_precision_is_applied():
    for p in synthesize_time_series(Activity.SWIMMING, 8, rng=random.Random(4)):
        assert p.velocity == round(p.velocity, 1)
        assert isinstance(p.force, int)
        assert isinstance(p.efficiency, int)


def test_frame_for_charting():
    df = time_series_frame(synthesize_time_series(Activity.BOXING, 10))
    assert list(df.columns) == ['time', 'velocity', 'force', 'efficiency']
    assert len(df) == 21
