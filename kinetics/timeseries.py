"""
timeseries.py
Synthesize the velocity / force / efficiency curve shown on the report.
"""

import math
import random
from typing import Sequence, Tuple

import pandas as pd

from kinetics.models import Activity, TimeSeriesPoint


SERIES_STEPS = 20
DEFAULT_SERIES_DURATION = 5.0


def format_time_label(seconds: float) -> str:
    return f"00:{math.floor(seconds):02d}"


def _boxing(t: float, rng):
    # Impulse curve peaking mid-punch
    velocity = 12 * math.sin(t * math.pi)
    force = 2500 * math.sin(t * math.pi) ** 2
    efficiency = 80 + rng.uniform(0, 10)
    return velocity, force, efficiency


def _athletics(t: float, rng):
    # Logarithmic acceleration with a ripple per step
    velocity = 10 * math.log(t * 10 + 1)
    force = 800 + math.sin(t * 10) * 200
    efficiency = 70 + t * 20
    return velocity, force, efficiency


def _swimming(t: float, rng):
    velocity = 2 + math.sin(t * 10)
    force = 300 + math.cos(t * 10) * 50
    efficiency = 85 + rng.uniform(0, 5)
    return velocity, force, efficiency


def _generic(t: float, rng):
    velocity = 5 + rng.uniform(0, 1)
    force = 500 + rng.uniform(0, 100)
    efficiency = 75
    return velocity, force, efficiency


WAVEFORMS = {
    Activity.BOXING: _boxing,
    Activity.ATHLETICS: _athletics,
    Activity.SWIMMING: _swimming,
    Activity.SOCCER: _generic,
    Activity.OTHER: _generic,
}


def synthesize_time_series(activity, duration_seconds: float = None, rng=None) -> Tuple[TimeSeriesPoint, ...]:
    """
    Generate 21 evenly spaced points (t = 0, 0.05, ..., 1).

    Args:
        activity: Activity or its name
        duration_seconds: Clip duration used for the mm:ss labels;
            missing or non-positive values fall back to 5 seconds
        rng: random.Random-compatible source for jittered waveforms

    Returns:
        Tuple of TimeSeriesPoint, velocity to 1 dp, force/efficiency integer
    """
    activity = Activity.parse(activity)
    rng = rng or random.Random()
    if not duration_seconds or duration_seconds <= 0:
        duration_seconds = DEFAULT_SERIES_DURATION

    waveform = WAVEFORMS[activity]
    points = []

    for i in range(SERIES_STEPS + 1):
        t = i / SERIES_STEPS
        velocity, force, efficiency = waveform(t, rng)

        points.append(TimeSeriesPoint(
            time_label=format_time_label(t * duration_seconds),
            velocity=round(max(0.0, velocity), 1),
            force=int(round(max(0.0, force))),
            efficiency=int(round(efficiency)),
        ))

    return tuple(points)


def time_series_frame(points: Sequence[TimeSeriesPoint]) -> pd.DataFrame:
    """One row per point, ready for st.line_chart."""
    df = pd.DataFrame([
        {
            'time': p.time_label,
            'velocity': p.velocity,
            'force': p.force,
            'efficiency': p.efficiency,
        }
        for p in points
    ])
    return df
