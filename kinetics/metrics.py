"""
metrics.py
Derive the physical metric bundle from the summary motion energy.

Closed-form arithmetic only. Every value is clamped at derivation time so the
bundle never carries an out-of-range field, whatever the input energy.
"""

import math
import random

import numpy as np

from kinetics.models import (
    Activity,
    AthleticsMetrics,
    BoxingMetrics,
    MetricBundle,
    SoccerMetrics,
    SwimmingMetrics,
    UniversalMetrics,
)


# Boxing: effective mass of arm + shoulder link (kg) and contact time (s)
PUNCH_EFFECTIVE_MASS = 4.5
PUNCH_CONTACT_TIME = 0.08


def clamp(value: float, low: float = None, high: float = None) -> float:
    """np.clip with optional bounds, returned as a plain float."""
    low = -np.inf if low is None else low
    high = np.inf if high is None else high
    return float(np.clip(value, low, high))


def derive_universal_metrics(motion_energy: float, rng) -> UniversalMetrics:
    efficiency = math.floor(clamp(60 + motion_energy, high=100))
    symmetry = math.floor(clamp(90 + rng.uniform(-5, 5), 0, 100))

    return UniversalMetrics(
        vertical_oscillation=round(clamp(motion_energy * 0.15, 2, 15), 1),
        stride_rate=math.floor(160 + motion_energy * 2),
        ground_contact_time=math.floor(clamp(200 - motion_energy * 3, low=0)),
        symmetry_score=symmetry,
        efficiency_index=efficiency,
    )


# ============================================================================
# Activity Overlays
# ============================================================================

def _soccer(motion_energy: float, base: UniversalMetrics, rng) -> SoccerMetrics:
    kick_velocity = 60 + motion_energy * 0.8
    # Plant foot stability falls as vertical oscillation during the strike rises
    plant_stability = clamp(100 - base.vertical_oscillation * 4, 50, 100)

    return SoccerMetrics(
        kick_velocity=round(kick_velocity, 1),
        explosive_power=math.floor(kick_velocity * 8.5),
        plant_foot_stability=math.floor(plant_stability),
        shot_accuracy_prob=math.floor((plant_stability + base.symmetry_score) / 2),
    )


def _swimming(motion_energy: float, base: UniversalMetrics, rng) -> SwimmingMetrics:
    stroke_length = 1.2 + base.efficiency_index / 200
    drag = 0.4 + base.vertical_oscillation / 50

    return SwimmingMetrics(
        body_roll=round(clamp(motion_energy * 0.05, 0, 15), 1),
        stroke_length=round(stroke_length, 2),
        swolf_score=math.floor(45 - base.efficiency_index / 10),
        hydrodynamic_drag=round(drag, 2),
        catch_efficiency=math.floor(clamp(80 + stroke_length * 5, high=100)),
    )


def _boxing(motion_energy: float, base: UniversalMetrics, rng) -> BoxingMetrics:
    hand_speed = 6 + motion_energy * 0.15
    impact = PUNCH_EFFECTIVE_MASS * (hand_speed / PUNCH_CONTACT_TIME)
    retraction = hand_speed * rng.uniform(0.9, 1.1)
    kinetic_chain = clamp(70 + base.efficiency_index / 3, high=100)

    return BoxingMetrics(
        punch_velocity=round(hand_speed, 1),
        impact_force=math.floor(impact),
        reaction_time=math.floor(clamp(250 - motion_energy * 2, low=0)),
        guard_integrity=math.floor(clamp(100 - base.vertical_oscillation * 5, 0, 100)),
        kinetic_chain_efficiency=math.floor(kinetic_chain),
        retraction_speed=round(retraction, 1),
    )


def _athletics(motion_energy: float, base: UniversalMetrics, rng) -> AthleticsMetrics:
    grf = 2.0 + motion_energy / 50
    recoil = clamp(70 + motion_energy / 2, high=100)

    return AthleticsMetrics(
        explosive_power=math.floor(base.efficiency_index * 12),
        ground_reaction_force=round(grf, 2),
        elastic_recoil=math.floor(recoil),
    )


ACTIVITY_DERIVERS = {
    Activity.SOCCER: _soccer,
    Activity.SWIMMING: _swimming,
    Activity.BOXING: _boxing,
    Activity.ATHLETICS: _athletics,
    Activity.OTHER: _athletics,
}


def derive_metrics(motion_energy: float, activity, rng=None) -> MetricBundle:
    """
    Map (motion energy, activity) to a MetricBundle.

    Symmetry score and (for boxing) retraction speed carry bounded jitter;
    pass a seeded random.Random to make the result reproducible.

    Args:
        motion_energy: Summary signal (negative values are treated as 0)
        activity: Activity or its name
        rng: random.Random-compatible source for the jitter fields

    Returns:
        MetricBundle with the universal metrics and the activity variant
    """
    activity = Activity.parse(activity)
    rng = rng or random.Random()
    motion_energy = max(0.0, float(motion_energy))

    base = derive_universal_metrics(motion_energy, rng)
    specific = ACTIVITY_DERIVERS[activity](motion_energy, base, rng)

    return MetricBundle(motion_energy=motion_energy, universal=base, specific=specific)
