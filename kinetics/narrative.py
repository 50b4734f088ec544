"""
narrative.py
Turn a metric bundle into muscle-group assessments, a summary line, tips
and corrective drills for the selected activity.
"""

import math
from dataclasses import dataclass
from typing import Sequence, Tuple

from kinetics.models import (
    Activity,
    CategoryAssessment,
    CorrectiveAction,
    MetricBundle,
    StatusTier,
)


FALLBACK_WEAKNESS = "General"


@dataclass(frozen=True)
class Narrative:
    categories: Tuple[CategoryAssessment, ...]
    summary: str
    tips: Tuple[str, ...]
    actions: Tuple[CorrectiveAction, ...]


def _score(value: float) -> int:
    return int(min(100, max(0, math.floor(value))))


def motion_stability(motion_energy: float) -> float:
    """Stability proxy: 100 minus twice the motion energy, floored at 50."""
    return 100 - min(motion_energy * 2, 50)


def projected_improvement(motion_energy: float) -> str:
    stability = motion_stability(motion_energy)
    return f"{math.floor(20 - (stability / 10))}% gain in 30 days"


# ============================================================================
# Drill Knowledge Base
# ============================================================================

def get_drill_knowledge_base() -> dict:
    """
    Static corrective drills per activity.

    Each drill includes:
    - name: Drill name
    - reps: Prescription
    - description: What the drill does
    - target: Muscle group it addresses
    - audio: Spoken cue for guided sessions
    """
    return {
        Activity.SOCCER: [
            {
                'name': 'Nordic Curls',
                'reps': '3x8',
                'description': 'Eccentric hamstring strength for sprinting/stopping.',
                'target': 'Hamstrings',
                'audio': 'Kneel down. Lower body forward slowly using hamstrings.',
            },
            {
                'name': 'Single-Leg Balance Volleys',
                'reps': '3x1 min',
                'description': 'Stabilize planting leg while dynamic.',
                'target': 'Adductors',
                'audio': 'Balance on one leg. Volley the ball back. Keep knee aligned.',
            },
            {
                'name': 'Plyometric Lunges',
                'reps': '4x12',
                'description': 'Explosive power for acceleration.',
                'target': 'Glutes/Quads',
                'audio': 'Jump lunge. Switch legs in air. Land soft.',
            },
        ],
        Activity.SWIMMING: [
            {
                'name': 'Dryland Band Pulls',
                'reps': '3x20',
                'description': 'Simulate stroke pull phase mechanics.',
                'target': 'Lats',
                'audio': 'Band attached high. Pull down keeping elbows high.',
            },
            {
                'name': 'Dead Bug Core',
                'reps': '3x15',
                'description': 'Anti-rotation core stability.',
                'target': 'Abs',
                'audio': 'Back flat on floor. Opposite arm and leg extend. Keep core tight.',
            },
        ],
        Activity.BOXING: [
            {
                'name': 'Slip Rope',
                'reps': '3x3 mins',
                'description': 'Head movement and defensive retraction.',
                'target': 'Core/Neck',
                'audio': 'Bob and weave under the rope. Move your head off the center line.',
            },
            {
                'name': 'Heavy Bag Tabata',
                'reps': '8x20s',
                'description': 'High output anaerobic conditioning.',
                'target': 'Shoulders/Lungs',
                'audio': 'Full power punches for 20 seconds. Rest 10 seconds. Go.',
            },
            {
                'name': 'Shadow Boxing with Resistance',
                'reps': '3x2 mins',
                'description': 'Increase hand speed and shoulder endurance.',
                'target': 'Deltoids',
                'audio': 'Band around back and hands. Punch against resistance.',
            },
        ],
        Activity.ATHLETICS: [
            {
                'name': 'Depth Jumps',
                'reps': '4x5',
                'description': 'Reactive power and contact time reduction.',
                'target': 'CNS/Legs',
                'audio': 'Step off box. Explode up immediately upon landing.',
            },
            {
                'name': 'A-Skips',
                'reps': '3x30m',
                'description': 'Rhythm and knee drive coordination.',
                'target': 'Hip Flexors',
                'audio': 'Skip with high knees. Drive foot down aggressively.',
            },
            {
                'name': 'Wall Drills',
                'reps': '3x30s',
                'description': 'Acceleration mechanics.',
                'target': 'Glutes',
                'audio': 'Hands on wall. Lean 45 degrees. Drive knees up powerfully.',
            },
        ],
    }


def get_corrective_actions(activity) -> Tuple[CorrectiveAction, ...]:
    activity = Activity.parse(activity)
    if activity == Activity.OTHER:
        activity = Activity.ATHLETICS

    return tuple(
        CorrectiveAction(
            name=drill['name'],
            reps=drill['reps'],
            description=drill['description'],
            target_category=drill['target'],
            audio_cue=drill.get('audio'),
        )
        for drill in get_drill_knowledge_base()[activity]
    )


# ============================================================================
# Per-Activity Assessments
# ============================================================================

def _soccer(bundle: MetricBundle):
    m = bundle.specific
    stability = m.plant_foot_stability

    categories = (
        CategoryAssessment(
            name="Quadriceps (Rectus Femoris)",
            status=StatusTier.STRONG if m.explosive_power > 600 else StatusTier.AVERAGE,
            score=85,
            observation="Solid kicking chain activation.",
        ),
        CategoryAssessment(
            name="Hip Adductors",
            status=StatusTier.WEAK if stability < 75 else StatusTier.STRONG,
            score=_score(stability),
            observation=("Plant foot instability detected during strike."
                         if stability < 75 else "Excellent lateral stability."),
        ),
        CategoryAssessment(
            name="Core (Obliques)",
            status=StatusTier.AVERAGE,
            score=72,
            observation="Rotational transfer is adequate but could be faster.",
        ),
    )
    summary = (f"SOCCER VECTOR ANALYTICS: Kick Velocity: {m.kick_velocity} km/h. "
               f"Plant Foot Stability: {m.plant_foot_stability}%. "
               f"Shot Prob: {m.shot_accuracy_prob}%")
    tips = (
        "Increase plant foot stability to improve accuracy.",
        "Engage core earlier in the swing phase.",
        "Follow through towards target vector.",
    )
    return categories, summary, tips


def _swimming(bundle: MetricBundle):
    m = bundle.specific
    drag = m.hydrodynamic_drag

    categories = (
        CategoryAssessment(
            name="Latissimus Dorsi",
            status=StatusTier.STRONG if m.catch_efficiency > 85 else StatusTier.AVERAGE,
            score=_score(m.catch_efficiency),
            observation="Pull phase shows good water engagement.",
        ),
        CategoryAssessment(
            name="Rotator Cuff",
            status=StatusTier.AVERAGE,
            score=75,
            observation="Standard catch mechanics. Watch for impingement.",
        ),
        CategoryAssessment(
            name="Core Stabilizers",
            status=StatusTier.STRONG if drag < 0.6 else StatusTier.WEAK,
            score=_score(100 - drag * 100),
            observation=("Excessive body roll creating hydrodynamic drag."
                         if drag > 0.6 else "Streamlined position maintained."),
        ),
    )
    summary = (f"HYDRO DYNAMICS: SWOLF: {m.swolf_score}. "
               f"Drag Coeff: {m.hydrodynamic_drag}. "
               f"Catch Efficiency: {m.catch_efficiency}%.")
    tips = (
        "Maintain high elbow catch (EVF).",
        "Reduce vertical oscillation to minimize drag.",
        "Kick from the hips, not knees.",
    )
    return categories, summary, tips


def _boxing(bundle: MetricBundle):
    m = bundle.specific
    retraction = m.retraction_speed
    chain = m.kinetic_chain_efficiency

    categories = (
        CategoryAssessment(
            name="Posterior Deltoids",
            status=StatusTier.STRONG if retraction > 8 else StatusTier.WEAK,
            score=_score(retraction * 8),
            observation=("Excellent defensive retraction."
                         if retraction > 8 else "Lazy retraction leaves you open."),
        ),
        CategoryAssessment(
            name="Obliques/Core",
            status=StatusTier.STRONG if chain > 80 else StatusTier.AVERAGE,
            score=_score(chain),
            observation="Rotational torque transfer is critical.",
        ),
        CategoryAssessment(
            name="Triceps Brachii",
            status=StatusTier.AVERAGE,
            score=82,
            observation="Extension velocity is within elite range.",
        ),
    )
    summary = (f"ELITE PUGILIST METRICS: Kinetic Chain: {chain}%. "
               f"Impact: ~{m.impact_force} N. "
               f"Retraction: {m.retraction_speed} m/s.")
    tips = (
        "Rotate hips to generate kinetic chain power.",
        "Snap hand back to guard faster than extension.",
        "Keep chin tucked behind lead shoulder.",
    )
    return categories, summary, tips


def _athletics(bundle: MetricBundle):
    m = bundle.specific
    grf = m.ground_reaction_force
    stability = motion_stability(bundle.motion_energy)
    stride_rate = bundle.universal.stride_rate

    categories = (
        CategoryAssessment(
            name="Gluteus Maximus",
            status=StatusTier.STRONG if grf > 2.5 else StatusTier.WEAK,
            score=_score(grf * 20),
            observation=("High force production into ground."
                         if grf > 2.5 else "Insufficient drive phase power."),
        ),
        CategoryAssessment(
            name="Gastrocnemius (Calves)",
            status=StatusTier.STRONG if m.elastic_recoil > 80 else StatusTier.AVERAGE,
            score=_score(m.elastic_recoil),
            observation="Elastic recoil is efficient.",
        ),
        CategoryAssessment(
            name="Hip Flexors",
            status=StatusTier.WEAK if stability < 60 else StatusTier.AVERAGE,
            score=_score(stability),
            observation=("Tight hips limiting stride length."
                         if stability < 60 else "Good knee drive."),
        ),
    )
    summary = (f"TRACK VECTOR ENGINE: GRF: {grf}x BW. "
               f"Elastic Recoil: {m.elastic_recoil}%. "
               f"Stride Rate: {stride_rate} spm.")
    tips = (
        f"Target Stride Rate: {stride_rate + 5} spm",
        "Focus on dorsiflexion before ground contact.",
        "Strike ground under center of mass.",
    )
    return categories, summary, tips


ACTIVITY_COMPOSERS = {
    Activity.SOCCER: _soccer,
    Activity.SWIMMING: _swimming,
    Activity.BOXING: _boxing,
    Activity.ATHLETICS: _athletics,
    Activity.OTHER: _athletics,
}


def compose_narrative(bundle: MetricBundle, activity) -> Narrative:
    """
    Build assessments, summary, tips and drills for one run.

    Args:
        bundle: Metric bundle derived for the same activity
        activity: Activity or its name

    Returns:
        Narrative with exactly 3 categories in fixed table order
    """
    activity = Activity.parse(activity)
    categories, summary, tips = ACTIVITY_COMPOSERS[activity](bundle)

    return Narrative(
        categories=categories,
        summary=summary,
        tips=tips,
        actions=get_corrective_actions(activity),
    )


def weakest_category(categories: Sequence[CategoryAssessment]) -> str:
    """First Weak category in table order, or "General" when none is Weak."""
    for category in categories:
        if category.status == StatusTier.WEAK:
            return category.name
    return FALLBACK_WEAKNESS
