"""
models.py
Value types produced by one analysis run.

Everything here is immutable: each pipeline stage builds a new value from its
inputs and nothing is modified after construction.
"""

from dataclasses import asdict, dataclass, fields
from enum import Enum
from typing import Dict, Optional, Tuple, Union


class Activity(str, Enum):
    """Sport context selected for a run; drives every branch downstream."""
    ATHLETICS = "Athletics"
    SWIMMING = "Swimming"
    SOCCER = "Soccer"
    BOXING = "Boxing"
    OTHER = "Other"

    @classmethod
    def parse(cls, value) -> "Activity":
        """Accept an Activity, its value ("Boxing") or its name ("BOXING")."""
        if isinstance(value, cls):
            return value
        text = str(value).strip()
        for member in cls:
            if text.lower() in (member.value.lower(), member.name.lower()):
                return member
        raise ValueError(f"Unknown activity: {value!r}")


class StatusTier(str, Enum):
    STRONG = "Strong"
    AVERAGE = "Average"
    WEAK = "Weak"


class Intensity(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


# ============================================================================
# Signals
# ============================================================================

@dataclass(frozen=True)
class FrameStat:
    average_brightness: float
    energy_index: float


@dataclass(frozen=True)
class SummarySignal:
    motion_energy: float
    frame_count: int = 0


# ============================================================================
# Metric Bundle
# ============================================================================

@dataclass(frozen=True)
class UniversalMetrics:
    vertical_oscillation: float   # cm
    stride_rate: int              # spm
    ground_contact_time: int      # ms
    symmetry_score: int           # %
    efficiency_index: int         # 0-100


@dataclass(frozen=True)
class SoccerMetrics:
    kick_velocity: float          # km/h
    explosive_power: int          # W
    plant_foot_stability: int     # %
    shot_accuracy_prob: int       # %


@dataclass(frozen=True)
class SwimmingMetrics:
    body_roll: float              # replaces vertical oscillation for swimmers
    stroke_length: float          # m
    swolf_score: int
    hydrodynamic_drag: float      # coefficient, lower is better
    catch_efficiency: int         # %


@dataclass(frozen=True)
class BoxingMetrics:
    punch_velocity: float         # m/s
    impact_force: int             # N
    reaction_time: int            # ms
    guard_integrity: int          # %
    kinetic_chain_efficiency: int  # %
    retraction_speed: float       # m/s


@dataclass(frozen=True)
class AthleticsMetrics:
    explosive_power: int          # W
    ground_reaction_force: float  # multiple of bodyweight
    elastic_recoil: int           # %


SpecificMetrics = Union[SoccerMetrics, SwimmingMetrics, BoxingMetrics, AthleticsMetrics]

SPECIFIC_METRIC_TYPES = {
    Activity.SOCCER: SoccerMetrics,
    Activity.SWIMMING: SwimmingMetrics,
    Activity.BOXING: BoxingMetrics,
    Activity.ATHLETICS: AthleticsMetrics,
    Activity.OTHER: AthleticsMetrics,
}


@dataclass(frozen=True)
class MetricBundle:
    """Universal metrics plus exactly one activity-specific variant."""
    motion_energy: float
    universal: UniversalMetrics
    specific: SpecificMetrics

    @property
    def vertical_oscillation(self) -> float:
        """Effective oscillation (body roll for swimmers)."""
        if isinstance(self.specific, SwimmingMetrics):
            return self.specific.body_roll
        return self.universal.vertical_oscillation

    def as_dict(self) -> Dict[str, float]:
        """Flatten into one field -> value mapping for display."""
        flat = asdict(self.universal)
        specific = asdict(self.specific)
        body_roll = specific.pop('body_roll', None)
        if body_roll is not None:
            flat['vertical_oscillation'] = body_roll
        flat.update(specific)
        return flat

    def to_dict(self) -> dict:
        return {
            'motion_energy': self.motion_energy,
            'universal': asdict(self.universal),
            'specific': asdict(self.specific),
        }

    @classmethod
    def from_dict(cls, data: dict, activity: Activity) -> "MetricBundle":
        specific_type = SPECIFIC_METRIC_TYPES[activity]
        return cls(
            motion_energy=float(data['motion_energy']),
            universal=_build(UniversalMetrics, data['universal']),
            specific=_build(specific_type, data['specific']),
        )


def _build(cls, data: dict):
    names = {f.name for f in fields(cls)}
    return cls(**{k: v for k, v in data.items() if k in names})


# ============================================================================
# Narrative, Series, Schedule
# ============================================================================

@dataclass(frozen=True)
class CategoryAssessment:
    name: str
    status: StatusTier
    score: int
    observation: str


@dataclass(frozen=True)
class CorrectiveAction:
    name: str
    reps: str
    description: str
    target_category: str
    audio_cue: Optional[str] = None


@dataclass(frozen=True)
class TimeSeriesPoint:
    time_label: str
    velocity: float
    force: int
    efficiency: int


@dataclass(frozen=True)
class ScheduleDay:
    day: str
    focus: str
    drills: Tuple[str, ...]
    intensity: Intensity


# ============================================================================
# Report
# ============================================================================

PROCESSING_METHOD = "Vector Vision v1.0"


@dataclass(frozen=True)
class AnalysisReport:
    activity: Activity
    summary: str
    tips: Tuple[str, ...]
    categories: Tuple[CategoryAssessment, ...]
    actions: Tuple[CorrectiveAction, ...]
    projected_improvement: str
    metrics: MetricBundle
    time_series: Tuple[TimeSeriesPoint, ...]
    schedule: Tuple[ScheduleDay, ...]
    motion_energy: float = 0.0
    frames_sampled: int = 0
    processing_method: str = PROCESSING_METHOD
    confidence_score: float = 0.99

    def to_dict(self) -> dict:
        """JSON-safe representation for persistence."""
        return {
            'activity': self.activity.value,
            'summary': self.summary,
            'tips': list(self.tips),
            'categories': [
                {**asdict(c), 'status': c.status.value} for c in self.categories
            ],
            'actions': [asdict(a) for a in self.actions],
            'projected_improvement': self.projected_improvement,
            'metrics': self.metrics.to_dict(),
            'time_series': [asdict(p) for p in self.time_series],
            'schedule': [
                {
                    'day': d.day,
                    'focus': d.focus,
                    'drills': list(d.drills),
                    'intensity': d.intensity.value,
                }
                for d in self.schedule
            ],
            'motion_energy': self.motion_energy,
            'frames_sampled': self.frames_sampled,
            'processing_method': self.processing_method,
            'confidence_score': self.confidence_score,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "AnalysisReport":
        activity = Activity.parse(data['activity'])
        return cls(
            activity=activity,
            summary=data['summary'],
            tips=tuple(data['tips']),
            categories=tuple(
                CategoryAssessment(
                    name=c['name'],
                    status=StatusTier(c['status']),
                    score=int(c['score']),
                    observation=c['observation'],
                )
                for c in data['categories']
            ),
            actions=tuple(_build(CorrectiveAction, a) for a in data['actions']),
            projected_improvement=data['projected_improvement'],
            metrics=MetricBundle.from_dict(data['metrics'], activity),
            time_series=tuple(_build(TimeSeriesPoint, p) for p in data['time_series']),
            schedule=tuple(
                ScheduleDay(
                    day=d['day'],
                    focus=d['focus'],
                    drills=tuple(d['drills']),
                    intensity=Intensity(d['intensity']),
                )
                for d in data['schedule']
            ),
            motion_energy=float(data.get('motion_energy', 0.0)),
            frames_sampled=int(data.get('frames_sampled', 0)),
            processing_method=data.get('processing_method', PROCESSING_METHOD),
            confidence_score=float(data.get('confidence_score', 0.99)),
        )
