"""
schedule.py
Seven-day training plan keyed on weekday parity and the weakest muscle group.
"""

from typing import Tuple

from kinetics.models import Activity, Intensity, ScheduleDay


WEEK_DAYS = ('Mon', 'Tue', 'Wed', 'Thu', 'Fri', 'Sat', 'Sun')

RECOVERY_FOCUS = "Active Recovery"
RECOVERY_DRILLS = ("Light Stretching", "Mobility Work", "Visualization")

TECHNIQUE_FOCUS = "Technique & Biomechanics"
TECHNIQUE_DRILLS = ("Slow Motion Form", "Resistance Band Work", "Balance Drills")


def _high_intensity_day(activity: Activity, weakness: str) -> Tuple[str, Tuple[str, ...]]:
    """Focus and drills for Mon/Wed/Fri."""
    if activity == Activity.BOXING:
        finisher = "Shoulder Conditioning" if "Deltoids" in weakness else "Core Rotations"
        return "Explosive Power & Speed", ("Heavy Bag Intervals", "Plyometric Pushups", finisher)

    if activity == Activity.SOCCER:
        return "Agility & Ball Control", ("Cone Weaving", "Box Jumps", "Target Shooting")

    return "Strength & Conditioning", ("Squats", "Deadlifts", "Sprints")


def generate_schedule(activity, weakness: str = "General") -> Tuple[ScheduleDay, ...]:
    """
    Build the Mon..Sun plan.

    Sunday is always low-intensity recovery, even weekday indices (Mon, Wed,
    Fri) are high-intensity sport work and odd ones (Tue, Thu, Sat) are
    medium-intensity technique sessions.

    Args:
        activity: Activity or its name
        weakness: Name of the weakest category ("General" if none)

    Returns:
        Tuple of 7 ScheduleDay
    """
    activity = Activity.parse(activity)
    weakness = weakness or "General"
    days = []

    for idx, day in enumerate(WEEK_DAYS):
        if idx == 6:
            focus, drills, intensity = RECOVERY_FOCUS, RECOVERY_DRILLS, Intensity.LOW
        elif idx % 2 == 0:
            focus, drills = _high_intensity_day(activity, weakness)
            intensity = Intensity.HIGH
        else:
            focus, drills, intensity = TECHNIQUE_FOCUS, TECHNIQUE_DRILLS, Intensity.MEDIUM

        days.append(ScheduleDay(day=day, focus=focus, drills=tuple(drills), intensity=intensity))

    return tuple(days)
