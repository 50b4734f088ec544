"""
signals.py
Collapse per-frame statistics into the run's summary signal.
"""

from typing import Sequence

import numpy as np

from kinetics.models import FrameStat, SummarySignal


def aggregate_signal(stats: Sequence[FrameStat]) -> SummarySignal:
    """Motion energy = mean energy index over all sampled frames (0 if none)."""
    if not stats:
        return SummarySignal(motion_energy=0.0, frame_count=0)

    energies = np.array([s.energy_index for s in stats], dtype=float)
    motion_energy = max(0.0, float(energies.mean()))
    return SummarySignal(motion_energy=motion_energy, frame_count=len(stats))


def average_brightness(stats: Sequence[FrameStat]) -> float:
    if not stats:
        return 0.0
    return float(np.mean([s.average_brightness for s in stats]))
