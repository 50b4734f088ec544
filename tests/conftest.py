import random

import pytest

from kinetics.config import DEFAULT_CONFIG
from kinetics.models import SummarySignal
from kinetics.pipeline import build_report


@pytest.fixture
def config(tmp_path):
    return {**DEFAULT_CONFIG, 'storage_dir': str(tmp_path / 'outputs')}


@pytest.fixture
def boxing_report(config):
    signal = SummarySignal(motion_energy=40.0, frame_count=3)
    return build_report(signal, 'Boxing', duration=4.0, rng=random.Random(1), config=config)
