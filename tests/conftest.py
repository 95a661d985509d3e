import random
import pytest
import yaml
from vsp.config.models import AppConfig, EngineConfig, GeneralConfig, PhaseConfig
from vsp.pipeline.simulator import SegmentSimulator

@pytest.fixture
def fast_engine():
    """Engine timings shrunk to tens of milliseconds, no jitter."""
    return EngineConfig(
        segment_length_s=10.0,
        base_cost_ms=40.0,
        min_cost_ms=20.0,
        jitter_ms=0.0,
        merge_overhead_ms=400.0,
        progress_steps=4,
        stagger_ms=5.0,
    )

@pytest.fixture
def fast_config(fast_engine):
    return AppConfig(
        general=GeneralConfig(cpu_cores=4, dashboard=False),
        engine=fast_engine,
        phases=PhaseConfig(convert_delay_ms=0, split_delay_ms=0, merge_delay_ms=0),
    )

@pytest.fixture
def simulator(fast_engine):
    return SegmentSimulator(fast_engine, rng=random.Random(42))

class FakeClock:
    """Clock advanced only by the paired fake sleep."""

    def __init__(self):
        self.now = 0.0
        self.sleeps = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float):
        self.sleeps.append(seconds)
        self.now += seconds

@pytest.fixture
def fake_clock():
    return FakeClock()

@pytest.fixture
def vsp_yaml(tmp_path):
    conf_dir = tmp_path / "conf"
    conf_dir.mkdir()
    conf_file = conf_dir / "vsp.yaml"

    content = {
        'general': {
            'mode': 'parallel',
            'video_filter': 'grayscale',
            'cpu_cores': 8,
            'dashboard': False,
            'log_file': str(tmp_path / "logs" / "vsp.log"),
        },
        'engine': {
            'segment_length_s': 10,
            'base_cost_ms': 40,
            'min_cost_ms': 20,
            'jitter_ms': 0,
            'merge_overhead_ms': 400,
            'progress_steps': 4,
            'stagger_ms': 5,
            'filter_cost_modifiers': {'grayscale': 1.0, 'blur': 1.5},
        },
        'phases': {
            'convert_delay_ms': 0,
            'split_delay_ms': 0,
            'merge_delay_ms': 0,
        }
    }

    with open(conf_file, 'w') as f:
        yaml.dump(content, f)

    return conf_file
