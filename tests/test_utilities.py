"""Tests for configuration and timing helpers."""

import pytest

from chinese_whispers.config import ChineseWhispersConfig
from chinese_whispers.core_utilities import TimingStats


class TestChineseWhispersConfig:

    def test_defaults(self):
        config = ChineseWhispersConfig()
        assert config.to_dict() == {
            'num_iterations': 100,
            'random_state': None,
            'batch_size': 1 << 20,
            'verbose': False,
        }

    def test_validation(self):
        with pytest.raises(ValueError):
            ChineseWhispersConfig(num_iterations=-3)
        with pytest.raises(ValueError):
            ChineseWhispersConfig(batch_size=0)


class TestTimingStats:

    def test_timed_block_recorded(self):
        timing = TimingStats()
        with timing.timed("work"):
            pass
        with timing.timed("work"):
            pass
        assert len(timing.durations["work"]) == 2
        assert timing.total("work") >= 0.0
        assert "work: " in timing.report()
        assert "2 call(s)" in timing.report()

    def test_end_without_start(self):
        assert TimingStats().end("missing") is None

    def test_disabled(self):
        timing = TimingStats(enabled=False)
        with timing.timed("work"):
            pass
        assert dict(timing.durations) == {}

    def test_reset(self):
        timing = TimingStats()
        timing.start("a")
        timing.end("a")
        timing.reset()
        assert timing.total("a") == 0
