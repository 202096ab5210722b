import time

import pytest

from canvas_recorder.core.frame_clock import (
    RealTimeClock,
    RecordingClock,
    create_frame_clock,
    frame_timestamp,
)


def test_recording_clock_advances_by_fixed_fps():
    clock = RecordingClock(fps=60.0)
    assert clock.fps == 60.0
    assert clock.t(0) == 0.0
    assert clock.t(1) == pytest.approx(1000.0 / 60.0)
    assert clock.t(60) == pytest.approx(1000.0)


def test_recording_timestamps_are_exact_multiples_of_frame_interval():
    got = [frame_timestamp(record=True, frame_index=k, fps=10, elapsed_ms=12345.0) for k in range(11)]
    assert got == [k * 100.0 for k in range(11)]


def test_recording_clock_rejects_non_positive_fps():
    with pytest.raises(ValueError):
        RecordingClock(fps=0)


def test_real_time_timestamp_ignores_frame_index():
    assert frame_timestamp(record=False, frame_index=99, fps=10, elapsed_ms=42.5) == 42.5


def test_real_time_clock_returns_elapsed_milliseconds():
    start_time = time.perf_counter() - 1.0
    clock = RealTimeClock(start_time=start_time)
    assert 500.0 < clock.t(0) < 1500.0


def test_create_frame_clock_selects_policy_by_record_flag():
    assert isinstance(create_frame_clock(record=True, fps=30), RecordingClock)
    assert isinstance(create_frame_clock(record=False, fps=30), RealTimeClock)
