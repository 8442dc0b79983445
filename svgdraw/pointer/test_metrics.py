import pytest

from svgdraw.pointer.metrics import FpsCounter


def test_no_measurement_before_two_frames():
    counter = FpsCounter()
    assert counter.update(0.0) is None


def test_no_measurement_without_elapsed_time():
    counter = FpsCounter()
    counter.update(1.0)
    assert counter.update(1.0) is None


def test_fps_from_rolling_window():
    counter = FpsCounter(window=3)
    for i in range(10):
        fps = counter.update(i * 0.02)
    assert len(counter.frame_times) == 3
    assert fps == pytest.approx(50.0)


def test_reset():
    counter = FpsCounter()
    counter.update(0.0)
    counter.update(0.1)
    counter.reset()
    assert counter.fps is None
