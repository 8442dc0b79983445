"""
Общие фикстуры тестов SVGdraw.
"""
import os

# Тесты виджетов запускаются без дисплея
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest


@pytest.fixture
def follow_config():
    from svgdraw.canvas.follow import FollowConfig
    return FollowConfig(speed=5.0)


@pytest.fixture
def session(follow_config):
    from svgdraw.canvas.session import StrokeSession
    return StrokeSession(follow_config)


@pytest.fixture
def finalizer(tmp_path):
    from svgdraw.canvas.finalizer import PathFinalizer
    return PathFinalizer(output_dir=tmp_path / "assets")


class PlacementRecorder:
    """Заглушка размещения: запоминает вызовы place(path, center)"""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.calls = []

    def __call__(self, path, center):
        if self.fail:
            raise RuntimeError("renderer unavailable")
        self.calls.append((path, center))


@pytest.fixture
def placer():
    return PlacementRecorder()


@pytest.fixture
def failing_placer():
    return PlacementRecorder(fail=True)
