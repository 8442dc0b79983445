"""
pytest-qt tests for the canvas widget and main window.

The QTimer loop is not started here; ticks are driven by hand so that
every frame is deterministic.
"""
import pytest
from PySide6.QtCore import QPoint, Qt
from PySide6.QtGui import QColor, QImage, QKeySequence, QPainter, QShortcut
from PySide6.QtTest import QTest

from svgdraw.canvas.canvas import CanvasModel, RenderEngine, fps_color
from svgdraw.canvas.finalizer import PathFinalizer
from svgdraw.canvas.follow import FollowConfig
from svgdraw.canvas.geometry import Point
from svgdraw.core.controller import DrawingController
from svgdraw.pointer.metrics import FpsCounter
from svgdraw.pointer.resolver import ViewCamera
from svgdraw.ui.ui import MainWindow


@pytest.fixture
def window(qtbot, tmp_path):
    model = CanvasModel(follow_config=FollowConfig(speed=20.0))
    camera = ViewCamera()
    engine = RenderEngine(model, camera)
    controller = DrawingController(model, camera, PathFinalizer(tmp_path))

    win = MainWindow(model, engine, controller, FpsCounter())
    qtbot.addWidget(win)
    win.resize(800, 600)
    win.show()
    qtbot.waitExposed(win)
    return win, controller


def frame(win, controller, dt=0.016):
    result = controller.tick(win.canvas_widget.take_state(dt))
    if result is not None:
        win.on_stroke_finalized(result)
    win.update_ui_state()
    return result


class TestCanvasWidget:

    def test_press_drag_release_saves_stroke(self, window):
        win, controller = window
        canvas = win.canvas_widget
        center = canvas.rect().center()

        QTest.mousePress(canvas, Qt.LeftButton, Qt.NoModifier, center)
        frame(win, controller)
        QTest.mouseMove(canvas, center + QPoint(100, 0))
        frame(win, controller)
        frame(win, controller)
        assert len(controller.session.points) == 3

        QTest.mouseRelease(canvas, Qt.LeftButton, Qt.NoModifier, center + QPoint(100, 0))
        result = frame(win, controller)

        assert result is not None
        assert result.path.is_file()
        assert result.box.width == pytest.approx(40.0)
        assert not controller.session.has_active_stroke()
        assert win.strokes_label.text().endswith("1")

    def test_release_flag_is_consumed(self, window):
        win, controller = window
        canvas = win.canvas_widget
        QTest.mousePress(canvas, Qt.LeftButton, Qt.NoModifier, canvas.rect().center())
        QTest.mouseRelease(canvas, Qt.LeftButton, Qt.NoModifier, canvas.rect().center())

        assert canvas.take_state(0.0).just_released
        assert not canvas.take_state(0.0).just_released

    def test_pan_keys(self, window):
        win, controller = window
        canvas = win.canvas_widget
        QTest.keyPress(canvas, Qt.Key_D)
        QTest.keyPress(canvas, Qt.Key_W)
        state = canvas.take_state(0.1)
        assert (state.pan_x, state.pan_y) == (1.0, 1.0)

        QTest.keyRelease(canvas, Qt.Key_D)
        QTest.keyRelease(canvas, Qt.Key_W)
        state = canvas.take_state(0.1)
        assert (state.pan_x, state.pan_y) == (0.0, 0.0)

    def test_retry_button_follows_pending_state(self, window, tmp_path):
        win, controller = window
        assert not win.btn_retry.isEnabled()

        (tmp_path / "svgs").write_text("")
        canvas = win.canvas_widget
        QTest.mousePress(canvas, Qt.LeftButton, Qt.NoModifier, canvas.rect().center())
        frame(win, controller)
        QTest.mouseRelease(canvas, Qt.LeftButton, Qt.NoModifier, canvas.rect().center())
        frame(win, controller)

        assert controller.finalize_pending
        assert win.btn_retry.isEnabled()

        (tmp_path / "svgs").unlink()
        win.btn_retry.click()
        assert not controller.finalize_pending
        assert not win.btn_retry.isEnabled()
        assert (tmp_path / "svgs" / "drawing0.svg").is_file()

    def test_fps_toggle_restarts_measurement(self, window):
        win, controller = window
        keys = [s.key() for s in win.findChildren(QShortcut)]
        assert QKeySequence("F12") in keys

        counter = win._fps_counter
        counter.update(0.0)
        counter.update(0.5)
        win._model.fps = counter.fps

        win._toggle_fps()
        assert not win._model.show_fps
        assert counter.fps == 2.0

        win._toggle_fps()
        assert win._model.show_fps
        assert win._model.fps is None
        assert counter.frame_times == []


class TestRenderEngine:

    def test_placed_graphic_is_drawn_where_it_was_captured(self, qtbot, tmp_path):
        model = CanvasModel(follow_config=FollowConfig(speed=100.0), background_color="#000000")
        engine = RenderEngine(model, ViewCamera())
        finalizer = PathFinalizer(tmp_path, stroke_color="#FFFFFF")

        model.session.append_target(Point(-40, -30))
        model.session.append_target(Point(40, 30))
        finalizer.finalize(model.session, model.place_document)

        graphic = model.placed[0]
        assert graphic.anchor == Point(0, 0)
        assert graphic.size.width() == pytest.approx(80)
        assert graphic.size.height() == pytest.approx(60)

        image = QImage(200, 200, QImage.Format_ARGB32)
        painter = QPainter(image)
        engine.render_to_painter(painter, image.rect())
        painter.end()

        # Центр диагонали совпадает с центром экрана
        lit = [image.pixelColor(x, y).lightness() for x in range(98, 103) for y in range(98, 103)]
        assert max(lit) > 0
        # Угол документа пуст
        assert image.pixelColor(65, 75).lightness() == 0

    def test_missing_document_cannot_be_placed(self, qtbot, tmp_path):
        model = CanvasModel()
        with pytest.raises(FileNotFoundError):
            model.place_document(tmp_path / "nope.svg", Point(0, 0))
        assert model.placed == []

    def test_malformed_document_cannot_be_placed(self, qtbot, tmp_path):
        broken = tmp_path / "broken.svg"
        broken.write_text("<svg width='10'")
        model = CanvasModel()
        with pytest.raises(ValueError):
            model.place_document(broken, Point(0, 0))
        assert model.placed == []

    def test_flat_stroke_is_drawn(self, qtbot, tmp_path):
        model = CanvasModel(follow_config=FollowConfig(speed=80.0), background_color="#000000")
        engine = RenderEngine(model, ViewCamera())
        finalizer = PathFinalizer(tmp_path, stroke_color="#FFFFFF")

        model.session.append_target(Point(-40, 0))
        model.session.append_target(Point(40, 0))
        finalizer.finalize(model.session, model.place_document)

        graphic = model.placed[0]
        assert graphic.size.height() == 0
        assert not graphic.is_degenerate()

        image = QImage(200, 200, QImage.Format_ARGB32)
        painter = QPainter(image)
        engine.render_to_painter(painter, image.rect())
        painter.end()

        lit = [image.pixelColor(x, y).lightness() for x in range(60, 141) for y in range(97, 105)]
        assert max(lit) > 0

    def test_single_point_stroke_is_degenerate(self, qtbot, tmp_path):
        model = CanvasModel()
        model.session.append_target(Point(5, 5))
        PathFinalizer(tmp_path).finalize(model.session, model.place_document)
        assert model.placed[0].is_degenerate()

    def test_fps_box_in_top_right_corner(self, qtbot):
        model = CanvasModel(background_color="#808080")
        engine = RenderEngine(model, ViewCamera())
        assert model.fps is None

        image = QImage(200, 200, QImage.Format_ARGB32)
        painter = QPainter(image)
        engine.render_to_painter(painter, image.rect())
        engine.draw_fps(painter, image.rect())
        painter.end()

        assert image.pixelColor(195, 4).lightness() < image.pixelColor(4, 4).lightness()
        assert image.pixelColor(4, 4) == QColor("#808080")

    def test_fps_hidden(self, qtbot):
        model = CanvasModel(background_color="#808080")
        model.show_fps = False
        engine = RenderEngine(model, ViewCamera())

        image = QImage(200, 200, QImage.Format_ARGB32)
        painter = QPainter(image)
        engine.render_to_painter(painter, image.rect())
        engine.draw_fps(painter, image.rect())
        painter.end()

        assert image.pixelColor(195, 4) == QColor("#808080")


class TestFpsColor:

    @pytest.mark.parametrize("value, rgb", [
        (200.0, (0.0, 1.0, 0.0)),
        (120.0, (0.0, 1.0, 0.0)),
        (90.0, (0.5, 1.0, 0.0)),
        (60.0, (1.0, 1.0, 0.0)),
        (45.0, (1.0, 0.5, 0.0)),
        (30.0, (1.0, 0.0, 0.0)),
        (12.0, (1.0, 0.0, 0.0)),
    ])
    def test_ramp(self, value, rgb):
        color = fps_color(value)
        assert (color.redF(), color.greenF(), color.blueF()) == pytest.approx(rgb, abs=1e-3)

    def test_no_measurement_is_white(self):
        assert fps_color(None) == QColor("#FFFFFF")
