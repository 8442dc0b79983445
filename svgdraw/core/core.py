import logging
import sys
import time
from typing import Optional

from PySide6.QtCore import QTimer
from PySide6.QtWidgets import QApplication

from svgdraw.canvas.canvas import CanvasModel, RenderEngine
from svgdraw.canvas.finalizer import PathFinalizer
from svgdraw.canvas.follow import FollowConfig
from svgdraw.core.controller import DrawingController
from svgdraw.core.logging_config import LoggingConfig
from svgdraw.core.settings import APP_VERSION, Settings
from svgdraw.pointer.metrics import FpsCounter
from svgdraw.pointer.resolver import ViewCamera
from svgdraw.ui.ui import MainWindow

logger = logging.getLogger(__name__)


class AppCore:
    def __init__(self, sys_argv, settings: Optional[Settings] = None):
        self.settings = settings or Settings.from_env()
        LoggingConfig.setup_logging(self.settings.log_dir)

        self.app = QApplication.instance() or QApplication(sys_argv)
        self.app.setStyle("Fusion")

        s = self.settings
        self.model = CanvasModel(
            follow_config=FollowConfig(speed=s.follow_speed),
            first_index=s.first_index,
            preview_width=s.preview_width,
            preview_color=s.preview_color,
            background_color=s.background_color,
        )
        self.model.show_fps = s.show_fps

        self.camera = ViewCamera()
        self.engine = RenderEngine(self.model, self.camera)
        self.finalizer = PathFinalizer(s.output_dir, s.document_subdir, s.stroke_color)
        self.controller = DrawingController(
            self.model, self.camera, self.finalizer,
            pan_speed=s.pan_speed,
            snap_unavailable=s.snap_unavailable_to_origin,
        )
        self.fps_counter = FpsCounter()

        self.window = MainWindow(self.model, self.engine, self.controller, self.fps_counter)
        self.window.setWindowTitle(s.window_title)
        self.window.resize(s.window_width, s.window_height)
        self.window.show()

        self._last_tick = time.perf_counter()
        self.timer = QTimer()
        self.timer.timeout.connect(self._game_loop)
        self.timer.start(s.tick_interval_ms)

        logger.info(f"Starting {s.window_title} {APP_VERSION}, saving strokes to {s.document_dir}")
        log_file = LoggingConfig.get_log_file_path()
        if log_file is not None:
            logger.info(f"Log file: {log_file}")

    def run(self):
        return self.app.exec()

    def _game_loop(self):
        now = time.perf_counter()
        dt = now - self._last_tick
        self._last_tick = now

        state = self.window.canvas_widget.take_state(dt)
        result = self.controller.tick(state)
        if result is not None:
            self.window.on_stroke_finalized(result)

        self.model.fps = self.fps_counter.update(now)

        # --- ОБНОВЛЕНИЕ UI ---
        self.window.update_ui_state()
        self.window.canvas_widget.update()


def main():
    core = AppCore(sys.argv)
    sys.exit(core.run())
