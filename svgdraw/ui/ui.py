from typing import Optional, Set

from PySide6.QtCore import Qt, QPointF, QSizeF
from PySide6.QtGui import (
    QKeyEvent, QKeySequence, QMouseEvent, QPainter, QPaintEvent, QShortcut, QWheelEvent
)
from PySide6.QtWidgets import (
    QFrame, QHBoxLayout, QLabel, QMainWindow, QPushButton, QSizePolicy, QStatusBar,
    QVBoxLayout, QWidget
)

from svgdraw.canvas.canvas import CanvasModel, RenderEngine
from svgdraw.canvas.finalizer import FinalizedStroke
from svgdraw.core.controller import DrawingController
from svgdraw.pointer.frame_data import PointerState
from svgdraw.pointer.metrics import FpsCounter

PAN_KEYS = {
    int(Qt.Key_W): (0.0, 1.0),
    int(Qt.Key_S): (0.0, -1.0),
    int(Qt.Key_A): (-1.0, 0.0),
    int(Qt.Key_D): (1.0, 0.0),
}


# --- ВИДЖЕТ ХОЛСТА ---
class CanvasWidget(QWidget):
    def __init__(self, model: CanvasModel, engine: RenderEngine, parent=None):
        super().__init__(parent)
        self._model = model
        self._engine = engine
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)
        self.setMouseTracking(True)
        self.setFocusPolicy(Qt.StrongFocus)

        # Состояние ввода между кадрами
        self._pressed = False
        self._released = False
        self._cursor: Optional[QPointF] = None
        self._keys: Set[int] = set()

    def take_state(self, dt: float) -> PointerState:
        """Снимок ввода для текущего кадра; сбрасывает флаг отпускания"""
        pan_x = sum(PAN_KEYS[k][0] for k in self._keys)
        pan_y = sum(PAN_KEYS[k][1] for k in self._keys)
        state = PointerState(
            pressed=self._pressed,
            just_released=self._released,
            position=QPointF(self._cursor) if self._cursor is not None else None,
            viewport=QSizeF(self.size()),
            pan_x=pan_x,
            pan_y=pan_y,
            dt=dt,
        )
        self._released = False
        return state

    def _track(self, pos: QPointF):
        self._cursor = QPointF(pos) if self.rect().contains(pos.toPoint()) else None

    def mousePressEvent(self, event: QMouseEvent):
        if event.button() == Qt.LeftButton:
            self._pressed = True
            self._track(event.position())

    def mouseReleaseEvent(self, event: QMouseEvent):
        if event.button() == Qt.LeftButton:
            self._pressed = False
            self._released = True
            self._track(event.position())

    def mouseMoveEvent(self, event: QMouseEvent):
        self._track(event.position())

    def leaveEvent(self, event):
        self._cursor = None
        super().leaveEvent(event)

    def keyPressEvent(self, event: QKeyEvent):
        key = int(event.key())
        if key in PAN_KEYS:
            if not event.isAutoRepeat():
                self._keys.add(key)
            return
        super().keyPressEvent(event)

    def keyReleaseEvent(self, event: QKeyEvent):
        key = int(event.key())
        if key in PAN_KEYS:
            if not event.isAutoRepeat():
                self._keys.discard(key)
            return
        super().keyReleaseEvent(event)

    def focusOutEvent(self, event):
        self._keys.clear()
        super().focusOutEvent(event)

    def wheelEvent(self, event: QWheelEvent):
        delta = event.angleDelta().y()
        scale_factor = 1.1 if delta > 0 else 0.9
        self._engine.zoom(scale_factor, event.position(), QSizeF(self.size()))
        self.update()

    def paintEvent(self, event: QPaintEvent):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing)
        self._engine.render_to_painter(painter, self.rect())
        self._engine.draw_fps(painter, self.rect())
        painter.end()


# --- КОМПОНЕНТЫ UI ---
class ToolButton(QPushButton):
    def __init__(self, tooltip: str, text: str, parent=None, height: int = 44):
        super().__init__(parent)
        self.setText(text)
        self.setToolTip(tooltip)
        self.setFixedHeight(height)
        self._height = height
        self._init_style()

    def setEnabled(self, enabled: bool):
        super().setEnabled(enabled)
        self._init_style()

    def _init_style(self):
        if self.isEnabled():
            bg, bg_hover, border, text = "#FF7675", "#FF9F9E", "#D63031", "white"
        else:
            bg, bg_hover, border, text = "#FFFFFF", "#FFFFFF", "#E0E0E0", "#BDC3C7"

        self.setStyleSheet(f"""
            QPushButton {{
                background-color: {bg}; color: {text}; border: 2px solid {border};
                border-radius: {self._height // 2}px; font-size: 14px; font-weight: bold;
                padding: 0 18px;
            }}
            QPushButton:hover {{ background-color: {bg_hover}; }}
        """)


class HintWidget(QLabel):
    def __init__(self):
        super().__init__()
        self.setAlignment(Qt.AlignCenter)
        self.setFixedHeight(40)
        self.update_hint(drawing=False)

    def update_hint(self, drawing: bool):
        if drawing:
            self.setText("✏️ Рисование (отпустите кнопку для сохранения)")
            self.setStyleSheet("background: #27AE60; color: white; padding: 10px 20px; border-radius: 10px; font-weight: bold;")
        else:
            self.setText("🖱 Зажмите левую кнопку мыши, WASD - камера")
            self.setStyleSheet("background: #2C3E50; color: #ECF0F1; padding: 10px 20px; border-radius: 10px;")


# --- MAIN WINDOW ---
class MainWindow(QMainWindow):
    def __init__(self, model: CanvasModel, engine: RenderEngine, controller: DrawingController,
                 fps_counter: Optional[FpsCounter] = None):
        super().__init__()
        self._model = model
        self._engine = engine
        self._controller = controller
        self._fps_counter = fps_counter
        self._shown_error: Optional[Exception] = None

        self._init_ui()
        self.update_ui_state()

    def _init_ui(self):
        self.setStyleSheet("QMainWindow { background-color: #E9EEF3; }")

        central = QWidget()
        self.setCentralWidget(central)
        main_layout = QVBoxLayout(central)
        main_layout.setContentsMargins(12, 12, 12, 12)
        main_layout.setSpacing(10)

        self.canvas_widget = CanvasWidget(self._model, self._engine)
        main_layout.addWidget(self.canvas_widget, stretch=1)

        self._create_bottom_bar(main_layout)

        self.status_bar = QStatusBar()
        self.setStatusBar(self.status_bar)

        QShortcut(QKeySequence("Ctrl+S"), self, activated=self._on_retry)
        QShortcut(QKeySequence("F12"), self, activated=self._toggle_fps)

        self.canvas_widget.setFocus()

    def _create_bottom_bar(self, layout):
        frame = QFrame()
        frame.setFixedHeight(64)
        frame.setStyleSheet("background: #FFFFFF; border: 1px solid #BDC3C7; border-radius: 16px;")
        l = QHBoxLayout(frame)
        l.setSpacing(20)
        l.setContentsMargins(20, 5, 20, 5)

        self.hint = HintWidget()
        self.hint.setFixedWidth(420)
        l.addWidget(self.hint)

        l.addStretch()

        self.strokes_label = QLabel()
        self.strokes_label.setStyleSheet("border: none; font-size: 14px; font-weight: 700; color: #2C3E50;")
        l.addWidget(self.strokes_label)

        self.btn_retry = ToolButton("Повторить сохранение штриха (Ctrl+S)", "💾 Повторить")
        self.btn_retry.clicked.connect(self._on_retry)
        l.addWidget(self.btn_retry)

        layout.addWidget(frame)

    def _on_retry(self):
        result = self._controller.retry_finalize()
        if result is not None:
            self.on_stroke_finalized(result)
        self.update_ui_state()
        self.canvas_widget.update()

    def _toggle_fps(self):
        self._model.show_fps = not self._model.show_fps
        # Старые кадры не учитываются после повторного включения
        if self._model.show_fps and self._fps_counter is not None:
            self._fps_counter.reset()
            self._model.fps = None
        self.canvas_widget.update()

    def on_stroke_finalized(self, result: FinalizedStroke):
        self.status_bar.showMessage(f"Сохранено в: {result.path}", 5000)

    def update_ui_state(self):
        controller = self._controller
        self.hint.update_hint(controller.session.has_active_stroke() and not controller.finalize_pending)
        self.strokes_label.setText(f"Штрихов: {len(self._model.placed)}")
        self.btn_retry.setEnabled(controller.finalize_pending)

        error = controller.last_error
        if error is not None and error is not self._shown_error:
            self.status_bar.showMessage(f"Ошибка при сохранении! {error}")
        self._shown_error = error
