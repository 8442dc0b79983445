import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from PySide6.QtCore import QPointF, QRectF, QSizeF, Qt
from PySide6.QtGui import QColor, QPainter
from PySide6.QtSvg import QSvgRenderer

from svgdraw.pointer.resolver import ViewCamera

from .follow import FollowConfig
from .geometry import Point
from .preview import PreviewRenderer
from .session import StrokeSession

logger = logging.getLogger(__name__)

# Половина ширины линии SVG (stroke-width по умолчанию 1)
STROKE_PAD = 0.5


@dataclass
class PlacedGraphic:
    """Сохраненный штрих, загруженный обратно из SVG"""
    path: Path
    anchor: Point
    size: QSizeF
    renderer: QSvgRenderer

    def is_degenerate(self) -> bool:
        return self.size.width() == 0 and self.size.height() == 0

    def world_rect(self) -> QRectF:
        # С запасом на толщину линии: горизонтальный штрих имеет высоту 0
        w, h = self.size.width(), self.size.height()
        return QRectF(self.anchor.x - w / 2 - STROKE_PAD, self.anchor.y - h / 2 - STROKE_PAD,
                      w + 2 * STROKE_PAD, h + 2 * STROKE_PAD)


def padded_view_box(size: QSizeF) -> QRectF:
    return QRectF(-STROKE_PAD, -STROKE_PAD, size.width() + 2 * STROKE_PAD, size.height() + 2 * STROKE_PAD)


def fps_color(value: Optional[float]) -> QColor:
    """Зеленый от 120, желтый на 60, красный ниже 30; белый без измерения"""
    if value is None:
        return QColor(Qt.white)
    if value >= 120.0:
        return QColor.fromRgbF(0.0, 1.0, 0.0)
    if value >= 60.0:
        return QColor.fromRgbF(1.0 - (value - 60.0) / 60.0, 1.0, 0.0)
    if value >= 30.0:
        return QColor.fromRgbF(1.0, (value - 30.0) / 30.0, 0.0)
    return QColor.fromRgbF(1.0, 0.0, 0.0)


def document_size(path: Path) -> QSizeF:
    """Размер холста документа из атрибутов width/height"""
    try:
        root = ET.parse(path).getroot()
        return QSizeF(float(root.get("width", 0)), float(root.get("height", 0)))
    except (ET.ParseError, ValueError) as e:
        raise ValueError(f"malformed document {path}: {e}") from e


class CanvasModel:
    def __init__(self, follow_config: Optional[FollowConfig] = None, first_index: int = 0,
                 preview_width: float = 2.0, preview_color: str = "#FFFFFF",
                 background_color: str = "#2B2B2B"):
        self.background_color = QColor(background_color)

        self.session = StrokeSession(follow_config, first_index=first_index)
        self.preview = PreviewRenderer(width=preview_width, color=preview_color)
        self.placed: List[PlacedGraphic] = []

        self.show_fps = True
        self.fps: Optional[float] = None

    def place_document(self, path: Path, center: Point):
        """Загрузка SVG и размещение его центра в точке center"""
        path = Path(path)
        if not path.is_file():
            raise FileNotFoundError(f"document not found: {path}")

        size = document_size(path)
        renderer = QSvgRenderer(str(path))
        if renderer.isValid():
            # Документ без viewBox: система координат = width x height плюс запас
            renderer.setViewBox(padded_view_box(size))
        else:
            # Например, документ нулевого размера из одной точки
            logger.warning(f"Document {path.name} has nothing to render")
        self.placed.append(PlacedGraphic(path=path, anchor=center, size=size, renderer=renderer))
        logger.debug(f"Placed {path.name} at ({center.x:.1f}, {center.y:.1f})")

    def update_preview(self):
        self.preview.rebuild(self.session.points)


class RenderEngine:
    def __init__(self, model: CanvasModel, camera: Optional[ViewCamera] = None):
        self.model = model
        self.camera = camera or ViewCamera()

    def zoom(self, delta_scale: float, mouse_pos: QPointF, viewport: QSizeF):
        self.camera.zoom_at(delta_scale, mouse_pos, viewport)

    def render_to_painter(self, painter: QPainter, target_rect: QRectF):
        painter.save()
        painter.fillRect(target_rect, self.model.background_color)

        to_screen = self.camera.screen_transform(QSizeF(target_rect.size()))

        for graphic in self.model.placed:
            if graphic.is_degenerate():
                continue
            # Документ рисуется без переворота: Y вниз, как на экране
            screen_rect = to_screen.mapRect(graphic.world_rect())
            graphic.renderer.render(painter, screen_rect)

        painter.setTransform(to_screen, True)
        self.model.preview.paint(painter)

        painter.restore()

    def draw_fps(self, painter: QPainter, target_rect: QRectF):
        """Счетчик FPS в правом верхнем углу на полупрозрачной подложке"""
        if not self.model.show_fps:
            return

        fps = self.model.fps
        label = "FPS: "
        value = " N/A" if fps is None else f"{fps:>4.0f}"

        rect = QRectF(target_rect)
        padding = 4.0
        fm = painter.fontMetrics()
        label_w = fm.horizontalAdvance(label)
        text_w = label_w + fm.horizontalAdvance(value)
        box = QRectF(rect.right() - rect.width() * 0.01 - text_w - 2 * padding,
                     rect.top() + rect.height() * 0.01,
                     text_w + 2 * padding, fm.height() + 2 * padding)

        painter.save()
        painter.fillRect(box, QColor(0, 0, 0, 128))
        baseline = box.top() + padding + fm.ascent()
        painter.setPen(QColor(Qt.white))
        painter.drawText(QPointF(box.left() + padding, baseline), label)
        painter.setPen(fps_color(fps))
        painter.drawText(QPointF(box.left() + padding + label_w, baseline), value)
        painter.restore()
