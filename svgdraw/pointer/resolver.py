import logging
from typing import Optional

from PySide6.QtCore import QPointF, QSizeF
from PySide6.QtGui import QTransform

from svgdraw.canvas.geometry import Point

logger = logging.getLogger(__name__)

MIN_SCALE = 0.1
MAX_SCALE = 5.0


class ViewCamera:
    """
    Камера 2D-вида: позиция центра экрана в мире и масштаб.
    Вид центрирован, ось Y направлена вверх.
    """

    def __init__(self, x: float = 0.0, y: float = 0.0, scale: float = 1.0):
        self.x = x
        self.y = y
        self.scale = scale

    def view_transform(self) -> QTransform:
        """Мир -> центрированный вид (Y вверх)"""
        s = self.scale
        return QTransform(s, 0.0, 0.0, s, -s * self.x, -s * self.y)

    def screen_transform(self, viewport: QSizeF) -> QTransform:
        """Мир -> пиксели виджета (начало слева сверху, Y вниз)"""
        s = self.scale
        w, h = viewport.width(), viewport.height()
        return QTransform(s, 0.0, 0.0, -s, w / 2 - s * self.x, h / 2 + s * self.y)

    def pan(self, dx: float, dy: float, dt: float, speed: float):
        self.x += dx * speed * dt
        self.y += dy * speed * dt

    def zoom_at(self, factor: float, position: QPointF, viewport: QSizeF):
        """Масштаб вокруг курсора: точка мира под курсором остается на месте"""
        new_scale = min(MAX_SCALE, max(MIN_SCALE, self.scale * factor))
        if new_scale == self.scale:
            return

        anchor = resolve_pointer(position, viewport, self.view_transform())
        view = centered_view_point(position, viewport)
        self.scale = new_scale
        self.x = anchor.x - view.x() / new_scale
        self.y = anchor.y - view.y() / new_scale


def centered_view_point(position: QPointF, viewport: QSizeF) -> QPointF:
    # Переворот Y и перенос начала координат в центр окна
    w, h = viewport.width(), viewport.height()
    return QPointF(position.x() - w / 2, (h - position.y()) - h / 2)


def resolve_pointer(position: Optional[QPointF], viewport: QSizeF, view_transform: QTransform,
                    snap_unavailable: bool = False) -> Optional[Point]:
    """
    Пиксели устройства -> пространство рисования.
    Если курсор недоступен, возвращает None, либо (snap_unavailable=True)
    точку для позиции устройства (0, 0).
    """
    if position is None:
        if not snap_unavailable:
            logger.debug("Pointer position unavailable, skipping sample")
            return None
        position = QPointF(0.0, 0.0)

    inverse, invertible = view_transform.inverted()
    if not invertible:
        logger.debug("View transform is not invertible, skipping sample")
        return None

    world = inverse.map(centered_view_point(position, viewport))
    return Point(world.x(), world.y())
