from typing import List, Sequence

from PySide6.QtCore import Qt, QLineF
from PySide6.QtGui import QColor, QPainter, QPen

from .geometry import Point


class PreviewRenderer:
    """
    Временные отрезки незавершенного штриха.
    Перестраиваются целиком каждый кадр, но объекты QLineF
    переиспользуются между кадрами.
    """

    def __init__(self, width: float = 2.0, color: str = "#FFFFFF"):
        self.width = width
        self.color = QColor(color)
        self._pool: List[QLineF] = []
        self._active = 0

    @property
    def segments(self) -> List[QLineF]:
        return self._pool[:self._active]

    @property
    def pool_size(self) -> int:
        return len(self._pool)

    def rebuild(self, points: Sequence[Point]) -> List[QLineF]:
        self._active = 0
        if len(points) < 2:
            return []

        needed = len(points) - 1
        while len(self._pool) < needed:
            self._pool.append(QLineF())

        for i in range(needed):
            p1, p2 = points[i], points[i + 1]
            self._pool[i].setLine(p1.x, p1.y, p2.x, p2.y)
        self._active = needed
        return self.segments

    def paint(self, painter: QPainter):
        """Рисует отрезки в координатах мира (трансформацию задает вызывающий)"""
        if not self._active:
            return

        pen = QPen(self.color)
        pen.setWidthF(self.width)
        pen.setCosmetic(True)
        pen.setCapStyle(Qt.RoundCap)
        pen.setJoinStyle(Qt.RoundJoin)

        painter.save()
        painter.setPen(pen)
        painter.drawLines(self.segments)
        painter.restore()
