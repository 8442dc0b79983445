from typing import List, Optional

from .follow import FollowConfig, follow
from .geometry import Point


class StrokeSession:
    """Состояние текущего штриха: зафиксированные точки и счетчик файлов"""

    def __init__(self, config: Optional[FollowConfig] = None, first_index: int = 0):
        if first_index < 0:
            raise ValueError(f"stroke counter must be non-negative, got {first_index}")

        self.config = config or FollowConfig()

        # Точки в порядке захвата
        self._points: List[Point] = []
        self._last_point: Optional[Point] = None

        # Номер следующего SVG-файла, только растет
        self._counter = first_index

    @property
    def points(self) -> List[Point]:
        return list(self._points)

    @property
    def last_point(self) -> Optional[Point]:
        return self._last_point

    @property
    def counter(self) -> int:
        return self._counter

    def __len__(self) -> int:
        return len(self._points)

    def has_active_stroke(self) -> bool:
        return bool(self._points)

    def append_target(self, target: Point) -> Point:
        """Пропускает цель через фильтр и добавляет результат в штрих"""
        point = follow(self._last_point, target, self.config.speed)
        self._points.append(point)
        self._last_point = point
        return point

    def reset(self):
        """Очистка после успешного сохранения штриха"""
        self._points.clear()
        self._last_point = None
        self._counter += 1
