from dataclasses import dataclass
from typing import Optional

import numpy as np

from .geometry import Point


@dataclass(frozen=True)
class FollowConfig:
    """
    speed: длина одного шага линии в единицах мира.
           Линия не догоняет курсор мгновенно, а "ползет" к нему
           отрезками одинаковой длины.
    """
    speed: float = 1.5

    def __post_init__(self):
        if not self.speed > 0:
            raise ValueError(f"follow speed must be positive, got {self.speed!r}")


def follow(last_point: Optional[Point], target: Point, speed: float) -> Point:
    """Следующая точка штриха: шаг постоянной длины в сторону курсора."""
    # Первая точка штриха фиксируется точно
    if last_point is None:
        return target

    prev = last_point.to_array()
    direction = target.to_array() - prev
    distance = np.linalg.norm(direction)

    # Курсор стоит на месте - линия не двигается
    if distance == 0:
        return last_point

    # Без ограничения по расстоянию: близкая цель перескакивается
    return Point.from_array(prev + direction / distance * speed)
