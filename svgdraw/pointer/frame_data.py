from dataclasses import dataclass, field
from typing import Optional

from PySide6.QtCore import QPointF, QSizeF


@dataclass
class PointerState:
    # Состояние левой кнопки мыши
    pressed: bool = False
    just_released: bool = False

    # Позиция курсора в пикселях виджета (начало - левый верхний угол).
    # None - курсор за пределами окна
    position: Optional[QPointF] = None

    # Размер области просмотра
    viewport: QSizeF = field(default_factory=lambda: QSizeF(0, 0))

    # Направление движения камеры (WASD), компоненты -1..1
    pan_x: float = 0.0
    pan_y: float = 0.0

    # Время кадра, секунды
    dt: float = 0.0
