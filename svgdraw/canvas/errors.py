from pathlib import Path
from typing import Optional


class SvgDrawError(Exception):
    """Базовая ошибка конвейера рисования"""


class EmptyStrokeError(SvgDrawError):
    """Попытка завершить штрих без единой точки"""


class StrokeStorageError(SvgDrawError):
    """Не удалось создать каталог или записать SVG-файл"""

    def __init__(self, path: Path, reason: Optional[BaseException] = None):
        self.path = path
        self.reason = reason
        super().__init__(f"Could not write stroke document {path}: {reason}")


class StrokePlacementError(SvgDrawError):
    """Записанный документ не удалось разместить на холсте"""

    def __init__(self, path: Path, reason: Optional[BaseException] = None):
        self.path = path
        self.reason = reason
        super().__init__(f"Could not place stroke document {path}: {reason}")
