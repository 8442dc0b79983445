import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Sequence, Union

import numpy as np

from .errors import EmptyStrokeError, StrokePlacementError, StrokeStorageError
from .geometry import BoundingBox, Point, points_to_array
from .session import StrokeSession

logger = logging.getLogger(__name__)

SVG_NAMESPACE = "http://www.w3.org/2000/svg"

# place(path, center) - показать документ с центром в точке center
PlaceCallback = Callable[[Path, Point], None]


@dataclass(frozen=True)
class FinalizedStroke:
    index: int
    path: Path
    box: BoundingBox
    placement: Point
    document: str


def format_number(value: float) -> str:
    text = repr(float(value))
    if text.endswith(".0"):
        text = text[:-2]
    # -0 -> 0
    return "0" if text == "-0" else text


def bounding_box(points: Sequence[Point]) -> BoundingBox:
    if not points:
        raise EmptyStrokeError("cannot compute a bounding box of an empty stroke")
    coords = points_to_array(points)
    min_x, min_y = coords.min(axis=0)
    max_x, max_y = coords.max(axis=0)
    return BoundingBox(float(min_x), float(min_y), float(max_x), float(max_y))


def normalize_points(points: Sequence[Point], box: BoundingBox) -> np.ndarray:
    """Перевод в локальные координаты документа (ось Y вниз)"""
    coords = points_to_array(points)
    local = np.empty_like(coords)
    local[:, 0] = coords[:, 0] - box.min_x
    local[:, 1] = box.max_y - coords[:, 1]
    return local


def path_data(local: np.ndarray) -> str:
    pairs = [f"{format_number(x)} {format_number(y)}" for x, y in local]
    if not pairs:
        return ""
    return " ".join([f"M {pairs[0]}"] + [f"L {pair}" for pair in pairs[1:]])


def render_document(points: Sequence[Point], box: BoundingBox, stroke_color: str = "black") -> str:
    d = path_data(normalize_points(points, box))
    return (
        f"<svg xmlns='{SVG_NAMESPACE}' width='{format_number(box.width)}' height='{format_number(box.height)}'>"
        f"<path d='{d}' fill='none' stroke='{stroke_color}'/>"
        "</svg>"
    )


class PathFinalizer:
    """Сохранение завершенного штриха в SVG и его размещение на холсте"""

    def __init__(self, output_dir: Union[str, Path] = "assets", subdir: str = "svgs",
                 stroke_color: str = "black"):
        self.output_dir = Path(output_dir)
        self.subdir = subdir
        self.stroke_color = stroke_color

    @property
    def document_dir(self) -> Path:
        return self.output_dir / self.subdir

    def document_path(self, index: int) -> Path:
        return self.document_dir / f"drawing{index}.svg"

    def write_document(self, index: int, document: str) -> Path:
        path = self.document_path(index)
        tmp_path = path.with_name(path.name + ".tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(document, encoding="utf-8")
            if path.exists():
                logger.debug(f"Overwriting existing document {path}")
            os.replace(tmp_path, path)
        except OSError as e:
            if tmp_path.exists():
                try:
                    tmp_path.unlink()
                except OSError:
                    logger.warning(f"Could not remove temporary file {tmp_path}")
            raise StrokeStorageError(path, e) from e
        return path

    def finalize(self, session: StrokeSession, place: PlaceCallback) -> FinalizedStroke:
        """
        Запись + размещение + сброс сессии.
        При любой ошибке сессия не меняется, штрих можно сохранить повторно.
        """
        if not session.has_active_stroke():
            raise EmptyStrokeError("finalize requires an active stroke")

        points = session.points
        index = session.counter
        box = bounding_box(points)
        document = render_document(points, box, self.stroke_color)

        path = self.write_document(index, document)
        center = box.center

        try:
            place(path, center)
        except Exception as e:
            try:
                path.unlink()
            except OSError:
                logger.warning(f"Could not remove unplaced document {path}")
            raise StrokePlacementError(path, e) from e

        session.reset()
        logger.info(f"Stroke {index} saved to {path} ({len(points)} points, "
                    f"{box.width:.1f}x{box.height:.1f})")
        return FinalizedStroke(index=index, path=path, box=box, placement=center, document=document)
