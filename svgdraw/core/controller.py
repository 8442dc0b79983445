import logging
from typing import Optional

from svgdraw.canvas.canvas import CanvasModel
from svgdraw.canvas.errors import StrokePlacementError, StrokeStorageError
from svgdraw.canvas.finalizer import FinalizedStroke, PathFinalizer
from svgdraw.pointer.frame_data import PointerState
from svgdraw.pointer.resolver import ViewCamera, resolve_pointer

logger = logging.getLogger(__name__)


class DrawingController:
    """
    Один кадр конвейера: камера -> координаты -> фильтр -> штрих -> превью.
    При отпускании кнопки штрих сохраняется и размещается на холсте.
    """

    def __init__(self, model: CanvasModel, camera: ViewCamera, finalizer: PathFinalizer,
                 pan_speed: float = 250.0, snap_unavailable: bool = False):
        self.model = model
        self.camera = camera
        self.finalizer = finalizer
        self.pan_speed = pan_speed
        self.snap_unavailable = snap_unavailable

        # Сохранение не удалось: точки сохранены, новый штрих не начинается
        self.finalize_pending = False
        self.last_error: Optional[Exception] = None

    @property
    def session(self):
        return self.model.session

    def tick(self, state: PointerState) -> Optional[FinalizedStroke]:
        result = None

        if state.pan_x or state.pan_y:
            self.camera.pan(state.pan_x, state.pan_y, state.dt, self.pan_speed)

        if self.finalize_pending:
            if state.pressed or state.just_released:
                logger.debug("Input ignored while a stroke is waiting to be saved")
        else:
            if state.just_released and self.session.has_active_stroke():
                result = self._finalize()

            if state.pressed and not self.finalize_pending:
                target = resolve_pointer(state.position, state.viewport,
                                         self.camera.view_transform(), self.snap_unavailable)
                if target is not None:
                    self.session.append_target(target)

        self.model.update_preview()
        return result

    def retry_finalize(self) -> Optional[FinalizedStroke]:
        if not self.finalize_pending or not self.session.has_active_stroke():
            return None
        logger.info(f"Retrying save of stroke {self.session.counter}")
        result = self._finalize()
        self.model.update_preview()
        return result

    def _finalize(self) -> Optional[FinalizedStroke]:
        try:
            result = self.finalizer.finalize(self.session, self.model.place_document)
        except (StrokeStorageError, StrokePlacementError) as e:
            logger.error(f"Stroke {self.session.counter} was not saved: {e}")
            self.finalize_pending = True
            self.last_error = e
            return None

        self.finalize_pending = False
        self.last_error = None
        return result
