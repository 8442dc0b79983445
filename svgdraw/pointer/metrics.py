import time
from typing import Optional


class FpsCounter:
    def __init__(self, window: int = 30):
        self.window = window
        self.frame_times = []

    def update(self, now: float = None) -> Optional[float]:
        """Вызывается каждый кадр. Возвращает текущий FPS или None, пока замера нет."""
        current_time = time.perf_counter() if now is None else now
        self.frame_times.append(current_time)

        # Оставляем только последние N кадров
        if len(self.frame_times) > self.window:
            self.frame_times.pop(0)

        return self.fps

    @property
    def fps(self) -> Optional[float]:
        if len(self.frame_times) < 2:
            return None

        # FPS = (число кадров - 1) / (время между первым и последним)
        elapsed = self.frame_times[-1] - self.frame_times[0]
        if elapsed <= 0:
            return None
        return (len(self.frame_times) - 1) / elapsed

    def reset(self):
        self.frame_times.clear()
