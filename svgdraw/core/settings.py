"""
Настройки приложения SVGdraw.

Значения по умолчанию задаются в Settings, часть из них можно
переопределить переменными окружения SVGDRAW_*.
"""
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final, Mapping, Optional

APP_NAME: Final[str] = "SVGdraw"
APP_VERSION: Final[str] = "0.1.0"

ENV_PREFIX: Final[str] = "SVGDRAW_"


def _parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off"):
        return False
    raise ValueError(f"not a boolean: {value!r}")


@dataclass(frozen=True)
class Settings:
    # Рисование
    follow_speed: float = 1.5
    preview_width: float = 2.0
    preview_color: str = "#FFFFFF"
    stroke_color: str = "black"
    snap_unavailable_to_origin: bool = False

    # Камера
    pan_speed: float = 250.0

    # Цикл кадров
    tick_interval_ms: int = 16

    # Сохранение
    output_dir: Path = Path("assets")
    document_subdir: str = "svgs"
    first_index: int = 0

    # Окно
    window_title: str = APP_NAME
    window_width: int = 1280
    window_height: int = 720
    background_color: str = "#2B2B2B"
    show_fps: bool = True

    # Логи (None - только консоль)
    log_dir: Optional[Path] = None

    def __post_init__(self):
        if not self.follow_speed > 0:
            raise ValueError(f"follow_speed must be positive, got {self.follow_speed!r}")
        if not self.pan_speed > 0:
            raise ValueError(f"pan_speed must be positive, got {self.pan_speed!r}")
        if self.tick_interval_ms <= 0:
            raise ValueError(f"tick_interval_ms must be positive, got {self.tick_interval_ms!r}")
        if self.first_index < 0:
            raise ValueError(f"first_index must be non-negative, got {self.first_index!r}")

    @property
    def document_dir(self) -> Path:
        return self.output_dir / self.document_subdir

    @classmethod
    def from_env(cls, environ: Mapping[str, str] = None) -> "Settings":
        environ = os.environ if environ is None else environ
        converters = {
            "OUTPUT_DIR": ("output_dir", Path),
            "LOG_DIR": ("log_dir", Path),
            "FOLLOW_SPEED": ("follow_speed", float),
            "PAN_SPEED": ("pan_speed", float),
            "TICK_MS": ("tick_interval_ms", int),
            "FIRST_INDEX": ("first_index", int),
            "SHOW_FPS": ("show_fps", _parse_bool),
            "SNAP_UNAVAILABLE": ("snap_unavailable_to_origin", _parse_bool),
        }
        overrides = {}
        for suffix, (name, convert) in converters.items():
            raw = environ.get(ENV_PREFIX + suffix)
            if raw is None or raw == "":
                continue
            try:
                overrides[name] = convert(raw)
            except ValueError as e:
                raise ValueError(f"invalid {ENV_PREFIX}{suffix}={raw!r}: {e}") from e
        return cls(**overrides)
