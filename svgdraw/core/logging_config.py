import logging
import sys
from pathlib import Path
from typing import Optional


class LoggingConfig:
    """Настройка логирования один раз при старте"""

    _initialized = False
    _log_file_path: Optional[Path] = None

    @classmethod
    def setup_logging(cls, log_dir: Optional[Path] = None, level: int = logging.INFO):
        if cls._initialized:
            return

        logger = logging.getLogger("svgdraw")
        logger.setLevel(logging.DEBUG)

        # Консоль
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(logging.Formatter('[%(levelname)s] %(message)s'))
        logger.addHandler(console_handler)

        # Файл (опционально)
        if log_dir is not None:
            log_dir.mkdir(parents=True, exist_ok=True)
            cls._log_file_path = log_dir / "svgdraw.log"
            file_handler = logging.FileHandler(cls._log_file_path, encoding='utf-8')
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(logging.Formatter(
                '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            ))
            logger.addHandler(file_handler)

        cls._initialized = True
        logger.info("Logging system initialized")

    @classmethod
    def get_log_file_path(cls) -> Optional[Path]:
        return cls._log_file_path
