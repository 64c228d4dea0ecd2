"""
Модуль для логування подій програми.
"""

import logging
from pathlib import Path
from typing import Optional, Union


LOGGER_NAME = 'display_bridge'


class Logger:
    """Клас для налаштування та використання логування."""

    _instance: Optional['Logger'] = None
    _initialized = False

    def __new__(cls):
        """Singleton pattern для Logger."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        """Ініціалізація Logger (виконується тільки один раз)."""
        if not Logger._initialized:
            self.logger: Optional[logging.Logger] = None
            Logger._initialized = True

    def setup(
        self,
        log_file: Optional[str] = "logs/display_bridge.log",
        log_level: Union[int, str] = logging.INFO,
        enable_console: bool = True
    ) -> None:
        """
        Налаштувати логування.

        Args:
            log_file: Шлях до файлу логів (None - без файлу)
            log_level: Рівень логування (число або назва, наприклад 'DEBUG')
            enable_console: Чи виводити логи в консоль
        """
        if isinstance(log_level, str):
            log_level = logging.getLevelName(log_level.upper())
            if not isinstance(log_level, int):
                log_level = logging.INFO

        # Налаштувати формат логів
        log_format = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        date_format = '%Y-%m-%d %H:%M:%S'
        formatter = logging.Formatter(log_format, date_format)

        # Створити logger
        self.logger = logging.getLogger(LOGGER_NAME)
        self.logger.setLevel(log_level)

        # Очистити існуючі обробники
        self.logger.handlers.clear()

        # Обробник для файлу
        if log_file:
            log_path = Path(log_file)
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_path, encoding='utf-8')
            file_handler.setLevel(log_level)
            file_handler.setFormatter(formatter)
            self.logger.addHandler(file_handler)

        # Обробник для консолі
        if enable_console:
            console_handler = logging.StreamHandler()
            console_handler.setLevel(log_level)
            console_handler.setFormatter(formatter)
            self.logger.addHandler(console_handler)

    def get_logger(self) -> logging.Logger:
        """
        Отримати об'єкт logger.

        Returns:
            Logger об'єкт
        """
        if self.logger is None:
            # Без явного налаштування пишемо тільки в консоль
            self.setup(log_file=None)
        return self.logger


# Глобальна функція для зручності
def get_logger() -> logging.Logger:
    """Отримати глобальний logger."""
    return Logger().get_logger()
