"""
Тестовий клієнт дисплея для симуляції в тестовому режимі.
"""

from typing import Dict, Optional
from datetime import datetime

from utils.config_manager import ConfigManager
from utils.errors import DeviceRejected, DeviceUnreachable
from utils.logger import get_logger


class TestDeviceClient:
    """Тестовий клієнт пристрою: стан зберігається в пам'яті."""

    # Це симуляція пристрою, а не набір тестів
    __test__ = False

    def __init__(self, config: ConfigManager):
        """
        Ініціалізація тестового клієнта.

        Args:
            config: Об'єкт ConfigManager
        """
        self.config = config
        self.logger = get_logger()
        self.host = config.get('device.host', 'http://boo-display.local')
        self.online = True
        self.reject_status: Optional[int] = None
        self.blinking = False
        self.text = ""
        self.sensors: Dict[str, float] = {
            'Boot Count': 1,
            'Temperature': 21.5,
            'Humidity': 45.0
        }
        self.last_update: Optional[datetime] = None
        self.command_history: list = []

        self.logger.info(f"TestDeviceClient: ініціалізовано (тестовий режим, host: {self.host})")

    def _check_available(self) -> None:
        if not self.online:
            raise DeviceUnreachable("Simulated device is offline")
        if self.reject_status is not None:
            raise DeviceRejected(self.reject_status)

    def read_binary_sensor(self, name: str) -> bool:
        """Зчитати бінарний сенсор (симуляція)."""
        self._check_available()
        if name != 'Blinking':
            raise DeviceRejected(404)
        return self.blinking

    def read_numeric_sensor(self, name: str) -> float:
        """Зчитати числовий сенсор (симуляція)."""
        self._check_available()
        if name not in self.sensors:
            raise DeviceRejected(404)
        return self.sensors[name]

    def set_text(self, value: str) -> None:
        """Встановити текст; як і справжній дисплей, починає блимати."""
        self._check_available()
        self.text = value
        self.blinking = True
        self.last_update = datetime.now()
        self.command_history.append({
            'action': 'set_text',
            'value': value,
            'timestamp': self.last_update.isoformat()
        })
        self.logger.info(f"TestDeviceClient: текст змінено на {value!r} (симуляція)")

    def disarm(self) -> None:
        """Симуляція натискання кнопки на пристрої."""
        self.blinking = False
        self.logger.info("TestDeviceClient: блимання вимкнено (симуляція)")

    def set_online(self, online: bool) -> None:
        """Увімкнути або вимкнути доступність пристрою."""
        self.online = online
        self.logger.info(f"TestDeviceClient: пристрій {'online' if online else 'offline'} (симуляція)")

    def get_command_history(self) -> list:
        """Отримати історію команд (для тестування)."""
        return self.command_history.copy()
