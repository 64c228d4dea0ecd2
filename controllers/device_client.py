"""
Модуль для роботи з дисплеєм ESPHome через його HTTP API.
"""

from typing import Any, Optional
from urllib.parse import quote

import requests

from utils.config_manager import ConfigManager
from utils.errors import DeviceRejected, DeviceResponseInvalid, DeviceUnreachable
from utils.logger import get_logger


TEXT_ENTITY = "Scroll Text"


class DeviceClient:
    """
    Клієнт HTTP API пристрою.

    Кожен виклик - одна спроба з обмеженим таймаутом. Повтори та реакцію
    на помилку вирішує той, хто викликає.
    """

    def __init__(self, config: ConfigManager):
        """
        Ініціалізація клієнта.

        Args:
            config: Об'єкт ConfigManager
        """
        self.config = config
        self.logger = get_logger()

        device_config = config.get_section('device')
        self.host = str(device_config.get('host', '')).rstrip('/')
        self.timeout_ms = device_config.get('timeout_ms', 2000)
        self.timeout = self.timeout_ms / 1000.0

    def _build_url(self, domain: str, name: str, action: Optional[str] = None) -> str:
        """
        Створити URL для ресурсу ESPHome.

        Args:
            domain: Тип сутності ('binary_sensor', 'sensor', 'text')
            name: Назва сутності (кодується для URL)
            action: Дія над сутністю (наприклад, 'set')

        Returns:
            Повний URL для запиту
        """
        url = f"{self.host}/{domain}/{quote(name)}"
        if action:
            url = f"{url}/{action}"
        return url

    def _request(self, method: str, url: str, **kwargs) -> requests.Response:
        """
        Виконати один запит до пристрою.

        Raises:
            DeviceUnreachable: таймаут або помилка з'єднання
            DeviceRejected: статус відповіді не 2xx
        """
        try:
            response = requests.request(method, url, timeout=self.timeout, **kwargs)
        except requests.exceptions.Timeout:
            raise DeviceUnreachable(f"Timed out after {self.timeout_ms} ms")
        except requests.exceptions.RequestException as e:
            raise DeviceUnreachable(f"Connection error: {e}")

        if not response.ok:
            raise DeviceRejected(response.status_code)
        return response

    def _read_value(self, domain: str, name: str) -> Any:
        """
        Зчитати поле 'value' з JSON відповіді сенсора.

        Raises:
            DeviceResponseInvalid: тіло не JSON або без поля 'value'
        """
        response = self._request('GET', self._build_url(domain, name))

        try:
            data = response.json()
        except ValueError:
            raise DeviceResponseInvalid(f"Invalid JSON from {domain}/{name}")

        if not isinstance(data, dict) or 'value' not in data:
            raise DeviceResponseInvalid(f"Missing 'value' in {domain}/{name} response")

        return data['value']

    def read_binary_sensor(self, name: str) -> bool:
        """
        Зчитати бінарний сенсор.

        Args:
            name: Назва сенсора (наприклад, 'Blinking')

        Returns:
            Значення сенсора
        """
        value = self._read_value('binary_sensor', name)
        if not isinstance(value, bool):
            raise DeviceResponseInvalid(f"Non-boolean value from binary_sensor/{name}: {value!r}")
        return value

    def read_numeric_sensor(self, name: str) -> float:
        """
        Зчитати числовий сенсор.

        Args:
            name: Назва сенсора (наприклад, 'Temperature')

        Returns:
            Значення сенсора
        """
        value = self._read_value('sensor', name)
        # bool є підкласом int, але для числового сенсора це помилка
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise DeviceResponseInvalid(f"Non-numeric value from sensor/{name}: {value!r}")
        return value

    def set_text(self, value: str) -> None:
        """
        Встановити текст на дисплеї.

        Args:
            value: Текст для відображення
        """
        url = f"{self._build_url('text', TEXT_ENTITY, 'set')}?value={quote(value, safe='')}"
        self._request('POST', url, data=b'', headers={'Content-Length': '0'})
        self.logger.info(f"Текст на дисплеї змінено: {value!r}")
