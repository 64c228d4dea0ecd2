"""
Push-сповіщення про зміну тексту на дисплеї (ntfy-сумісний сервер).
"""

import threading
from typing import Optional

import requests

from utils.config_manager import ConfigManager
from utils.logger import get_logger


class PushNotifier:
    """Одне best-effort сповіщення на фіксовану адресу."""

    TIMEOUT = 10.0

    def __init__(self, config: ConfigManager):
        """
        Ініціалізація push-сповіщень.

        Args:
            config: Об'єкт ConfigManager
        """
        self.logger = get_logger()

        push_config = config.get_section('push')
        self.url = push_config.get('url')
        self.token = push_config.get('token')
        self.title = push_config.get('title') or 'Boo Display'
        self.enabled = config.is_push_enabled()

        if not self.enabled:
            self.logger.info("Push-сповіщення вимкнені (не задано PUSH_URL та PUSH_TOKEN)")

    def notify_text_changed(self, text: str) -> Optional[threading.Thread]:
        """
        Надіслати сповіщення про новий текст у фоні.

        Returns:
            Потік відправки або None, якщо сповіщення вимкнені
        """
        if not self.enabled:
            return None

        thread = threading.Thread(target=self._send, args=(text,), name="push-notify", daemon=True)
        thread.start()
        return thread

    def _send(self, text: str) -> bool:
        """Одна спроба відправки. Помилки логуються і далі не передаються."""
        try:
            response = requests.post(
                self.url,
                data=text.encode('utf-8'),
                headers={
                    'Authorization': f"Bearer {self.token}",
                    'Title': self.title,
                    'Content-Type': 'text/plain; charset=utf-8'
                },
                timeout=self.TIMEOUT
            )
        except requests.exceptions.RequestException as e:
            self.logger.warning(f"Push-сповіщення не надіслано: {e}")
            return False

        if not response.ok:
            self.logger.warning(f"Push-сервер відповів HTTP {response.status_code}")
            return False

        return True
