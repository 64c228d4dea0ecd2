"""
Головний файл сервісу-моста між дисплеєм ESPHome та підписниками вебхуків.
"""

import argparse
import signal
import sys
from datetime import datetime
from threading import Event

from utils.config_manager import ConfigManager
from utils.logger import Logger
from controllers.device_client import DeviceClient
from controllers.poller import AlarmPoller
from tests.test_device import TestDeviceClient
from database.db import Database
from notifications.push import PushNotifier
from notifications.webhooks import Notifier
from api.server import APIServer


class DisplayBridgeApp:
    """Головний клас програми."""

    def __init__(self, config_path: str = "config.yaml", test_mode: bool = False):
        """
        Ініціалізація програми.

        Args:
            config_path: Шлях до файлу конфігурації
            test_mode: Чи запускати з симульованим пристроєм
        """
        self.started_at = datetime.now()

        # Завантаження конфігурації
        self.config = ConfigManager(config_path)

        # Перевизначити тестовий режим, якщо вказано в аргументах
        if test_mode:
            self.config.get_section('test_mode')['enabled'] = True

        # Налаштування логування
        log_config = self.config.get_section('logging')
        logger = Logger()
        logger.setup(
            log_file=log_config.get('log_file', 'logs/display_bridge.log'),
            log_level=10 if self.config.get('api.debug', False) else log_config.get('level', 'INFO'),
            enable_console=True
        )
        self.logger = logger.get_logger()

        # Валідація конфігурації
        try:
            self.config.validate()
        except ValueError as e:
            self.logger.error(f"Помилка валідації конфігурації: {e}")
            sys.exit(1)

        self.poll_interval = self.config.get('poll.interval_ms') / 1000.0
        if self.config.get('device.timeout_ms') >= self.config.get('poll.interval_ms'):
            self.logger.warning(
                "Таймаут пристрою не менший за інтервал опитування: "
                "наступне опитування почнеться одразу після попереднього"
            )

        # Ініціалізація компонентів
        self.logger.info("Ініціалізація компонентів...")

        # База даних
        self.database = Database(self.config.get('database.db_file'))

        # Клієнт пристрою
        if self.config.is_test_mode():
            self.device_client = TestDeviceClient(self.config)
        else:
            self.device_client = DeviceClient(self.config)

        # Сповіщення
        self.notifier = Notifier(
            self.database,
            timeout=self.config.get('webhooks.timeout_ms') / 1000.0
        )
        self.push_notifier = PushNotifier(self.config)

        # Опитування пристрою
        self.poller = AlarmPoller(self.device_client, self.notifier)

        # API сервер
        if self.config.get('api.enabled', True):
            self.api_server = APIServer(
                self.device_client,
                self.database,
                self.notifier,
                self.push_notifier,
                self.config,
                started_at=self.started_at
            )
        else:
            self.api_server = None

        # Прапорець для завершення
        self.shutdown_event = Event()

        # Обробка сигналів
        signal.signal(signal.SIGINT, self._signal_handler)
        signal.signal(signal.SIGTERM, self._signal_handler)

        self.logger.info("Ініціалізація завершена")

    def _signal_handler(self, signum, frame):
        """Обробник сигналів для коректного завершення."""
        self.logger.info(f"Отримано сигнал {signum}, завершення роботи...")
        self.shutdown_event.set()

    def run(self) -> None:
        """Запустити головний цикл опитування."""
        self.logger.info("Запуск Boo Display bridge")
        self.logger.info(f"Пристрій: {self.config.get('device.host')}")
        self.logger.info(f"Інтервал опитування: {self.config.get('poll.interval_ms')} мс")
        self.logger.info(f"База даних: {self.database.db_file}")

        if self.config.is_test_mode():
            self.logger.info("⚠️  ТЕСТОВИЙ РЕЖИМ - реальний пристрій не використовується")

        # Запуск API сервера
        if self.api_server:
            self.api_server.start()

        # Подія перезапуску - до першого опитування
        self.poller.announce_restart()

        try:
            self.poller.run(self.shutdown_event, self.poll_interval)
        except KeyboardInterrupt:
            self.logger.info("Отримано сигнал переривання")
        except Exception as e:
            self.logger.critical(f"Критична помилка: {e}", exc_info=True)
        finally:
            self.shutdown()

    def shutdown(self) -> None:
        """Коректне завершення програми."""
        self.logger.info("Завершення роботи програми...")

        # Зупинити API сервер
        if self.api_server:
            self.api_server.stop()

        self.logger.info("Програма завершена")


def main():
    """Головна функція."""
    parser = argparse.ArgumentParser(description='Міст між дисплеєм ESPHome та вебхуками')
    parser.add_argument('--config', '-c', default='config.yaml', help='Шлях до файлу конфігурації')
    parser.add_argument('--test-mode', action='store_true', help='Запустити з симульованим пристроєм')

    args = parser.parse_args()

    app = DisplayBridgeApp(
        config_path=args.config,
        test_mode=args.test_mode
    )

    app.run()


if __name__ == '__main__':
    main()
