"""
REST API сервер дисплея: текст, стан сигналізації, здоров'я та вебхуки.
"""

from flask import Flask, jsonify, request
from flask_cors import CORS
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from typing import Optional, Dict, Any
import threading
import time

from database.db import Database
from notifications.events import EventType, build_event
from notifications.push import PushNotifier
from notifications.webhooks import Notifier
from utils.config_manager import ConfigManager
from utils.errors import DeviceError, DomainError, ValidationError
from utils.logger import get_logger


# Назва сенсора на пристрої -> поле у відповіді /health
HEALTH_SENSORS = {
    'Boot Count': 'boot_count',
    'Temperature': 'temperature_c',
    'Humidity': 'humidity_pct',
}


class APIServer:
    """Клас для REST API сервера."""

    def __init__(
        self,
        device_client,
        database: Database,
        notifier: Notifier,
        push_notifier: PushNotifier,
        config: ConfigManager,
        started_at: Optional[datetime] = None
    ):
        """
        Ініціалізація API сервера.

        Args:
            device_client: Клієнт пристрою (DeviceClient або TestDeviceClient)
            database: База даних
            notifier: Розсилка вебхуків
            push_notifier: Push-сповіщення
            config: Конфігурація
            started_at: Час запуску сервера
        """
        self.device_client = device_client
        self.database = database
        self.notifier = notifier
        self.push_notifier = push_notifier
        self.config = config
        self.logger = get_logger()
        self.started_at = started_at or datetime.now()
        self.git_sha = config.get('server.git_sha')

        # Налаштування Flask
        api_config = config.get_section('api')
        self.host = api_config.get('host', '0.0.0.0')
        self.port = api_config.get('port', 3000)
        self.debug = api_config.get('debug', False)

        # Створити Flask додаток
        self.app = Flask(__name__)
        CORS(self.app)

        # Зареєструвати маршрути
        self._register_error_handlers()
        self._register_routes()

        self.server_thread: Optional[threading.Thread] = None
        self.is_running = False

    def _register_error_handlers(self) -> None:
        """Перетворення типізованих помилок у HTTP відповіді."""

        @self.app.errorhandler(DomainError)
        def handle_domain_error(error: DomainError):
            if isinstance(error, DeviceError):
                self.logger.warning(f"Помилка пристрою ({request.method} {request.path}): {error.reason}")
            return jsonify(error.to_dict()), error.status_code

    def _read_url_body(self) -> str:
        """Отримати 'url' з JSON тіла запиту або кинути ValidationError."""
        body = request.get_json(silent=True)
        url = body.get('url') if isinstance(body, dict) else None
        if not url or not isinstance(url, str):
            raise ValidationError("Body must contain a 'url' string")
        return url

    def _register_routes(self) -> None:
        """Зареєструвати всі маршрути API."""

        @self.app.route('/text', methods=['POST'])
        def set_text():
            """Встановити текст на дисплеї та поставити на охорону."""
            text = request.get_data(as_text=True)
            if not text:
                raise ValidationError("Body must contain text")

            self.device_client.set_text(text)

            self.database.append_text(text)
            self.notifier.notify(build_event(EventType.ARMED, text=text))
            self.push_notifier.notify_text_changed(text)

            return jsonify({'ok': True, 'text': text})

        @self.app.route('/text', methods=['GET'])
        def get_text():
            """Останній встановлений текст."""
            entry = self.database.latest_text()
            return jsonify(entry.to_dict())

        @self.app.route('/alarm')
        def get_alarm():
            """Поточний стан сигналізації (читається з пристрою)."""
            armed = self.device_client.read_binary_sensor('Blinking')
            return jsonify({'armed': armed})

        @self.app.route('/health')
        def get_health():
            """Перевірка здоров'я: три сенсори опитуються паралельно."""
            return self._health_check()

        @self.app.route('/webhooks', methods=['GET'])
        def list_webhooks():
            """Список зареєстрованих вебхуків."""
            webhooks = self.database.list_webhooks()
            return jsonify({'webhooks': [webhook.to_dict() for webhook in webhooks]})

        @self.app.route('/webhooks', methods=['POST'])
        def register_webhook():
            """Зареєструвати вебхук."""
            url = self._read_url_body()
            webhook = self.database.register_webhook(url)
            return jsonify({'ok': True, 'id': webhook.id, 'url': webhook.url})

        @self.app.route('/webhooks', methods=['DELETE'])
        def remove_webhook():
            """Видалити вебхук."""
            url = self._read_url_body()
            self.database.remove_webhook(url)
            return jsonify({'ok': True})

    def _probe(self, sensor: str) -> Dict[str, Any]:
        """Опитати один сенсор, не кидаючи помилок."""
        try:
            return {'ok': True, 'value': self.device_client.read_numeric_sensor(sensor)}
        except DeviceError as e:
            return {'ok': False, 'error': e.message, 'reason': e.reason}

    def _health_check(self):
        """
        Зібрати відповідь /health.

        Returns:
            Flask відповідь (200 або 502 з деталями по кожному сенсору)
        """
        start = time.monotonic()
        with ThreadPoolExecutor(max_workers=len(HEALTH_SENSORS)) as executor:
            futures = {sensor: executor.submit(self._probe, sensor) for sensor in HEALTH_SENSORS}
            probes = {sensor: future.result() for sensor, future in futures.items()}
        rtt_ms = round((time.monotonic() - start) * 1000)

        server_info = {
            'rtt_ms': rtt_ms,
            'server_git_sha': self.git_sha,
            'server_started_at': self.started_at.isoformat()
        }

        if not all(probe['ok'] for probe in probes.values()):
            failed = [sensor for sensor, probe in probes.items() if not probe['ok']]
            self.logger.warning(f"Перевірка здоров'я не пройдена: {', '.join(failed)}")
            return jsonify({
                'error': 'Device health check failed',
                'sensors': probes,
                **server_info
            }), 502

        result = {field: probes[sensor]['value'] for sensor, field in HEALTH_SENSORS.items()}
        result.update(server_info)
        return jsonify(result)

    def start(self) -> None:
        """Запустити API сервер в окремому потоці."""
        if self.is_running:
            self.logger.warning("API сервер вже запущений")
            return

        def run_server():
            self.logger.info(f"Запуск API сервера на {self.host}:{self.port}")
            self.app.run(host=self.host, port=self.port, debug=self.debug, use_reloader=False)

        self.server_thread = threading.Thread(target=run_server, daemon=True)
        self.server_thread.start()
        self.is_running = True
        self.logger.info("API сервер запущено")

    def stop(self) -> None:
        """Зупинити API сервер."""
        # Flask не має прямого способу зупинки, тому просто позначаємо як зупинений
        self.is_running = False
        self.logger.info("API сервер зупинено")
