"""
Модуль для управління конфігурацією програми.
"""

import yaml
import os
from typing import Dict, Any, Optional, Mapping
from pathlib import Path


# Значення за замовчуванням, якщо немає ні файлу, ні змінних оточення
DEFAULTS: Dict[str, Dict[str, Any]] = {
    'device': {
        'host': 'http://boo-display.local',
        'timeout_ms': 2000,
    },
    'poll': {
        'interval_ms': 10000,
    },
    'api': {
        'enabled': True,
        'host': '0.0.0.0',
        'port': 3000,
        'debug': False,
    },
    'database': {
        'db_file': './data/webhooks.db',
    },
    'webhooks': {
        'timeout_ms': 10000,
    },
    'push': {
        'url': None,
        'token': None,
        'title': 'Boo Display',
    },
    'server': {
        'git_sha': None,
    },
    'logging': {
        'log_file': 'logs/display_bridge.log',
        'level': 'INFO',
    },
    'test_mode': {
        'enabled': False,
    },
}

# Змінна оточення -> (секція, ключ, тип)
ENV_OVERRIDES = {
    'ESPHOME_HOST': ('device', 'host', str),
    'DEVICE_TIMEOUT': ('device', 'timeout_ms', int),
    'POLL_INTERVAL': ('poll', 'interval_ms', int),
    'PORT': ('api', 'port', int),
    'API_HOST': ('api', 'host', str),
    'DB_PATH': ('database', 'db_file', str),
    'WEBHOOK_TIMEOUT': ('webhooks', 'timeout_ms', int),
    'PUSH_URL': ('push', 'url', str),
    'PUSH_TOKEN': ('push', 'token', str),
    'GIT_SHA': ('server', 'git_sha', str),
    'LOG_FILE': ('logging', 'log_file', str),
    'LOG_LEVEL': ('logging', 'level', str),
}


class ConfigManager:
    """Клас для завантаження та управління конфігурацією."""

    def __init__(self, config_path: str = "config.yaml", environ: Optional[Mapping[str, str]] = None):
        """
        Ініціалізація ConfigManager.

        Args:
            config_path: Шлях до файлу конфігурації
            environ: Змінні оточення (за замовчуванням os.environ)
        """
        self.config_path = Path(config_path)
        self.environ = os.environ if environ is None else environ
        self.config: Dict[str, Any] = {}
        self.load_config()

    def load_config(self) -> None:
        """Завантажити конфігурацію з файлу та змінних оточення."""
        file_config: Dict[str, Any] = {}

        # Файл опціональний: сервіс можна налаштувати лише змінними оточення
        if self.config_path.exists():
            try:
                with open(self.config_path, 'r', encoding='utf-8') as f:
                    file_config = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ValueError(f"Помилка парсингу YAML: {e}")

        if not isinstance(file_config, dict):
            raise ValueError(f"Файл конфігурації має містити словник: {self.config_path}")

        config: Dict[str, Any] = {}
        for section, values in DEFAULTS.items():
            config[section] = dict(values)
        for section, values in file_config.items():
            if isinstance(values, dict) and isinstance(config.get(section), dict):
                config[section].update(values)
            else:
                config[section] = values

        for env_name, (section, key, cast) in ENV_OVERRIDES.items():
            raw = self.environ.get(env_name)
            if raw is None or raw == '':
                continue
            try:
                config.setdefault(section, {})[key] = cast(raw)
            except ValueError:
                raise ValueError(f"Некоректне значення змінної {env_name}: {raw!r}")

        self.config = config

    def get(self, key: str, default: Any = None) -> Any:
        """
        Отримати значення з конфігурації за ключем.

        Args:
            key: Ключ у форматі 'section.subsection.key' або просто 'key'
            default: Значення за замовчуванням, якщо ключ не знайдено

        Returns:
            Значення з конфігурації або default
        """
        keys = key.split('.')
        value = self.config

        try:
            for k in keys:
                value = value[k]
            return value
        except (KeyError, TypeError):
            return default

    def get_section(self, section: str) -> Dict[str, Any]:
        """
        Отримати всю секцію конфігурації.

        Args:
            section: Назва секції

        Returns:
            Словник з налаштуваннями секції або порожній словник
        """
        return self.config.get(section, {})

    def is_test_mode(self) -> bool:
        """Перевірити, чи увімкнено тестовий режим."""
        test_mode = self.get_section('test_mode')
        return test_mode.get('enabled', False)

    def is_push_enabled(self) -> bool:
        """Push-сповіщення активні лише коли задано і адресу, і токен."""
        push = self.get_section('push')
        return bool(push.get('url')) and bool(push.get('token'))

    def validate(self) -> bool:
        """
        Валідація конфігурації.

        Returns:
            True якщо конфігурація валідна
        """
        host = self.get('device.host')
        if not host or not str(host).startswith(('http://', 'https://')):
            raise ValueError(f"Адреса пристрою має починатися з http:// або https://: {host!r}")

        interval = self.get('poll.interval_ms')
        if not isinstance(interval, int) or interval <= 0:
            raise ValueError(f"Інтервал опитування має бути додатним числом: {interval!r}")

        timeout = self.get('device.timeout_ms')
        if not isinstance(timeout, (int, float)) or timeout <= 0:
            raise ValueError(f"Таймаут пристрою має бути додатним числом: {timeout!r}")

        webhook_timeout = self.get('webhooks.timeout_ms')
        if not isinstance(webhook_timeout, (int, float)) or webhook_timeout <= 0:
            raise ValueError(f"Таймаут вебхуків має бути додатним числом: {webhook_timeout!r}")

        port = self.get('api.port')
        if not isinstance(port, int) or not 1 <= port <= 65535:
            raise ValueError(f"Некоректний порт API: {port!r}")

        return True
