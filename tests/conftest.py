"""
Спільні фікстури для тестів.
"""

import pytest

from database.db import Database
from tests.test_device import TestDeviceClient
from utils.config_manager import ConfigManager


class RecordingNotifier:
    """Розсилка, яка лише запам'ятовує події."""

    def __init__(self):
        self.payloads = []

    def notify(self, payload):
        self.payloads.append(payload)
        return None

    @property
    def events(self):
        return [payload['event'] for payload in self.payloads]


@pytest.fixture
def make_config(tmp_path):
    def _make(environ=None, yaml_text=None):
        config_path = tmp_path / "config.yaml"
        if yaml_text is not None:
            config_path.write_text(yaml_text, encoding='utf-8')
        return ConfigManager(str(config_path), environ=environ or {})
    return _make


@pytest.fixture
def config(make_config, tmp_path):
    return make_config(environ={
        'ESPHOME_HOST': 'http://display.test',
        'DB_PATH': str(tmp_path / "data" / "webhooks.db"),
        'GIT_SHA': 'abc1234',
    })


@pytest.fixture
def database(tmp_path):
    return Database(str(tmp_path / "data" / "webhooks.db"))


@pytest.fixture
def device(config):
    return TestDeviceClient(config)


@pytest.fixture
def recording_notifier():
    return RecordingNotifier()
