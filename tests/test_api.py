"""
Тести REST API через тестовий клієнт Flask.
"""

from datetime import datetime
from unittest.mock import MagicMock

import pytest

from api.server import APIServer
from utils.errors import DeviceResponseInvalid, NoTextHistoryError


@pytest.fixture
def push_notifier():
    return MagicMock()


@pytest.fixture
def server(device, database, recording_notifier, push_notifier, config):
    return APIServer(
        device,
        database,
        recording_notifier,
        push_notifier,
        config,
        started_at=datetime(2026, 1, 2, 3, 4, 5)
    )


@pytest.fixture
def client(server):
    return server.app.test_client()


class TestText:

    def test_set_text(self, client, device, database, recording_notifier, push_notifier):
        response = client.post('/text', data="Back at 5")

        assert response.status_code == 200
        assert response.get_json() == {'ok': True, 'text': "Back at 5"}
        assert device.text == "Back at 5"
        assert database.latest_text().text == "Back at 5"
        assert recording_notifier.payloads == [{'event': 'armed', 'text': "Back at 5"}]
        push_notifier.notify_text_changed.assert_called_once_with("Back at 5")

    def test_empty_body_does_not_call_device(self, client, device, recording_notifier):
        response = client.post('/text', data="")

        assert response.status_code == 400
        assert 'error' in response.get_json()
        assert device.get_command_history() == []
        assert recording_notifier.payloads == []

    def test_device_offline_returns_502(self, client, device, database, recording_notifier):
        device.set_online(False)

        response = client.post('/text', data="Hi")

        assert response.status_code == 502
        assert response.get_json()["error"] == "Device unreachable"
        with pytest.raises(NoTextHistoryError):
            database.latest_text()
        assert recording_notifier.payloads == []

    def test_device_rejected_returns_502_with_status(self, client, device):
        device.reject_status = 500

        response = client.post('/text', data="Hi")

        assert response.status_code == 502
        assert response.get_json()['status'] == 500

    def test_get_text_before_any_write(self, client):
        response = client.get('/text')

        assert response.status_code == 400

    def test_get_text_returns_latest(self, client):
        client.post('/text', data="one")
        client.post('/text', data="two")

        data = client.get('/text').get_json()

        assert data['text'] == "two"
        assert data['set_at']


class TestAlarm:

    def test_armed_after_text(self, client):
        assert client.get('/alarm').get_json() == {'armed': False}

        client.post('/text', data="Hi")

        assert client.get('/alarm').get_json() == {'armed': True}

    def test_device_failure(self, client, device):
        device.set_online(False)

        assert client.get('/alarm').status_code == 502

    def test_invalid_device_response_is_502(self, server, client):
        server.device_client = MagicMock()
        server.device_client.read_binary_sensor.side_effect = DeviceResponseInvalid("Invalid JSON")

        response = client.get('/alarm')

        assert response.status_code == 502
        assert response.get_json() == {'error': "Invalid device response", 'reason': "Invalid JSON"}


class TestHealth:

    def test_all_probes_ok(self, client):
        response = client.get('/health')

        assert response.status_code == 200
        data = response.get_json()
        assert data['boot_count'] == 1
        assert data['temperature_c'] == 21.5
        assert data['humidity_pct'] == 45.0
        assert isinstance(data['rtt_ms'], int)
        assert data['server_git_sha'] == 'abc1234'
        assert data['server_started_at'] == '2026-01-02T03:04:05'

    def test_one_probe_failing_reports_detail(self, client, device):
        del device.sensors['Humidity']

        response = client.get('/health')

        assert response.status_code == 502
        sensors = response.get_json()['sensors']
        assert sensors['Boot Count'] == {'ok': True, 'value': 1}
        assert sensors['Temperature']['ok'] is True
        assert sensors['Humidity']['ok'] is False


class TestWebhooks:

    def test_register_list_delete(self, client):
        response = client.post('/webhooks', json={'url': 'http://a.test/hook'})
        assert response.status_code == 200
        created = response.get_json()
        assert created['ok'] is True
        assert created['url'] == 'http://a.test/hook'

        webhooks = client.get('/webhooks').get_json()['webhooks']
        assert [w['url'] for w in webhooks] == ['http://a.test/hook']
        assert webhooks[0]['id'] == created['id']
        assert webhooks[0]['created_at']

        response = client.delete('/webhooks', json={'url': 'http://a.test/hook'})
        assert response.get_json() == {'ok': True}
        assert client.get('/webhooks').get_json() == {'webhooks': []}

    def test_duplicate_is_409(self, client):
        client.post('/webhooks', json={'url': 'http://a.test/hook'})

        response = client.post('/webhooks', json={'url': 'http://a.test/hook'})

        assert response.status_code == 409
        assert len(client.get('/webhooks').get_json()['webhooks']) == 1

    def test_delete_unknown_is_404(self, client):
        client.post('/webhooks', json={'url': 'http://a.test/hook'})

        response = client.delete('/webhooks', json={'url': 'http://b.test/hook'})

        assert response.status_code == 404
        assert len(client.get('/webhooks').get_json()['webhooks']) == 1

    @pytest.mark.parametrize("body", [{}, {'url': ''}, {'url': 42}, ['http://a.test']])
    def test_invalid_body_is_400(self, client, body):
        assert client.post('/webhooks', json=body).status_code == 400
        assert client.delete('/webhooks', json=body).status_code == 400

    def test_non_json_body_is_400(self, client):
        response = client.post('/webhooks', data="http://a.test/hook", content_type='text/plain')

        assert response.status_code == 400

    def test_cors_headers(self, client):
        response = client.get('/webhooks', headers={'Origin': 'http://example.test'})

        assert response.headers.get('Access-Control-Allow-Origin') == '*'
