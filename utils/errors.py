"""
Типізовані помилки сервісу.

Кожна помилка знає свій HTTP статус, тому API перетворює їх у відповіді
в одному місці.
"""

from typing import Optional


class DomainError(Exception):
    """Базова помилка, яку можна показати клієнту API."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {'error': self.message}


class ValidationError(DomainError):
    """Некоректні вхідні дані від клієнта."""

    status_code = 400


class NoTextHistoryError(DomainError):
    """Текст ще жодного разу не встановлювався."""

    status_code = 400

    def __init__(self, message: str = "No text has been set yet"):
        super().__init__(message)


class ConflictError(DomainError):
    status_code = 409


class DuplicateWebhookError(ConflictError):
    """URL вебхука вже зареєстрований."""

    def __init__(self, url: str):
        super().__init__("Webhook URL already registered")
        self.url = url


class NotFoundError(DomainError):
    status_code = 404


class WebhookNotFoundError(NotFoundError):
    """Спроба видалити незареєстрований вебхук."""

    def __init__(self, url: str):
        super().__init__("Webhook URL not found")
        self.url = url


class DeviceError(DomainError):
    """Пристрій недоступний або відхилив запит."""

    status_code = 502

    def __init__(self, message: str, reason: str):
        super().__init__(message)
        self.reason = reason

    def to_dict(self) -> dict:
        return {'error': self.message, 'reason': self.reason}


class DeviceUnreachable(DeviceError):
    """Помилка транспорту або таймаут."""

    def __init__(self, reason: str):
        super().__init__("Device unreachable", reason)


class DeviceResponseInvalid(DeviceError):
    """Пристрій відповів, але тіло відповіді не вдалося розібрати."""

    def __init__(self, reason: str):
        super().__init__("Invalid device response", reason)


class DeviceRejected(DeviceError):
    """Пристрій відповів статусом, відмінним від 2xx."""

    def __init__(self, status: int, reason: Optional[str] = None):
        super().__init__("Device rejected request", reason or f"HTTP {status}")
        self.status = status

    def to_dict(self) -> dict:
        data = super().to_dict()
        data['status'] = self.status
        return data
