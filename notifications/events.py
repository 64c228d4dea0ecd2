"""
Події, які отримують підписники вебхуків.
"""

from enum import Enum
from typing import Any, Dict


class EventType(str, Enum):
    ARMED = 'armed'
    DISARMED = 'disarmed'
    ONLINE = 'online'
    OFFLINE = 'offline'
    SERVER_RESTART = 'server_restart'


def build_event(event_type: EventType, **fields: Any) -> Dict[str, Any]:
    """
    Створити тіло події.

    Тільки 'armed' несе додаткове поле 'text', решта подій - лише назву.
    """
    if event_type is EventType.ARMED:
        if set(fields) != {'text'}:
            raise ValueError("Подія 'armed' потребує лише поля 'text'")
    elif fields:
        raise ValueError(f"Подія '{event_type.value}' не має додаткових полів")

    return {'event': event_type.value, **fields}
