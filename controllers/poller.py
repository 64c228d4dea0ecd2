"""
Модуль опитування пристрою та визначення переходів стану.

Події генеруються лише на зміні стану (по фронту), а не на кожному
опитуванні:
  - 'offline' - пристрій став недоступним (з невідомого або online стану);
  - 'online'  - пристрій знову відповідає (з невідомого або offline стану);
  - 'disarmed' - сенсор Blinking змінився з True на False.
Перехід у Blinking=True через опитування подією не вважається: про
постановку на охорону сповіщає API при встановленні тексту.
"""

from dataclasses import dataclass, field
from enum import Enum
from threading import Event
from typing import Any, Dict, List, Optional
import time

from utils.errors import DeviceError, DeviceResponseInvalid
from utils.logger import get_logger
from notifications.events import EventType, build_event


BLINKING_SENSOR = "Blinking"


class TriState(Enum):
    """Булеве значення з явним станом 'ще невідомо'."""
    UNKNOWN = 'unknown'
    TRUE = 'true'
    FALSE = 'false'

    @classmethod
    def from_bool(cls, value: bool) -> 'TriState':
        return cls.TRUE if value else cls.FALSE


@dataclass
class PollState:
    """Стан, який змінює тільки цикл опитування."""
    online: TriState = TriState.UNKNOWN
    blinking: TriState = TriState.UNKNOWN
    last_error: Optional[str] = field(default=None)


class AlarmPoller:
    """Один цикл опитування сенсора Blinking та розсилка подій."""

    def __init__(self, device_client, notifier, state: Optional[PollState] = None):
        """
        Ініціалізація.

        Args:
            device_client: Клієнт пристрою (DeviceClient або TestDeviceClient)
            notifier: Розсилка подій (Notifier)
            state: Початковий стан (за замовчуванням обидва поля невідомі)
        """
        self.device_client = device_client
        self.notifier = notifier
        self.state = state if state is not None else PollState()
        self.logger = get_logger()
        self._restart_announced = False

    def _emit(self, event_type: EventType, events: List[Dict[str, Any]]) -> None:
        payload = build_event(event_type)
        events.append(payload)
        try:
            self.notifier.notify(payload)
        except Exception as e:
            self.logger.error(f"Помилка розсилки події {event_type.value}: {e}")

    def announce_restart(self) -> Optional[Dict[str, Any]]:
        """
        Повідомити підписників про перезапуск сервера.

        Виконується лише раз за життя процесу, до першого опитування.
        """
        if self._restart_announced:
            return None
        self._restart_announced = True

        events: List[Dict[str, Any]] = []
        self._emit(EventType.SERVER_RESTART, events)
        self.logger.info("Надіслано подію server_restart")
        return events[0]

    def poll_once(self) -> List[Dict[str, Any]]:
        """
        Виконати один цикл опитування.

        Returns:
            Список подій, згенерованих у цьому циклі (у порядку розсилки)
        """
        events: List[Dict[str, Any]] = []

        try:
            current = self.device_client.read_binary_sensor(BLINKING_SENSOR)
        except DeviceResponseInvalid as e:
            # Пристрій відповідає, тож online і blinking не змінюються
            self.state.last_error = e.reason
            self.logger.warning(f"Некоректна відповідь пристрою: {e.reason}")
            return events
        except DeviceError as e:
            self.state.last_error = e.reason
            self.logger.warning(f"Помилка опитування пристрою: {e.message} ({e.reason})")
            if self.state.online is not TriState.FALSE:
                self.state.online = TriState.FALSE
                self.logger.warning("Пристрій перейшов в offline")
                self._emit(EventType.OFFLINE, events)
            return events
        except Exception as e:
            # Цикл опитування не повинен зупинятися через несподівану помилку
            self.state.last_error = str(e)
            self.logger.error(f"Несподівана помилка опитування: {e}", exc_info=True)
            return events

        self.state.last_error = None

        if self.state.online is not TriState.TRUE:
            self.state.online = TriState.TRUE
            self.logger.info("Пристрій перейшов в online")
            self._emit(EventType.ONLINE, events)

        if self.state.blinking is TriState.TRUE and current is False:
            self.logger.info("Сигналізацію знято (Blinking: True -> False)")
            self._emit(EventType.DISARMED, events)

        self.state.blinking = TriState.from_bool(current)
        return events

    def run(self, shutdown_event: Event, interval: float) -> int:
        """
        Опитувати пристрій, поки не встановлено shutdown_event.

        Перше опитування виконується одразу. Наступне починається лише
        після завершення попереднього: якщо цикл триває довше за інтервал,
        наступний стартує одразу, без накладання.

        Args:
            shutdown_event: Прапорець завершення
            interval: Інтервал між опитуваннями в секундах

        Returns:
            Кількість виконаних опитувань
        """
        ticks = 0
        while not shutdown_event.is_set():
            tick_start = time.monotonic()
            self.poll_once()
            ticks += 1
            elapsed = time.monotonic() - tick_start

            if elapsed >= interval:
                self.logger.warning(
                    f"Опитування тривало {elapsed:.2f} с, довше за інтервал {interval:.2f} с"
                )
                continue

            # Очікування до наступного опитування
            shutdown_event.wait(interval - elapsed)

        return ticks
