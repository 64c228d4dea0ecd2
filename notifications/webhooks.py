"""
Розсилка подій зареєстрованим вебхукам.
"""

import json
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Optional

import requests

from database.db import Database
from utils.logger import get_logger


class Notifier:
    """
    Паралельна доставка подій усім підписникам.

    Кожна доставка - одна спроба, незалежна від інших. Помилки лише
    логуються і ніколи не доходять до того, хто викликав notify().
    """

    TIMEOUT = 10.0

    def __init__(self, database: Database, timeout: float = TIMEOUT):
        """
        Ініціалізація розсилки.

        Args:
            database: База даних з підписками
            timeout: Таймаут однієї доставки в секундах
        """
        self.database = database
        self.timeout = timeout
        self.logger = get_logger()

    def notify(self, payload: Dict[str, Any]) -> Optional[threading.Thread]:
        """
        Розіслати подію у фоні.

        Args:
            payload: Тіло події

        Returns:
            Потік розсилки або None, якщо підписників немає
        """
        try:
            urls = self.database.get_webhook_urls()
        except Exception as e:
            self.logger.error(f"Не вдалося прочитати список вебхуків: {e}")
            return None

        if not urls:
            return None

        body = json.dumps(payload)
        self.logger.info(f"Розсилка на {len(urls)} вебхук(ів): {body}")

        thread = threading.Thread(
            target=self.deliver_all,
            args=(urls, body),
            name=f"webhooks-{payload.get('event', 'event')}",
            daemon=True
        )
        thread.start()
        return thread

    def deliver_all(self, urls: List[str], body: str) -> Dict[str, Optional[str]]:
        """
        Доставити тіло на всі адреси паралельно та дочекатися результатів.

        Returns:
            Словник {url: причина_помилки або None}
        """
        results: Dict[str, Optional[str]] = {}
        if not urls:
            return results

        with ThreadPoolExecutor(max_workers=len(urls)) as executor:
            futures = {url: executor.submit(self._deliver, url, body) for url in urls}

        for url, future in futures.items():
            results[url] = future.result()
            if results[url] is not None:
                self.logger.warning(f"Вебхук {url} не доставлено: {results[url]}")

        failed = sum(1 for reason in results.values() if reason is not None)
        if failed:
            self.logger.info(f"Розсилка завершена: {len(urls) - failed}/{len(urls)} успішно")
        return results

    def _deliver(self, url: str, body: str) -> Optional[str]:
        """
        Одна спроба доставки.

        Returns:
            None при успіху, інакше причина помилки
        """
        try:
            response = requests.post(
                url,
                data=body,
                headers={'Content-Type': 'application/json'},
                timeout=self.timeout
            )
        except requests.exceptions.RequestException as e:
            return str(e) or e.__class__.__name__
        except Exception as e:
            return f"несподівана помилка: {e}"

        if not response.ok:
            return f"HTTP {response.status_code}"
        return None
