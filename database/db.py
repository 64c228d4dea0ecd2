"""
Модуль для роботи з базою даних SQLite.

Зберігає підписки на вебхуки та історію тексту, встановленого на дисплеї.
"""

import sqlite3
import threading
from contextlib import closing
from typing import List
from pathlib import Path

from database.models import Webhook, TextEntry
from utils.errors import (
    DuplicateWebhookError,
    NoTextHistoryError,
    ValidationError,
    WebhookNotFoundError,
)
from utils.logger import get_logger


class Database:
    """Клас для роботи з базою даних SQLite."""

    def __init__(self, db_file: str = "data/webhooks.db"):
        """
        Ініціалізація бази даних.

        Args:
            db_file: Шлях до файлу бази даних
        """
        self.db_file = Path(db_file)
        self.db_file.parent.mkdir(parents=True, exist_ok=True)
        self.logger = get_logger()
        # SQLite блокує файл сам, але вставка + читання id мають бути атомарними
        self._write_lock = threading.Lock()
        self._initialize_database()

    def _get_connection(self) -> sqlite3.Connection:
        """Отримати з'єднання з базою даних."""
        conn = sqlite3.connect(self.db_file, timeout=5.0)
        conn.row_factory = sqlite3.Row
        return conn

    def _initialize_database(self) -> None:
        """Ініціалізувати структуру бази даних."""
        with closing(self._get_connection()) as conn:
            cursor = conn.cursor()

            cursor.execute("PRAGMA journal_mode=WAL")

            # Таблиця підписок на вебхуки
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS webhooks (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    url TEXT NOT NULL UNIQUE,
                    created_at TEXT NOT NULL DEFAULT (datetime('now'))
                )
            """)

            # Історія тексту: тільки додавання, записи не змінюються
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS text_history (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    text TEXT NOT NULL,
                    set_at TEXT NOT NULL DEFAULT (datetime('now'))
                )
            """)

            conn.commit()

        self.logger.info(f"База даних ініціалізована: {self.db_file}")

    def register_webhook(self, url: str) -> Webhook:
        """
        Зареєструвати новий вебхук.

        Args:
            url: Адреса підписника

        Returns:
            Створений запис

        Raises:
            ValidationError: порожня адреса
            DuplicateWebhookError: адреса вже зареєстрована
        """
        if not url:
            raise ValidationError("Body must contain a 'url' string")

        with self._write_lock, closing(self._get_connection()) as conn:
            try:
                with conn:
                    cursor = conn.execute(
                        "INSERT INTO webhooks (url) VALUES (?)", (url,)
                    )
            except sqlite3.IntegrityError:
                raise DuplicateWebhookError(url) from None

            row = conn.execute(
                "SELECT id, url, created_at FROM webhooks WHERE id = ?",
                (cursor.lastrowid,)
            ).fetchone()

        self.logger.info(f"Зареєстровано вебхук #{row['id']}: {url}")
        return Webhook(id=row['id'], url=row['url'], created_at=row['created_at'])

    def list_webhooks(self) -> List[Webhook]:
        """Отримати всі вебхуки, впорядковані за id."""
        with closing(self._get_connection()) as conn:
            rows = conn.execute(
                "SELECT id, url, created_at FROM webhooks ORDER BY id"
            ).fetchall()

        return [
            Webhook(id=row['id'], url=row['url'], created_at=row['created_at'])
            for row in rows
        ]

    def get_webhook_urls(self) -> List[str]:
        """Знімок поточного набору адрес підписників."""
        return [webhook.url for webhook in self.list_webhooks()]

    def remove_webhook(self, url: str) -> None:
        """
        Видалити вебхук за адресою.

        Raises:
            ValidationError: порожня адреса
            WebhookNotFoundError: адреса не зареєстрована
        """
        if not url:
            raise ValidationError("Body must contain a 'url' string")

        with self._write_lock, closing(self._get_connection()) as conn:
            with conn:
                cursor = conn.execute("DELETE FROM webhooks WHERE url = ?", (url,))

        if cursor.rowcount == 0:
            raise WebhookNotFoundError(url)

        self.logger.info(f"Видалено вебхук: {url}")

    def append_text(self, text: str) -> TextEntry:
        """
        Додати запис до історії тексту.

        Args:
            text: Встановлений текст

        Returns:
            Створений запис
        """
        with self._write_lock, closing(self._get_connection()) as conn:
            with conn:
                cursor = conn.execute(
                    "INSERT INTO text_history (text) VALUES (?)", (text,)
                )
            row = conn.execute(
                "SELECT id, text, set_at FROM text_history WHERE id = ?",
                (cursor.lastrowid,)
            ).fetchone()

        return TextEntry(id=row['id'], text=row['text'], set_at=row['set_at'])

    def latest_text(self) -> TextEntry:
        """
        Отримати останній встановлений текст.

        Raises:
            NoTextHistoryError: історія порожня
        """
        with closing(self._get_connection()) as conn:
            row = conn.execute(
                "SELECT id, text, set_at FROM text_history ORDER BY id DESC LIMIT 1"
            ).fetchone()

        if row is None:
            raise NoTextHistoryError()

        return TextEntry(id=row['id'], text=row['text'], set_at=row['set_at'])
