"""
Моделі даних для бази даних.
"""

from dataclasses import dataclass


@dataclass
class Webhook:
    """Модель підписки на вебхук."""
    id: int
    url: str
    created_at: str

    def to_dict(self) -> dict:
        """Конвертувати в словник."""
        return {
            'id': self.id,
            'url': self.url,
            'created_at': self.created_at
        }


@dataclass
class TextEntry:
    """Модель запису історії тексту на дисплеї."""
    id: int
    text: str
    set_at: str

    def to_dict(self) -> dict:
        """Конвертувати в словник."""
        return {
            'text': self.text,
            'set_at': self.set_at
        }
