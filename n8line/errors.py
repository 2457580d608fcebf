"""Исключения N8Line."""

from __future__ import annotations


class PokerToolError(Exception):
    """Базовая ошибка: сообщение + операция, на которой упали."""

    def __init__(self, message: str, operation: str = "", original: BaseException | None = None):
        super().__init__(message)
        self.operation = operation
        self.original = original

    def __str__(self) -> str:
        msg = super().__str__()
        return f"{self.operation}: {msg}" if self.operation else msg


class ParseError(PokerToolError):
    """Нераспознанный / битый текст раздачи. Ловится локально, файл не роняет."""


class ValidationError(PokerToolError):
    """Невалидные входные данные (пустой hand_id, кривая дата и т.п.)."""


class StorageError(PokerToolError):
    """Ошибка SQLite (кроме UNIQUE по hand_id). Фатальна для текущей операции."""


class DuplicateHandError(PokerToolError):
    """Раздача уже есть в базе. Не настоящая ошибка — вызывающий код считает её пропуском."""

    def __init__(self, hand_id: str):
        super().__init__(f"раздача {hand_id} уже в базе", "insert_hand")
        self.hand_id = hand_id


class ChartError(PokerToolError):
    """Ошибка построения / сохранения графика."""
