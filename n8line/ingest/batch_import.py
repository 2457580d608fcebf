"""
batch_import.py — пакетный импорт HH в базу N8Line
Запуск:
    n8line parse --input <папка_с_HH> [--db data/poker.db]

Важно:
- Раздачи, которые уже есть в базе (по hand_id), пропускаются — повторный импорт ничего не меняет.
- Дубликаты ловим дважды: сначала поиском по hand_id, потом по UNIQUE constraint при вставке.
- Каждая вставка коммитится сразу: ошибка SQLite обрывает импорт файла,
  но уже записанные руки остаются в базе.
- Файлы после импорта НЕ удаляются.
"""

from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, List

from n8line.config import HAND_FORMAT, LOG_FILE_EXT, HandFormat
from n8line.database.create_schema import connect
from n8line.database.db_utils import get_hand_by_id, insert_hand
from n8line.errors import DuplicateHandError, StorageError, ValidationError
from n8line.models import HandRecord
from n8line.parse.hand_parser import parse_file
from n8line.utils import round2

logger = logging.getLogger(__name__)


@dataclass
class StoreStats:
    inserted: int = 0
    skipped: int = 0  # уже в базе
    rejected: int = 0  # не прошли валидацию
    profit: float = 0.0  # профит только по новым рукам

    def add(self, other: "StoreStats") -> None:
        self.inserted += other.inserted
        self.skipped += other.skipped
        self.rejected += other.rejected
        self.profit = round2(self.profit + other.profit)


@dataclass
class ImportSummary:
    files: List[Path] = field(default_factory=list)
    totals: StoreStats = field(default_factory=StoreStats)


def store_hands(cx: sqlite3.Connection, hands: Iterable[HandRecord]) -> StoreStats:
    """Пишет раздачи в базу, каждую не больше одного раза."""
    stats = StoreStats()
    for hand in hands:
        try:
            if get_hand_by_id(cx, hand.hand_id) is not None:
                logger.info("Раздача %s уже в базе — пропускаю", hand.hand_id)
                stats.skipped += 1
                continue
            insert_hand(cx, hand)
        except DuplicateHandError:
            logger.info("Раздача %s уже в базе (UNIQUE constraint) — пропускаю", hand.hand_id)
            stats.skipped += 1
            continue
        except ValidationError as e:
            logger.warning("Раздача отклонена: %s", e)
            stats.rejected += 1
            continue
        stats.inserted += 1
        stats.profit = round2(stats.profit + hand.hero_profit)
        logger.debug("  %s ... OK", hand.hand_id)
    return stats


def import_file(
    cx: sqlite3.Connection,
    path: str | Path,
    fmt: HandFormat = HAND_FORMAT,
    keep_truncated: bool = False,
) -> StoreStats:
    try:
        hands = parse_file(path, fmt, keep_truncated)
    except OSError as e:
        raise StorageError(f"Не удалось прочитать {path}: {e}", "import_file", e) from e
    return store_hands(cx, hands)


def list_log_files(folder: str | Path, ext: str = LOG_FILE_EXT) -> List[Path]:
    folder = Path(folder)
    if not folder.is_dir():
        raise ValidationError(f"Папка не найдена: {folder.resolve()}", "list_log_files")
    files = sorted(p for p in folder.glob(f"*{ext}") if p.is_file())
    if not files:
        raise ValidationError(f"Нет файлов с расширением {ext} в {folder}", "list_log_files")
    return files


def batch_import(
    folder: str | Path,
    db_path: str | Path,
    ext: str = LOG_FILE_EXT,
    fmt: HandFormat = HAND_FORMAT,
    keep_truncated: bool = False,
    on_file: Callable[[Path, StoreStats], None] | None = None,
) -> ImportSummary:
    """
    Импортирует все файлы с историей рук из папки.

    Args:
        folder: Путь к папке с файлами
        db_path: Путь к базе данных (создаётся, если нет)
        ext: Расширение файлов для импорта
        on_file: колбэк после каждого файла (для вывода прогресса в CLI)
    """
    files = list_log_files(folder, ext)
    summary = ImportSummary(files=files)
    try:
        cx = connect(db_path)
    except sqlite3.Error as e:
        raise StorageError(f"Не удалось открыть базу {db_path}: {e}", "connect", e) from e
    try:
        for file in files:
            stats = import_file(cx, file, fmt, keep_truncated)
            summary.totals.add(stats)
            if on_file:
                on_file(file, stats)
    finally:
        cx.close()
    return summary
