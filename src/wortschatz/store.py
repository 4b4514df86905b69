import json
import logging
import os
import sqlite3
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import List, Optional

import redis

from .config import Settings, settings as default_settings
from .models import WordDetails, WordRecord

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """The word store could not complete an operation."""


# --- Strategy Pattern: Word storage backends ---
class WordStore(ABC):
    """Uniquely keyed collection of word records (key: the German word)."""

    backend: str = "abstract"

    @abstractmethod
    def add(self, german: str, details: WordDetails) -> WordRecord:
        """Inserts the word, replacing any record with the same key."""

    @abstractmethod
    def list_all(self) -> List[WordRecord]:
        """All records, ascending by key."""

    @abstractmethod
    def delete_by_key(self, german: str) -> None:
        pass

    def close(self) -> None:
        pass


def normalize_key(german: str) -> str:
    return german.strip().lower()


def _now() -> datetime:
    return datetime.now(timezone.utc)


class SQLiteWordStore(WordStore):
    backend = "sqlite"

    def __init__(self, path: str):
        self.path = path
        directory = os.path.dirname(path)
        if directory and not os.path.exists(directory):
            os.makedirs(directory, exist_ok=True)
        self._create_table()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.path)
        conn.row_factory = sqlite3.Row
        return conn

    def _create_table(self):
        try:
            conn = self._connect()
            try:
                with conn:
                    conn.execute(
                        """
                        CREATE TABLE IF NOT EXISTS words (
                            id INTEGER PRIMARY KEY AUTOINCREMENT,
                            german TEXT UNIQUE NOT NULL,
                            partOfSpeech TEXT NOT NULL,
                            article TEXT NOT NULL,
                            definition TEXT NOT NULL,
                            translation TEXT NOT NULL,
                            examples TEXT DEFAULT '[]',
                            alternateMeanings TEXT DEFAULT '[]',
                            createdAt TEXT NOT NULL
                        );
                        """
                    )
            finally:
                conn.close()
        except sqlite3.Error as e:
            logger.error(f"Failed to initialise SQLite store at {self.path}: {e}")
            raise StorageError("Failed to initialise word store") from e

    @staticmethod
    def _to_record(row: sqlite3.Row) -> WordRecord:
        return WordRecord(
            id=row["id"],
            german=row["german"],
            part_of_speech=row["partOfSpeech"],
            article=row["article"],
            definition=row["definition"],
            translation=row["translation"],
            examples=json.loads(row["examples"] or "[]"),
            alternate_meanings=json.loads(row["alternateMeanings"] or "[]"),
            created_at=row["createdAt"],
        )

    def add(self, german: str, details: WordDetails) -> WordRecord:
        key = normalize_key(german)
        try:
            conn = self._connect()
            try:
                with conn:
                    conn.execute(
                        """
                        INSERT OR REPLACE INTO words
                            (german, partOfSpeech, article, definition, translation,
                             examples, alternateMeanings, createdAt)
                        VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                        """,
                        (
                            key,
                            details.part_of_speech,
                            details.article,
                            details.definition,
                            details.translation,
                            json.dumps(details.examples, ensure_ascii=False),
                            json.dumps(details.alternate_meanings, ensure_ascii=False),
                            _now().isoformat(),
                        ),
                    )
                row = conn.execute("SELECT * FROM words WHERE german = ?", (key,)).fetchone()
            finally:
                conn.close()
        except sqlite3.Error as e:
            logger.error(f"Failed to add '{key}': {e}")
            raise StorageError("Failed to add word") from e
        return self._to_record(row)

    def list_all(self) -> List[WordRecord]:
        try:
            conn = self._connect()
            try:
                rows = conn.execute("SELECT * FROM words ORDER BY german ASC").fetchall()
            finally:
                conn.close()
        except sqlite3.Error as e:
            logger.error(f"Failed to list words: {e}")
            raise StorageError("Failed to fetch words") from e
        return [self._to_record(row) for row in rows]

    def delete_by_key(self, german: str) -> None:
        key = normalize_key(german)
        try:
            conn = self._connect()
            try:
                with conn:
                    conn.execute("DELETE FROM words WHERE german = ?", (key,))
            finally:
                conn.close()
        except sqlite3.Error as e:
            logger.error(f"Failed to delete '{key}': {e}")
            raise StorageError("Failed to delete word") from e


class RedisWordStore(WordStore):
    """One hash of JSON records; HSET per key gives last-write-wins upserts."""

    backend = "redis"
    WORDS_KEY = "wortschatz:words"
    ID_KEY = "wortschatz:word_id"

    def __init__(self, client: redis.Redis):
        self.client = client

    def add(self, german: str, details: WordDetails) -> WordRecord:
        key = normalize_key(german)
        try:
            record = WordRecord(
                id=int(self.client.incr(self.ID_KEY)),
                german=key,
                created_at=_now(),
                **details.model_dump(),
            )
            self.client.hset(self.WORDS_KEY, key, record.model_dump_json())
        except redis.RedisError as e:
            logger.error(f"Failed to add '{key}': {e}")
            raise StorageError("Failed to add word") from e
        return record

    def list_all(self) -> List[WordRecord]:
        try:
            stored = self.client.hgetall(self.WORDS_KEY)
        except redis.RedisError as e:
            logger.error(f"Failed to list words: {e}")
            raise StorageError("Failed to fetch words") from e
        return [WordRecord.model_validate_json(stored[key]) for key in sorted(stored)]

    def delete_by_key(self, german: str) -> None:
        key = normalize_key(german)
        try:
            self.client.hdel(self.WORDS_KEY, key)
        except redis.RedisError as e:
            logger.error(f"Failed to delete '{key}': {e}")
            raise StorageError("Failed to delete word") from e

    def close(self) -> None:
        self.client.close()


class StoreFactory:
    """Selects the storage backend named by the WORD_STORE setting."""

    @staticmethod
    def create(settings: Optional[Settings] = None) -> WordStore:
        settings = settings or default_settings
        backend = settings.WORD_STORE.strip().lower()
        if backend == "redis":
            logger.info("Using Redis word store")
            return RedisWordStore(redis.from_url(settings.REDIS_URL, decode_responses=True))
        elif backend == "sqlite":
            logger.info(f"Using SQLite word store at {settings.SQLITE_PATH}")
            return SQLiteWordStore(settings.SQLITE_PATH)
        else:
            raise ValueError(f"Unknown word store backend: {settings.WORD_STORE}")
