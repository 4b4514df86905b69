import pytest
import redis

from wortschatz.config import Settings
from wortschatz.models import WordDetails
from wortschatz.store import (
    RedisWordStore,
    SQLiteWordStore,
    StorageError,
    StoreFactory,
)


class FakeRedis:
    """Just the hash and counter commands the word store uses."""

    def __init__(self, fail=False):
        self.hashes = {}
        self.counters = {}
        self.fail = fail
        self.closed = False

    def _check(self):
        if self.fail:
            raise redis.ConnectionError("connection refused")

    def incr(self, key):
        self._check()
        self.counters[key] = self.counters.get(key, 0) + 1
        return self.counters[key]

    def hset(self, name, key, value):
        self._check()
        self.hashes.setdefault(name, {})[key] = value

    def hgetall(self, name):
        self._check()
        return dict(self.hashes.get(name, {}))

    def hdel(self, name, key):
        self._check()
        self.hashes.get(name, {}).pop(key, None)

    def close(self):
        self.closed = True


def details(translation="dog", **overrides):
    data = dict(part_of_speech="Noun", article="der", definition="Ein Tier", translation=translation)
    data.update(overrides)
    return WordDetails(**data)


@pytest.fixture(params=["sqlite", "redis"])
def store(request, tmp_path):
    if request.param == "sqlite":
        return SQLiteWordStore(str(tmp_path / "words.db"))
    return RedisWordStore(FakeRedis())


def test_add_twice_keeps_one_entry(store):
    store.add("Hund", details("dog"))
    record = store.add(" hund ", details("hound"))

    words = store.list_all()
    assert len(words) == 1
    assert words[0].german == "hund"
    assert words[0].translation == "hound"
    assert record.translation == "hound"


def test_list_is_sorted_by_key(store):
    for word in ["zebra", "apfel", "mann"]:
        store.add(word, details(word))
    assert [w.german for w in store.list_all()] == ["apfel", "mann", "zebra"]


def test_delete_by_key(store):
    store.add("hund", details())
    store.add("katze", details("cat", article="die"))

    store.delete_by_key("HUND")
    store.delete_by_key("missing")

    assert [w.german for w in store.list_all()] == ["katze"]


def test_lists_and_timestamps_round_trip(store):
    store.add(
        "über",
        details(
            "over",
            part_of_speech="Other",
            article="–",
            examples=["Das Bild hängt über dem Sofa."],
            alternate_meanings=["about", "above"],
        ),
    )
    word = store.list_all()[0]

    assert word.german == "über"
    assert word.examples == ["Das Bild hängt über dem Sofa."]
    assert word.alternate_meanings == ["about", "above"]
    assert word.article == "–"
    assert word.created_at is not None
    assert word.id is not None


def test_sqlite_store_persists_across_instances(tmp_path):
    path = str(tmp_path / "nested" / "words.db")
    SQLiteWordStore(path).add("hund", details())
    assert [w.german for w in SQLiteWordStore(path).list_all()] == ["hund"]


def test_sqlite_open_failure_raises_storage_error(tmp_path):
    with pytest.raises(StorageError):
        SQLiteWordStore(str(tmp_path))


def test_redis_failures_raise_storage_error():
    store = RedisWordStore(FakeRedis(fail=True))
    with pytest.raises(StorageError):
        store.add("hund", details())
    with pytest.raises(StorageError):
        store.list_all()
    with pytest.raises(StorageError):
        store.delete_by_key("hund")


def test_redis_close():
    client = FakeRedis()
    RedisWordStore(client).close()
    assert client.closed


def test_factory_selects_backend(tmp_path):
    settings = Settings()
    settings.SQLITE_PATH = str(tmp_path / "words.db")
    settings.WORD_STORE = "sqlite"
    assert isinstance(StoreFactory.create(settings), SQLiteWordStore)

    settings.WORD_STORE = "Redis"
    settings.REDIS_URL = "redis://localhost:6379/0"
    store = StoreFactory.create(settings)
    assert isinstance(store, RedisWordStore)
    assert store.backend == "redis"

    settings.WORD_STORE = "mongo"
    with pytest.raises(ValueError):
        StoreFactory.create(settings)
