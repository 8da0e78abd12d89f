from src.news_lessons.tools.cache import TTLStore


class FakeClock:
    def __init__(self, start: float = 1_000.0) -> None:
        self.value = start

    def __call__(self) -> float:
        return self.value


def test_store_returns_payload_while_fresh() -> None:
    clock = FakeClock()
    store = TTLStore(ttl=60, timer=clock)
    payload = [{"title": "A"}]

    store.set("key", payload)
    clock.value += 59.9

    assert store.get("key") is payload


def test_store_treats_expired_entry_as_missing() -> None:
    clock = FakeClock()
    store = TTLStore(ttl=60, timer=clock)
    store.set("key", {"a": 1})

    clock.value += 60
    assert store.get("key") is None
    assert len(store) == 0


def test_store_now_uses_injected_timer() -> None:
    clock = FakeClock(start=42.0)
    store = TTLStore(ttl=10, timer=clock)
    assert store.now() == 42.0


def test_store_is_bounded() -> None:
    store = TTLStore(ttl=60, maxsize=2, timer=FakeClock())
    store.set("a", 1)
    store.set("b", 2)
    store.set("c", 3)

    assert len(store) == 2
    assert store.get("a") is None
    assert store.get("c") == 3


def test_store_clear() -> None:
    store = TTLStore(ttl=60, timer=FakeClock())
    store.set("a", 1)
    store.clear()
    assert store.get("a") is None
