import threading
from datetime import timedelta

import pytest

from src.tint.core.color_store import ColorStore
from src.tint.core.errors import StoreNotInitializedError
from src.tint.core.swatch import ColorSample, Swatch

RED = ColorSample(1.0, 0.0, 0.0)
GREEN = ColorSample(0.0, 1.0, 0.0)
BLUE = ColorSample(0.0, 0.0, 1.0)


def shade(i):
    return ColorSample((i % 256) / 255, ((i // 256) % 256) / 255, 0.5)


def test_mutations_require_initialize(make_store):
    store = make_store(initialize=False)
    with pytest.raises(StoreNotInitializedError):
        store.capture(RED)
    with pytest.raises(StoreNotInitializedError):
        store.evict_expired()
    with pytest.raises(StoreNotInitializedError):
        store.clear()


def test_initialize_starts_reaper(store, reapers):
    assert store.is_initialized
    assert len(reapers.created) == 1
    reaper = reapers.created[0]
    assert reaper.started
    assert reaper.interval == 900


def test_initialize_twice_starts_one_reaper(store, reapers):
    store.initialize()
    assert len(reapers.created) == 1


def test_capture_red(store, clipboard, persistence):
    swatch = store.capture(RED)
    assert swatch.hex == "#FF0000"
    assert tuple(swatch.rgb) == (255, 0, 0)
    assert store.history == (swatch,)
    assert clipboard.contents == "#FF0000"
    assert persistence.load() == [swatch]


def test_history_is_newest_first(store):
    captured = [store.capture(sample) for sample in (RED, GREEN, BLUE)]
    assert list(store.history) == list(reversed(captured))


def test_history_is_capped(make_store, persistence):
    store = make_store(max_history=5)
    captured = [store.capture(shade(i)) for i in range(12)]
    assert len(store.history) == 5
    assert list(store.history) == list(reversed(captured))[:5]
    assert len(persistence.load()) == 5


def test_default_cap_is_200(store):
    for i in range(205):
        store.capture(shade(i))
        assert len(store.history) <= 200
    assert len(store.history) == 200


def test_capture_drops_expired_entries(store, clock):
    old = store.capture(RED)
    clock.advance(hours=8, seconds=1)
    new = store.capture(GREEN)
    assert store.history == (new,)
    assert old not in store.history


def test_entry_exactly_at_retention_edge_is_kept(store, clock):
    swatch = store.capture(RED)
    clock.advance(hours=8)
    assert store.evict_expired() == 0
    assert store.history == (swatch,)


def test_evict_expired_removes_by_age_and_persists(store, clock, persistence):
    store.capture(RED)
    clock.advance(hours=5)
    recent = store.capture(GREEN)
    clock.advance(hours=4)
    assert store.evict_expired() == 1
    assert store.history == (recent,)
    assert persistence.load() == [recent]


def test_evict_expired_is_idempotent(store, clock):
    store.capture(RED)
    clock.advance(hours=3)
    store.capture(GREEN)
    clock.advance(hours=6)
    store.evict_expired()
    first = store.history
    assert store.evict_expired() == 0
    assert store.history == first


def test_age_invariant_after_eviction(store, clock):
    for i in range(10):
        store.capture(shade(i))
        clock.advance(hours=1)
    store.evict_expired()
    assert store.history
    for swatch in store.history:
        assert clock.now - swatch.timestamp <= store.retention


def test_eviction_to_empty_is_persisted(store, clock, persistence):
    store.capture(RED)
    clock.advance(hours=9)
    assert store.evict_expired() == 1
    assert store.history == ()
    assert persistence.load() == []


def test_evict_without_changes_does_not_write(store, persistence, monkeypatch):
    store.capture(RED)
    saves = []
    monkeypatch.setattr(persistence, "save", lambda history: saves.append(history) or True)
    store.evict_expired()
    assert saves == []


def test_reaper_tick_evicts(store, clock, reapers):
    store.capture(RED)
    clock.advance(hours=9)
    reapers.created[0].tick()
    assert store.history == ()


def test_clear(store, persistence):
    store.capture(RED)
    store.capture(GREEN)
    store.clear()
    assert store.history == ()
    assert persistence.load() == []


def test_initialize_loads_and_prunes(persistence, clock, make_store):
    fresh = Swatch.create(GREEN, now=clock.now - timedelta(hours=1))
    stale = Swatch.create(RED, now=clock.now - timedelta(hours=9))
    persistence.save([fresh, stale])
    store = make_store()
    assert store.history == (fresh,)
    assert persistence.load() == [fresh]


def test_initialize_with_corrupt_storage_starts_empty(storage, persistence, make_store):
    storage.set(persistence.key, b"\x00garbage")
    store = make_store()
    assert store.history == ()


def test_cancelled_sample_changes_nothing(store, clipboard, persistence):
    existing = store.capture(RED)
    notified = []
    store.subscribe(notified.append)
    assert store.capture_from(lambda: None) is None
    assert store.history == (existing,)
    assert clipboard.copies == ["#FF0000"]
    assert persistence.load() == [existing]
    assert notified == []


def test_capture_from_sampler(store, clipboard):
    swatch = store.capture_from(lambda: BLUE)
    assert swatch.hex == "#0000FF"
    assert clipboard.contents == "#0000FF"


def test_observers_notified_on_each_mutation(store, clock):
    snapshots = []
    store.subscribe(snapshots.append)
    store.capture(RED)
    clock.advance(hours=9)
    store.evict_expired()
    store.evict_expired()
    store.clear()
    assert len(snapshots) == 3
    assert len(snapshots[0]) == 1
    assert snapshots[1] == ()
    assert snapshots[2] == ()


def test_unsubscribe(store):
    snapshots = []
    unsubscribe = store.subscribe(snapshots.append)
    unsubscribe()
    store.capture(RED)
    assert snapshots == []


def test_failing_observer_does_not_break_capture(store, clipboard):
    def broken(history):
        raise RuntimeError("render failed")

    seen = []
    store.subscribe(broken)
    store.subscribe(seen.append)
    swatch = store.capture(RED)
    assert store.history == (swatch,)
    assert seen == [(swatch,)]
    assert clipboard.contents == "#FF0000"


def test_persistence_failure_keeps_memory_state(store, persistence, clipboard, monkeypatch):
    monkeypatch.setattr(persistence, "save", lambda history: False)
    swatch = store.capture(RED)
    assert store.history == (swatch,)
    assert clipboard.contents == "#FF0000"


def test_persist_happens_before_clipboard(store, persistence, clipboard, monkeypatch):
    events = []
    original_save = persistence.save

    def save(history):
        events.append(("save", tuple(s.hex for s in history)))
        return original_save(history)

    def copy(text):
        events.append(("clipboard", text))
        return True

    monkeypatch.setattr(persistence, "save", save)
    store.clipboard = copy
    store.capture(RED)
    assert events == [("save", ("#FF0000",)), ("clipboard", "#FF0000")]


def test_copy_existing_swatch(store, clipboard):
    red = store.capture(RED)
    store.capture(GREEN)
    assert store.copy(red.id) is True
    assert clipboard.contents == "#FF0000"
    assert len(store.history) == 2


def test_copy_unknown_swatch(store, clipboard):
    store.capture(RED)
    assert store.copy("missing") is False
    assert clipboard.copies == ["#FF0000"]


def test_shutdown_cancels_reaper(store, reapers):
    store.shutdown()
    store.shutdown()
    assert reapers.created[0].cancelled


def test_invalid_max_history(persistence, clipboard):
    with pytest.raises(ValueError):
        ColorStore(persistence, clipboard, max_history=0)


def test_concurrent_captures_are_serialized(make_store, persistence):
    store = make_store(max_history=500)
    workers = [
        threading.Thread(target=lambda: [store.capture(RED) for _ in range(25)])
        for _ in range(8)
    ]
    for worker in workers:
        worker.start()
    for worker in workers:
        worker.join()
    assert len(store.history) == 200
    assert len({s.id for s in store.history}) == 200
    assert persistence.load() == list(store.history)


@pytest.mark.parametrize("retention", [timedelta(0), timedelta(hours=-1)])
def test_invalid_retention(persistence, clipboard, retention):
    with pytest.raises(ValueError):
        ColorStore(persistence, clipboard, retention=retention)
