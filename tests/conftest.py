from datetime import datetime, timedelta, timezone

import pytest

from src.tint.core.color_store import ColorStore
from src.tint.core.persistence import HistoryPersistence, SlotStorage


class FakeClock:
    """A controllable UTC clock."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


class RecordingClipboard:
    """Stands in for copy_to_clipboard and remembers what was copied."""

    def __init__(self):
        self.copies = []

    def __call__(self, text: str) -> bool:
        self.copies.append(text)
        return True

    @property
    def contents(self):
        return self.copies[-1] if self.copies else None


class FakeReaper:
    """Records lifecycle calls instead of running a timer thread."""

    def __init__(self, interval, callback):
        self.interval = interval
        self.callback = callback
        self.started = False
        self.cancelled = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def tick(self):
        self.callback()


class FakeListener:
    """Mimics pynput.keyboard.GlobalHotKeys without touching the keyboard."""

    instances = []

    def __init__(self, hotkeys, alive=True, fail_on_start=None):
        self.hotkeys = hotkeys
        self._alive = alive
        self._fail_on_start = fail_on_start
        self.started = False
        self.stopped = False
        FakeListener.instances.append(self)

    def start(self):
        if self._fail_on_start is not None:
            raise self._fail_on_start
        self.started = True

    def wait(self):
        pass

    def is_alive(self):
        return self._alive and self.started and not self.stopped

    def stop(self):
        self.stopped = True

    def press(self):
        for action in self.hotkeys.values():
            action()

    @classmethod
    def active(cls):
        return [listener for listener in cls.instances if listener.is_alive()]


@pytest.fixture
def clock():
    return FakeClock(datetime(2025, 10, 15, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def clipboard():
    return RecordingClipboard()


@pytest.fixture
def storage(tmp_path):
    return SlotStorage(tmp_path / "data")


@pytest.fixture
def persistence(storage):
    return HistoryPersistence(storage)


@pytest.fixture
def reapers():
    created = []

    def factory(interval, callback):
        reaper = FakeReaper(interval, callback)
        created.append(reaper)
        return reaper

    factory.created = created
    return factory


@pytest.fixture
def make_store(persistence, clipboard, clock, reapers):
    def make(initialize=True, **kwargs):
        options = dict(
            clipboard=clipboard,
            clock=clock,
            reaper_factory=reapers,
        )
        options.update(kwargs)
        store = ColorStore(persistence, **options)
        if initialize:
            store.initialize()
        return store

    return make


@pytest.fixture
def store(make_store):
    return make_store()


@pytest.fixture(autouse=True)
def reset_fake_listeners():
    FakeListener.instances.clear()
    yield
    FakeListener.instances.clear()
