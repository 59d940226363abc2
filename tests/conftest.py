import pytest

from auth.events import SessionExpiredNotifier
from auth.token_store import MemoryTokenStore
from tests.backend_helpers import FakeBackend


class EventRecorder:
    def __init__(self) -> None:
        self.count = 0

    def __call__(self) -> None:
        self.count += 1


@pytest.fixture
def store() -> MemoryTokenStore:
    return MemoryTokenStore()


@pytest.fixture
def notifier() -> SessionExpiredNotifier:
    return SessionExpiredNotifier()


@pytest.fixture
def expired_events(notifier: SessionExpiredNotifier) -> EventRecorder:
    recorder = EventRecorder()
    notifier.subscribe(recorder)
    return recorder


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture(autouse=True)
def clean_designhub_env(monkeypatch) -> None:
    for key in (
        "DESIGNHUB_API_URL",
        "DESIGNHUB_API_BASE_URL",
        "DESIGNHUB_TOKEN_STORE_PATH",
        "DESIGNHUB_TIMEOUT",
        "DESIGNHUB_REFRESH_TIMEOUT",
        "DESIGNHUB_DEBUG",
    ):
        monkeypatch.delenv(key, raising=False)
