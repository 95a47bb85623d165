from datetime import datetime, timedelta, timezone
from typing import List, Optional

import pytest
from fastapi.testclient import TestClient

from storefront_fx.core.config import Settings
from storefront_fx.db.dal import Database
from storefront_fx.db.schema import init_db
from storefront_fx.main import create_app
from storefront_fx.models.rates import FetchResult
from storefront_fx.routers.deps import get_clock, get_remote_client
from storefront_fx.services.rates.providers import to_epoch_ms

ADMIN_TOKEN = "test-admin-token"
ADMIN_HEADERS = {"Authorization": f"Bearer {ADMIN_TOKEN}"}


class FixedClock:
    """Callable clock the tests can move forward."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


class FakeRemote:
    """Remote client double; answers with queued results, recording every call."""

    def __init__(self, clock: FixedClock, results: Optional[List[FetchResult]] = None):
        self._clock = clock
        self.results = list(results or [])
        self.calls = 0

    def succeed_with(self, rate: float) -> None:
        self.results.append(
            FetchResult(rate=rate, timestamp=to_epoch_ms(self._clock()), success=True)
        )

    def fail_with(self, error: str = "API request failed: 500 Internal Server Error") -> None:
        self.results.append(
            FetchResult(rate=18.89, timestamp=to_epoch_ms(self._clock()), success=False, error=error)
        )

    def fetch_exchange_rate(self) -> FetchResult:
        self.calls += 1
        if not self.results:
            raise AssertionError("unexpected remote exchange rate call")
        return self.results.pop(0)


class FakeManualSource:
    def __init__(self, rate: Optional[float] = None):
        self.rate = rate

    def get_manual_rate(self) -> Optional[float]:
        return self.rate


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def remote(clock) -> FakeRemote:
    return FakeRemote(clock)


@pytest.fixture
def settings(tmp_path) -> Settings:
    s = Settings(
        data_dir=tmp_path,
        db_path=tmp_path / "test.sqlite3",
        exchange_api_key="test-key",
        admin_api_token=ADMIN_TOKEN,
    )
    s.init_post_load()
    return s


@pytest.fixture
def db(settings) -> Database:
    init_db(settings.db_path)
    return Database(settings.db_path)


@pytest.fixture
def client(settings, clock, remote):
    app = create_app(settings_override=settings)
    app.dependency_overrides[get_clock] = lambda: clock
    app.dependency_overrides[get_remote_client] = lambda: remote
    with TestClient(app) as c:
        yield c
