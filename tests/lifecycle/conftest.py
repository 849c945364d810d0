from datetime import UTC, datetime

import pytest
from lifecycle.carrier.fake_adapter import FakeCarrier
from lifecycle.config import Settings
from lifecycle.domain import Lifecycle, set_lifecycle
from lifecycle.store import SnapshotStore

FIXED_NOW = datetime(2026, 3, 2, 9, 30, tzinfo=UTC)


@pytest.fixture()
def settings():
    return Settings(env="test")


@pytest.fixture()
def carrier():
    return FakeCarrier()


@pytest.fixture()
def store(settings):
    return SnapshotStore(lock_mode=settings.lock_mode)


@pytest.fixture()
def lifecycle(settings, store, carrier):
    lc = Lifecycle(settings=settings, store=store, carrier=carrier, clock=lambda: FIXED_NOW)
    set_lifecycle(lc)
    return lc


@pytest.fixture()
def now():
    return FIXED_NOW
