"""Shared pytest fixtures for till core tests."""

import itertools
import random
from datetime import datetime, timezone

import pytest

from tpv_core.catalog import default_catalog
from tpv_core.identity import IdGenerator
from tpv_core.persistence import MemoryStore, PersistenceGateway
from tpv_core.session import Session

FIXED_TIME = datetime(2026, 10, 19, 21, 30, tzinfo=timezone.utc)


def fixed_clock() -> datetime:
    return FIXED_TIME


class SequentialIds(IdGenerator):
    """Predictable ids: id-1, id-2, ..."""

    def __init__(self) -> None:
        super().__init__()
        self._counter = itertools.count(1)

    def new_id(self) -> str:
        return f"id-{next(self._counter)}"


@pytest.fixture
def catalog():
    return default_catalog()


@pytest.fixture
def ids():
    return SequentialIds()


@pytest.fixture
def weak_ids():
    return IdGenerator.weak(clock=lambda: 1760909400.0, rng=random.Random(7))


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def gateway(store):
    return PersistenceGateway(store)


@pytest.fixture
def session(gateway, catalog, ids):
    return Session(gateway, catalog=catalog, ids=ids, clock=fixed_clock)
