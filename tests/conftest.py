# tests/conftest.py
from __future__ import annotations

import copy

import pytest

from monitor.inventory.contracts.snapshot import RawSnapshot
from monitor.inventory.core.inventory import InventoryClient
from tests.helpers.fake_store import FakeSnapshotStore
from tests.helpers.snapshots import BLOBS, SERVER1, TAGS


@pytest.fixture
def server_json() -> dict:
    return copy.deepcopy(SERVER1)


@pytest.fixture
def server_snapshot(server_json) -> RawSnapshot:
    return RawSnapshot.from_json(server_json)


@pytest.fixture
def store() -> FakeSnapshotStore:
    return FakeSnapshotStore(blobs=copy.deepcopy(BLOBS), tags=copy.deepcopy(TAGS))


@pytest.fixture
def inventory(store) -> InventoryClient:
    return InventoryClient(store)
