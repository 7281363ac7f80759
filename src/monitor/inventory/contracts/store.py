# monitor/inventory/contracts/store.py
from abc import ABC, abstractmethod
from typing import Any, Iterable, Mapping


class SnapshotStore(ABC):
    """
    Interface to the remote store holding inventory snapshots.

    Every read returns the most recent stored blob per key, already decoded
    to JSON. Absent keys are left out of mappings, never reported as errors.
    """

    @abstractmethod
    async def get_raw(self, key: str) -> dict[str, Any] | None: ...

    @abstractmethod
    async def get_raw_batch(self, keys: Iterable[str]) -> dict[str, dict[str, Any]]: ...

    @abstractmethod
    async def query_raw(self, tags: Mapping[str, str]) -> dict[str, dict[str, Any]]:
        """Latest blob of every key whose tags match ``tags``."""
        ...

    @abstractmethod
    async def tag_values(self, tags: Mapping[str, str]) -> dict[str, list[str]]:
        """Values taken by the tags in ``tags`` (``"*"`` matches any value)."""
        ...

    @abstractmethod
    async def find_keys(self, tags: Mapping[str, str]) -> dict[str, dict[str, str]]:
        """Keys matching ``tags``, each with its full tag set."""
        ...

    @abstractmethod
    async def fetch_version_and_status(self) -> dict[str, str]: ...
