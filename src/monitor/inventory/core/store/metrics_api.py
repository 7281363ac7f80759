# monitor/inventory/core/store/metrics_api.py
"""
Snapshot store backed by the string metrics of the time-series REST API.
"""
from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping
from urllib.parse import quote

import httpx

from monitor.inventory.contracts.store import SnapshotStore
from monitor.inventory.core.errors import SnapshotDecodeError, TransportError
from monitor.inventory.core.store.codec import decode_datapoints

logger = logging.getLogger(__name__)

ENTRYPOINT_SUFFIX = "hawkular/metrics"
TENANT_HEADER = "Hawkular-Tenant"

# Latest snapshot only, searched from the earliest retained datapoint.
LATEST = {"fromEarliest": True, "limit": 1, "order": "DESC"}


def normalize_entrypoint(url: str, suffix: str = ENTRYPOINT_SUFFIX) -> str:
    url = url.rstrip("/")
    if not url.endswith(suffix):
        url = f"{url}/{suffix}"
    return url


def format_tags(tags: Mapping[str, str]) -> str:
    return ",".join(f"{name}:{value}" for name, value in tags.items())


def _decode(key: str, datapoints: Any) -> Any | None:
    # One undecodable blob must not hide the others of a batch
    try:
        return decode_datapoints(datapoints)
    except SnapshotDecodeError as exc:
        logger.warning("Skipping snapshot '%s': %s", key, exc)
        return None


class MetricsStringStore(SnapshotStore):
    """HTTP client for snapshot blobs stored as string metrics.

    Contract::

        GET  /strings/{key}/raw?limit=1&order=DESC&fromEarliest=true
        POST /strings/raw/query   body: { ids | tags, fromEarliest, limit, order }
        GET  /strings/tags/{tags}
        GET  /metrics?type=string&tags={tags}
        GET  /status
    """

    def __init__(
        self,
        *,
        base_url: str,
        tenant: str | None = None,
        username: str | None = None,
        password: str | None = None,
        token: str | None = None,
        timeout: float = 30.0,
        verify_ssl: bool = True,
    ) -> None:
        self._base = normalize_entrypoint(base_url)
        self._tenant = tenant
        self._username = username
        self._password = password
        self._token = token
        self._timeout = timeout
        self._verify_ssl = verify_ssl

    @property
    def base_url(self) -> str:
        return self._base

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._tenant:
            headers[TENANT_HEADER] = self._tenant
        if self._token:
            headers["Authorization"] = (
                self._token if self._token.lower().startswith("bearer") else f"Bearer {self._token}"
            )
        return headers

    def _auth(self) -> httpx.Auth | None:
        if self._username and not self._token:
            return httpx.BasicAuth(self._username, self._password or "")
        return None

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
        allow_missing: bool = False,
    ) -> Any:
        async with httpx.AsyncClient(
            timeout=self._timeout, verify=self._verify_ssl, auth=self._auth()
        ) as client:
            try:
                resp = await client.request(
                    method,
                    f"{self._base}{path}",
                    params=params,
                    json=json,
                    headers=self._headers(),
                )
                if allow_missing and resp.status_code == 404:
                    return None
                resp.raise_for_status()
            except httpx.HTTPStatusError as ex:
                logger.warning(
                    "Request failed %s %s status=%s reason=%s",
                    method,
                    path,
                    ex.response.status_code,
                    ex.response.text,
                )
                raise TransportError(
                    f"{method} {path} failed with status {ex.response.status_code}",
                    status_code=ex.response.status_code,
                ) from ex
            except httpx.HTTPError as ex:
                logger.warning("Request failed %s %s: %s", method, path, ex)
                raise TransportError(f"{method} {path} failed: {ex}") from ex

        # No content means no matching data
        if resp.status_code == 204 or not resp.content:
            return None
        return resp.json()

    async def get_raw(self, key: str) -> dict[str, Any] | None:
        datapoints = await self._request(
            "GET",
            f"/strings/{quote(key, safe='')}/raw",
            params={"limit": 1, "order": "DESC", "fromEarliest": "true"},
            allow_missing=True,
        )
        return _decode(key, datapoints)

    async def get_raw_batch(self, keys: Iterable[str]) -> dict[str, dict[str, Any]]:
        ids = list(keys)
        if not ids:
            return {}
        return await self._raw_query({"ids": ids})

    async def query_raw(self, tags: Mapping[str, str]) -> dict[str, dict[str, Any]]:
        return await self._raw_query({"tags": format_tags(tags)})

    async def _raw_query(self, selector: dict[str, Any]) -> dict[str, dict[str, Any]]:
        series = await self._request("POST", "/strings/raw/query", json={**LATEST, **selector})
        out: dict[str, dict[str, Any]] = {}
        for item in series or []:
            blob = _decode(item["id"], item.get("data"))
            if blob is not None:
                out[item["id"]] = blob
        logger.debug("Raw query %s returned %d snapshot(s)", selector, len(out))
        return out

    async def tag_values(self, tags: Mapping[str, str]) -> dict[str, list[str]]:
        values = await self._request(
            "GET", f"/strings/tags/{quote(format_tags(tags), safe=':,*')}"
        )
        return dict(values or {})

    async def find_keys(self, tags: Mapping[str, str]) -> dict[str, dict[str, str]]:
        definitions = await self._request(
            "GET", "/metrics", params={"type": "string", "tags": format_tags(tags)}
        )
        return {d["id"]: dict(d.get("tags") or {}) for d in definitions or []}

    async def fetch_version_and_status(self) -> dict[str, str]:
        return dict(await self._request("GET", "/status") or {})
