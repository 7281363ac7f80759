# tests/test_app.py
from __future__ import annotations

from pathlib import Path

from fastapi.testclient import TestClient

from monitor.inventory.core.config import Settings
from monitor.inventory.main import create_app


def test_health_endpoint(tmp_path: Path, monkeypatch):
    monkeypatch.delenv("DEFAULT_ENTRYPOINT", raising=False)
    settings = Settings(endpoints_config_paths=[str(tmp_path / "none.yaml")], log_json=False)

    with TestClient(create_app(settings=settings)) as client:
        r = client.get("/health")

    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_endpoints_loaded_from_yaml(tmp_path: Path, monkeypatch):
    monkeypatch.delenv("DEFAULT_ENTRYPOINT", raising=False)
    config_file = tmp_path / "endpoints.yaml"
    config_file.write_text(
        """
endpoints:
  prod:
    entrypoint: "http://prod:8080"
    tenant: hawkular
""",
        encoding="utf-8",
    )
    settings = Settings(endpoints_config_paths=[str(config_file)], log_json=False)

    client = TestClient(create_app(settings=settings))

    assert client.get("/endpoints").json() == ["prod"]


def test_default_endpoint_from_settings(tmp_path: Path):
    settings = Settings(
        endpoints_config_paths=[str(tmp_path / "none.yaml")],
        default_entrypoint="http://fallback:8080",
        default_tenant="hawkular",
    )

    client = TestClient(create_app(settings=settings))

    assert client.get("/endpoints").json() == ["default"]
