# tests/core/test_config_loader.py
from __future__ import annotations

import os
from pathlib import Path

import pytest

from monitor.inventory.core.loader import import_attr, load_yaml_files, substitute_env_vars


class TestImportAttr:
    def test_import_valid_path(self):
        assert import_attr("os.path:join") is os.path.join

    def test_import_invalid_format_no_colon(self):
        with pytest.raises(ValueError, match="expected 'module:attr'"):
            import_attr("os.path.join")

    def test_import_nonexistent_module(self):
        with pytest.raises(ImportError):
            import_attr("nonexistent.module:attr")

    def test_import_nonexistent_attr(self):
        with pytest.raises(AttributeError):
            import_attr("os.path:nonexistent_function")


class TestSubstituteEnvVars:
    def test_simple_var(self, monkeypatch):
        monkeypatch.setenv("INV_TEST_VAR", "hello")
        assert substitute_env_vars("${INV_TEST_VAR}") == "hello"

    def test_default_used_when_unset(self, monkeypatch):
        monkeypatch.delenv("INV_TEST_VAR", raising=False)
        assert substitute_env_vars("${INV_TEST_VAR:-fallback}") == "fallback"

    def test_env_wins_over_default(self, monkeypatch):
        monkeypatch.setenv("INV_TEST_VAR", "set")
        assert substitute_env_vars("${INV_TEST_VAR:-fallback}") == "set"

    def test_empty_default(self, monkeypatch):
        monkeypatch.delenv("INV_TEST_VAR", raising=False)
        assert substitute_env_vars("x${INV_TEST_VAR:-}y") == "xy"

    def test_missing_var_raises(self, monkeypatch):
        monkeypatch.delenv("INV_TEST_VAR", raising=False)
        with pytest.raises(ValueError, match="INV_TEST_VAR"):
            substitute_env_vars("${INV_TEST_VAR}")

    def test_nested(self, monkeypatch):
        monkeypatch.setenv("INV_TEST_VAR", "v")
        result = substitute_env_vars({"a": ["${INV_TEST_VAR}", 1], "b": {"c": "${INV_TEST_VAR}"}})
        assert result == {"a": ["v", 1], "b": {"c": "v"}}


class TestLoadYamlFiles:
    def test_sorted_and_parsed(self, tmp_path: Path):
        (tmp_path / "b.yaml").write_text("name: b\n", encoding="utf-8")
        (tmp_path / "a.yaml").write_text("name: a\n", encoding="utf-8")
        (tmp_path / "empty.yaml").write_text("", encoding="utf-8")

        result = load_yaml_files([str(tmp_path / "*.yaml")])

        assert result == [{"name": "a"}, {"name": "b"}, {}]

    def test_same_file_loaded_once(self, tmp_path: Path):
        (tmp_path / "a.yaml").write_text("name: a\n", encoding="utf-8")
        pattern = str(tmp_path / "a.yaml")

        assert load_yaml_files([pattern, pattern]) == [{"name": "a"}]

    def test_no_match(self, tmp_path: Path):
        assert load_yaml_files([str(tmp_path / "*.yaml")]) == []
