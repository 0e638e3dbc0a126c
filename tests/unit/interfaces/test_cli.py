"""Tests for the cachefront command line entrypoint."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from cachefront.domain.errors import CacheError, CacheErrorKind
from cachefront.interfaces.cli import cli


@pytest.fixture(autouse=True)
def _no_logging_setup(monkeypatch: pytest.MonkeyPatch) -> MagicMock:
    """Keep global logging untouched while exercising the CLI."""
    configure = MagicMock()
    monkeypatch.setattr(cli, "configure_logging", configure)
    return configure


@pytest.fixture()
def run(tmp_path: Path):
    base = ["--backend", "diskcache", "--cache-dir", str(tmp_path / "cache")]

    def _run(*args: str) -> int:
        return cli.start([*base, *args])

    return _run


class TestCommands:
    def test_set_then_get(self, run, capsys: pytest.CaptureFixture[str]) -> None:
        assert run("set", "greeting", "hello") == 0
        assert run("get", "greeting") == 0
        assert capsys.readouterr().out == "hello\n"

    def test_get_miss_prints_default(self, run, capsys: pytest.CaptureFixture[str]) -> None:
        assert run("get", "absent", "--default", "none") == 0
        assert capsys.readouterr().out == "none\n"

    def test_get_miss_without_default_prints_nothing(
        self, run, capsys: pytest.CaptureFixture[str]
    ) -> None:
        assert run("get", "absent") == 0
        assert capsys.readouterr().out == ""

    def test_has(self, run, capsys: pytest.CaptureFixture[str]) -> None:
        run("set", "k", "v")
        run("has", "k")
        run("has", "other")
        assert capsys.readouterr().out == "true\nfalse\n"

    def test_delete_and_clear(self, run, capsys: pytest.CaptureFixture[str]) -> None:
        run("set", "a", "1")
        run("set", "b", "2")
        assert run("delete", "a") == 0
        assert run("clear") == 0
        run("has", "b")
        assert capsys.readouterr().out == "false\n"

    def test_set_with_ttl(self, run, capsys: pytest.CaptureFixture[str]) -> None:
        assert run("set", "k", "v", "--ttl", "-1") == 0
        run("get", "k")
        assert capsys.readouterr().out == ""


class TestErrors:
    def test_invalid_key_exits_with_1(
        self, run, capsys: pytest.CaptureFixture[str]
    ) -> None:
        assert run("get", "") == 1
        assert capsys.readouterr().err.strip() == (
            "CACHESTATE[32]: Failed to fetch a value from cache ; The given key is empty"
        )

    def test_refused_write_exits_with_1(self, monkeypatch: pytest.MonkeyPatch) -> None:
        manager = MagicMock()
        manager.__enter__.return_value = manager
        manager.__exit__.return_value = False
        manager.cache.set.return_value = False
        monkeypatch.setattr(cli, "build_cache_manager", lambda config: manager)
        assert cli.start(["--backend", "memory", "set", "k", "v"]) == 1
        manager.close.assert_not_called()
        manager.__exit__.assert_called_once()

    def test_cache_error_exits_with_1(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        manager = MagicMock()
        manager.__enter__.return_value = manager
        manager.__exit__.return_value = False
        manager.cache.clear.side_effect = CacheError(
            CacheErrorKind.CLEAR, RuntimeError("down")
        )
        monkeypatch.setattr(cli, "build_cache_manager", lambda config: manager)
        assert cli.start(["--backend", "memory", "clear"]) == 1
        assert "CACHESTATE[256]" in capsys.readouterr().err

    def test_command_is_required(self) -> None:
        with pytest.raises(SystemExit):
            cli.start([])


class TestConfigWiring:
    def test_overrides_reach_config(
        self, monkeypatch: pytest.MonkeyPatch, _no_logging_setup: MagicMock
    ) -> None:
        captured = {}

        def fake_build(config):
            captured["config"] = config
            manager = MagicMock()
            manager.__enter__.return_value = manager
            manager.__exit__.return_value = False
            manager.cache.has.return_value = False
            return manager

        monkeypatch.setattr(cli, "build_cache_manager", fake_build)
        cli.start(
            [
                "--backend",
                "redis",
                "--failure-mode",
                "log",
                "--log-level",
                "DEBUG",
                "--log-format",
                "json",
                "has",
                "k",
            ]
        )
        config = captured["config"]
        assert config.cache.backend == "redis"
        assert config.cache.failure_mode == "log"
        assert config.log_level == "DEBUG"
        assert config.log_format == "json"
        _no_logging_setup.assert_called_once_with(config)
