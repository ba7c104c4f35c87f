"""Configuration resolution: precedence, validation, scoping."""

from __future__ import annotations

import os
import threading

import pytest

from resultflow import (
    ConfigurationError,
    FrozenConfig,
    config_scope,
    get_config,
    reset_config,
    resolve_config,
)
import resultflow.config as config_module

pytestmark = pytest.mark.unit


class TestResolution:
    def test_defaults(self) -> None:
        assert resolve_config() == FrozenConfig(strict_chaining=True, log_dispatch=False)

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("0", False), ("false", False), ("no", False), ("1", True), ("true", True)],
    )
    def test_env_values_are_coerced(self, monkeypatch, raw, expected) -> None:
        monkeypatch.setenv("RESULTFLOW_STRICT_CHAINING", raw)

        assert resolve_config().strict_chaining is expected

    def test_overrides_beat_env(self, monkeypatch) -> None:
        monkeypatch.setenv("RESULTFLOW_LOG_DISPATCH", "1")

        assert resolve_config({"log_dispatch": False}).log_dispatch is False

    def test_unrelated_env_is_ignored(self, monkeypatch) -> None:
        monkeypatch.setenv("RESULTFLOW_SOMETHING_ELSE", "1")

        assert resolve_config() == FrozenConfig()

    def test_invalid_env_value(self, monkeypatch) -> None:
        monkeypatch.setenv("RESULTFLOW_LOG_DISPATCH", "maybe")

        with pytest.raises(ConfigurationError) as exc:
            resolve_config()

        assert "log_dispatch" in str(exc.value)
        assert "RESULTFLOW_LOG_DISPATCH" in (exc.value.hint or "")

    def test_unknown_override_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="strict_chainig"):
            resolve_config({"strict_chainig": False})

    def test_frozen(self) -> None:
        cfg = resolve_config()

        with pytest.raises(AttributeError):
            cfg.strict_chaining = False  # type: ignore[misc]


class TestDotenv:
    @pytest.mark.allow_dotenv
    def test_dotenv_file_is_loaded_once(self, monkeypatch, tmp_path) -> None:
        (tmp_path / ".env").write_text("RESULTFLOW_LOG_DISPATCH=1\n")
        calls: list[bool] = []
        real_load = config_module.load_dotenv

        def tracking_load(*args, **kwargs):
            calls.append(True)
            return real_load(dotenv_path=tmp_path / ".env", override=False)

        monkeypatch.setattr(config_module, "load_dotenv", tracking_load)
        try:
            assert resolve_config().log_dispatch is True
            resolve_config()
        finally:
            os.environ.pop("RESULTFLOW_LOG_DISPATCH", None)

        assert calls == [True]


class TestCachingAndScopes:
    def test_get_config_is_cached(self, monkeypatch) -> None:
        first = get_config()
        monkeypatch.setenv("RESULTFLOW_STRICT_CHAINING", "0")

        assert get_config() is first

        reset_config()
        assert get_config().strict_chaining is False

    def test_scope_overrides_and_restores(self) -> None:
        with config_scope(strict_chaining=False) as cfg:
            assert get_config() is cfg
            assert cfg.strict_chaining is False
            with config_scope({"log_dispatch": True}) as inner:
                assert get_config() is inner
            assert get_config() is cfg

        assert get_config().strict_chaining is True

    def test_scope_accepts_frozen_config(self) -> None:
        cfg = FrozenConfig(strict_chaining=False, log_dispatch=True)

        with config_scope(cfg) as active:
            assert active is cfg

    def test_scope_restored_after_exception(self) -> None:
        with pytest.raises(RuntimeError), config_scope(strict_chaining=False):
            raise RuntimeError("boom")

        assert get_config().strict_chaining is True

    def test_scope_is_thread_local(self) -> None:
        seen: list[bool] = []

        def worker() -> None:
            seen.append(get_config().strict_chaining)

        with config_scope(strict_chaining=False):
            t = threading.Thread(target=worker)
            t.start()
            t.join()

        assert seen == [True]
