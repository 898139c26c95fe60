"""Tests for configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from simplefetch.settings import load_config
from simplefetch.settings.loader import CONFIG_ENV_VAR


def test_defaults_without_config_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)

    config = load_config()

    assert config.source is None
    assert config.http.user_agent == "SimpleFetch/1.0"
    assert config.http.max_redirects == 5
    assert config.http.timeout is None
    assert config.http.verify_tls is True
    assert config.paths.cache_dir == tmp_path / "cache"
    assert config.paths.cache_dir.is_dir()
    assert config.paths.request_log == tmp_path / "simplefetch.log"
    assert config.paths.metrics_log == tmp_path / "metrics.log"
    assert config.logging.max_log_size == 10240
    assert config.dispatch.max_workers is None
    assert config.metrics.low_memory_mb == 50


def test_values_from_toml(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    config_file = tmp_path / "custom.toml"
    config_file.write_text(
        """
[http]
user_agent = "probe/0.1"
max_redirects = 2
timeout = 7.5
verify_tls = false

[paths]
cache_dir = "state/cache"
request_log = "logs/requests.log"

[logging]
max_log_size = 2048
debug = true

[dispatch]
max_workers = 4
""",
        encoding="utf-8",
    )

    config = load_config(config_file)

    assert config.source == config_file
    assert config.http.user_agent == "probe/0.1"
    assert config.http.max_redirects == 2
    assert config.http.timeout == 7.5
    assert config.http.verify_tls is False
    assert config.paths.cache_dir == tmp_path / "state" / "cache"
    assert config.paths.request_log.parent.is_dir()
    assert config.logging.max_log_size == 2048
    assert config.logging.debug is True
    assert config.dispatch.max_workers == 4


def test_zero_timeout_means_none(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / "simplefetch.toml").write_text("[http]\ntimeout = 0\n", encoding="utf-8")
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)

    config = load_config()

    assert config.source == tmp_path / "simplefetch.toml"
    assert config.http.timeout is None


def test_env_var_selects_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    target = tmp_path / "env.toml"
    target.write_text("[http]\nmax_redirects = 9\n", encoding="utf-8")
    monkeypatch.setenv(CONFIG_ENV_VAR, str(target))

    assert load_config().http.max_redirects == 9


def test_explicit_missing_file_raises(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    with pytest.raises(FileNotFoundError):
        load_config("missing.toml")


def test_negative_redirect_cap_rejected(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    config_file = tmp_path / "bad.toml"
    config_file.write_text("[http]\nmax_redirects = -1\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(config_file)
