"""Tests for client settings."""

from pathlib import Path

import pytest

from client.config import ClientSettings


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("PROFILES_API_URL", "PROFILES_TIMEOUT", "PROFILES_CACHE_PATH"):
        monkeypatch.delenv(name, raising=False)

    settings = ClientSettings()

    assert settings.api_url == "http://localhost:5000"
    assert settings.timeout == 10.0
    assert settings.cache_path == Path("~/.profile-manager/cache.json").expanduser()


def test_reads_prefixed_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("PROFILES_API_URL", "https://profiles.example.com/")
    monkeypatch.setenv("PROFILES_CACHE_PATH", str(tmp_path / "cache.json"))

    settings = ClientSettings()

    assert settings.api_url == "https://profiles.example.com"
    assert settings.cache_path == tmp_path / "cache.json"
