from __future__ import annotations

import importlib

import pytest

from config import get_settings_module


@pytest.mark.parametrize(
    "env, expected",
    [
        ("production", "config.production"),
        ("PROD", "config.production"),
        (" testing ", "config.testing"),
        ("dev", "config.development"),
        ("staging", "config.development"),
    ],
)
def test_app_env_picks_settings_module(monkeypatch, env, expected):
    monkeypatch.setenv("APP_ENV", env)

    assert get_settings_module() == expected


def test_testing_settings_never_bootstrap_the_database(monkeypatch):
    monkeypatch.setenv("AUTO_INIT_DB", "1")
    monkeypatch.setenv("APP_ENV", "testing")

    settings = importlib.import_module(get_settings_module())

    assert settings.TESTING is True
    assert settings.AUTO_INIT_DB is False and settings.AUTO_SEED_DB is False
