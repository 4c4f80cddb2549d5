import importlib

import pytest

from daycare_membership.config import get_settings_module


@pytest.mark.parametrize(
    "env,expected",
    [
        ("production", "daycare_membership.config.production"),
        ("PROD", "daycare_membership.config.production"),
        ("test", "daycare_membership.config.testing"),
        ("anything", "daycare_membership.config.development"),
    ],
)
def test_settings_module_follows_app_env(monkeypatch, env, expected):
    monkeypatch.setenv("APP_ENV", env)
    assert get_settings_module() == expected


def test_testing_settings(monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    settings = importlib.import_module(get_settings_module())

    assert settings.TESTING is True
    assert settings.BLOCK_CHECKIN_WITHOUT_HOURS is False
    assert settings.MAX_PROOF_BYTES == 5 * 1024 * 1024
