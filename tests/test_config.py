import pytest
from pydantic import ValidationError

from iara_relay.core.config import Settings

CREDENTIAL_VARS = (
    "TWILIO_ACCOUNT_SID",
    "TWILIO_AUTH_TOKEN",
    "INAT_TOKEN",
    "OPENAI_API_KEY",
    "HIGH_CONFIDENCE",
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in CREDENTIAL_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults_without_credentials(clean_env):
    settings = Settings(_env_file=None)

    assert settings.high_confidence == 0.85
    assert settings.inat_token is None
    assert settings.openai_api_key is None
    assert settings.twilio_auth is None
    assert settings.locale == "pt-BR"


def test_threshold_read_from_environment(clean_env):
    clean_env.setenv("HIGH_CONFIDENCE", "0.6")
    assert Settings(_env_file=None).high_confidence == 0.6


@pytest.mark.parametrize("value", ["1.5", "-0.1", "high"])
def test_threshold_outside_unit_interval_is_rejected(clean_env, value):
    clean_env.setenv("HIGH_CONFIDENCE", value)
    with pytest.raises(ValidationError):
        Settings(_env_file=None)


@pytest.mark.parametrize("value", [0.0, 1.0])
def test_threshold_bounds_are_inclusive(clean_env, value):
    assert Settings(_env_file=None, high_confidence=value).high_confidence == value


@pytest.mark.parametrize(
    "sid, token, expected",
    [
        ("AC1", "secret", ("AC1", "secret")),
        ("AC1", None, None),
        (None, "secret", None),
        ("", "secret", None),
    ],
)
def test_twilio_auth_needs_both_values(clean_env, sid, token, expected):
    settings = Settings(_env_file=None, twilio_account_sid=sid, twilio_auth_token=token)
    assert settings.twilio_auth == expected


def test_settings_are_immutable(clean_env):
    settings = Settings(_env_file=None)
    with pytest.raises(ValidationError):
        settings.high_confidence = 0.1
