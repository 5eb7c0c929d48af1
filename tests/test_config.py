import pytest

from config import Env, load_config
from domain.errors import ConfigError


REQUIRED = {
    "MENU_URL": "https://kantine.example/speiseplan",
    "SLACK_WEBHOOK_URL": "https://hooks.slack.example/x",
    "SLACK_TOKEN": "xoxb-test",
    "OPENAI_TOKEN": "sk-test",
}


@pytest.fixture
def env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    monkeypatch.chdir("/")
    for key, value in REQUIRED.items():
        monkeypatch.setenv(key, value)
    return monkeypatch


def test_load_config_from_env(env: pytest.MonkeyPatch) -> None:
    env.setenv("GENERATE_IMAGE", "false")
    env.setenv("UPLOAD_ATTEMPTS", "2")
    config = load_config()

    assert config.menu_url == REQUIRED["MENU_URL"]
    assert config.slack_token == "xoxb-test"
    assert config.generate_image is False
    assert config.upload_attempts == 2
    assert config.describe is True
    assert config.env == Env.prod


@pytest.mark.parametrize("missing", sorted(REQUIRED))
def test_missing_required_value(env: pytest.MonkeyPatch, missing: str) -> None:
    env.delenv(missing)
    with pytest.raises(ConfigError, match=missing):
        load_config()


def test_blank_required_value(env: pytest.MonkeyPatch) -> None:
    env.setenv("OPENAI_TOKEN", "   ")
    with pytest.raises(ConfigError, match="OPENAI_TOKEN"):
        load_config()


def test_upload_attempts_must_be_positive(env: pytest.MonkeyPatch) -> None:
    env.setenv("UPLOAD_ATTEMPTS", "0")
    with pytest.raises(ConfigError):
        load_config()
