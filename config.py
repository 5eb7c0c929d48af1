from enum import Enum

from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from domain.errors import ConfigError


class Env(Enum):
    local = "local"
    dev = "dev"
    prod = "prod"


class Config(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    env: Env = Env.prod

    menu_url: str
    slack_webhook_url: str
    slack_token: str
    openai_token: str

    slack_channel_id: str = "C09CCHSJ98C"
    core_model: str = "gpt-4.1"
    image_model: str = "dall-e-3"
    image_size: str = "1024x1024"
    image_filename: str = "todays-lunch.png"
    image_title: str = "Today’s lunch image"
    menu_selector: str = "div.block div.divider"

    http_timeout: float = 60
    menu_timeout: float = 20
    upload_attempts: int = 3
    upload_backoff: float = 0.5

    describe: bool = True
    generate_image: bool = True
    thread_replies: bool = True
    use_webhook: bool = False

    @field_validator("menu_url", "slack_webhook_url", "slack_token", "openai_token")
    @classmethod
    def not_empty(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value.strip()

    @field_validator("upload_attempts")
    @classmethod
    def at_least_one(cls, value: int) -> int:
        if value < 1:
            raise ValueError("must be at least 1")
        return value


def load_config(**overrides: object) -> Config:
    try:
        return Config(**overrides)  # pyright: ignore[reportArgumentType]
    except ValidationError as exc:
        fields = ", ".join(
            str(err["loc"][0]).upper() for err in exc.errors() if err["loc"]
        )
        raise ConfigError(f"Missing or invalid configuration: {fields}") from exc
