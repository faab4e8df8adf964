from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "Iara WhatsApp Relay"
    app_env: str = "development"
    app_version: str = "1.0.0"
    port: int = 3000
    log_level: str = "INFO"

    # Twilio media URLs need basic auth; without credentials the download is anonymous
    twilio_account_sid: str | None = None
    twilio_auth_token: str | None = None

    # iNaturalist token is optional for scoring but required to create observations
    inat_token: str | None = None
    inat_base: str = "https://api.inaturalist.org/v1"
    inat_web_base: str = "https://www.inaturalist.org"
    recognition_timeout: float = 30.0

    # Optional OpenAI key for the Iara persona; the literal text is used without it
    openai_api_key: str | None = None
    openai_model: str = "gpt-4o-mini"
    style_timeout: float = 25.0

    high_confidence: float = Field(0.85, ge=0.0, le=1.0)
    tmp_dir: Path = Path("tmp")
    locale: str = "pt-BR"
    default_timezone: str = "America/Sao_Paulo"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"
        frozen = True

    @property
    def twilio_auth(self) -> tuple[str, str] | None:
        if self.twilio_account_sid and self.twilio_auth_token:
            return self.twilio_account_sid, self.twilio_auth_token
        return None


@lru_cache
def get_settings() -> Settings:
    return Settings()
