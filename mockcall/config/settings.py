from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    APP_NAME: str = "MockCall"
    APP_ADDRESS: str = "0.0.0.0"
    APP_PORT: int = 8000

    MISTRAL_API_KEY: str = ""
    MISTRAL_MODEL: str = "mistral-large-latest"

    VOICE_WORKFLOW_ID: str = ""
    VOICE_INTERVIEWER_ID: str = "interviewer"

    LOG_DIR: str = "logs"
    LOG_LEVEL: str = "INFO"
    SUCCESS_REDIRECT_DELAY: float = 2.0
    FAILURE_REDIRECT_DELAY: float = 3.0
    LATEST_INTERVIEWS_LIMIT: int = 20

    model_config = SettingsConfigDict(
        env_file=str(Path(__file__).resolve().parents[2] / ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


settings = Settings()
