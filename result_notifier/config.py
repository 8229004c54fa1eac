from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    APP_ENV: str = "development"

    # Fallback for the "webhook" key when the host supplies none
    SLACK_WEBHOOK_URL: str = ""
    SLACK_TIMEOUT: float = 10.0

    # Directory holding the "failed" marker of the previous run
    NOTIFIER_LOG_DIR: str = "tests/_output"


settings = Settings()
