from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    MAX_MONTHS: int = 600
    AUTOPILOT_PRIORITY: int = 9999
    CORS_ORIGINS: list[str] = ["http://localhost:3000"]
    LOG_LEVEL: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
