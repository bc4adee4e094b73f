from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(case_sensitive=True)

    # Server settings
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    # Chat endpoint
    CHAT_PATH: str = "/chat"

    # Pre-built frontend assets, mounted at "/" when the directory exists
    STATIC_DIR: str | None = "frontend/dist"

    CORS_ALLOW_ORIGINS: list[str] = ["*"]

    # Logging settings
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    LOG_FILE_PATH: str | None = None
    LOG_EXCLUDED_PATHS: list[str] = ["/metrics", "/health"]

    # Maximum number of frames waiting to be sent to a single peer
    WS_OUTBOX_MAX_SIZE: int = 256


app_settings = Settings()
