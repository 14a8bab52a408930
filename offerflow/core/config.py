from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    OFFER_STORE: str = "auto"  # "auto", "memory", "json", "backend"
    OFFER_DATA_DIR: str = "./data/offers"

    BACKEND_URL: str | None = None
    BACKEND_API_KEY: str | None = None
    BACKEND_TIMEOUT_SECONDS: float = 10.0

    NOTIFICATIONS_ENABLED: bool = True

    DEFAULT_VAT_RATE: float = 23.0
    CURRENCY: str = "PLN"
    PUBLIC_OFFER_STATUSES: list[str] = ["draft", "sent", "viewed"]

    SESSION_IDLE_SECONDS: float = 1800.0
    MAX_OPEN_SESSIONS: int = 1000


settings = Settings()
