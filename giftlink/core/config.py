from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    APP_ENV: str = "development"
    LOG_LEVEL: str = "INFO"

    DATABASE_URL: str
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 1800

    REQUEST_TIMEOUT_SEC: float = 10.0

    JWT_SECRET_KEY: str = "change-me"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    ADMIN_UI_ORIGINS: str = ""
    LOGIN_RATE_LIMIT_WINDOW_SEC: int = 300
    LOGIN_RATE_LIMIT_MAX_ATTEMPTS: int = 5
    TRUST_PROXY_HEADERS: bool = False
    CLAIM_RATE_LIMIT_WINDOW_SEC: int = 60
    CLAIM_RATE_LIMIT_MAX_ATTEMPTS: int = 10

    PUBLIC_CLAIM_BASE_URL: str = "https://gift.app"
    DEFAULT_SHIPPING_ZONES: str = "United States,Canada,United Kingdom,Australia,Germany"

    ADDRESS_LOOKUP_PROVIDER: str = "static"
    ADDRESS_LOOKUP_BASE_URL: str = "https://maps.googleapis.com/maps/api/place"
    ADDRESS_LOOKUP_API_KEY: str | None = None
    ADDRESS_SEARCH_DEBOUNCE_MS: int = 300
    ADDRESS_SEARCH_MIN_CHARS: int = 3

    DUPLICATE_MATCH_SCOPE: str = "campaign"
    DUPLICATE_MATCH_CASE_INSENSITIVE: bool = True


settings = Settings()
