from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # MongoDB
    MONGODB_URL: str = "mongodb://localhost:27017"
    MONGODB_DATABASE: str = "billing"
    MONGODB_TIMEOUT_MS: int = 5000

    # Redis
    REDIS_URL: str = "redis://localhost:6379/0"
    REDIS_TIMEOUT_SECONDS: float = 0.5  # cache reads fall back to MongoDB after this

    # Cache port: "redis" in deployed environments, "memory" for local runs
    CACHE_BACKEND: str = "redis"
    CACHE_TTL_SECONDS: int = 300

    # Order view materialization
    ORDER_VIEW_UPDATE_BATCH_SIZE: int = 200

    # App
    APP_NAME: str = "Billing Repository"
    LOG_LEVEL: str = "INFO"
    DEBUG: bool = False  # Safe default for production; set DEBUG=True in .env for local dev


settings = Settings()
