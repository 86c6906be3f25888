from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="MODELSCOPES_",
        case_sensitive=True,
        extra="ignore",
    )

    APP_CHARSET: str = "UTF-8"

    # Fuzzy filters ignore string values shorter than this
    FILTER_MIN_LENGTH: int = 2
    DEFAULT_SORT_ATTRIBUTE: str = "id"

    DB_TABLE_PREFIX: str = ""
    DRIVER_CACHE_TTL_SECONDS: int = 60
    DRIVER_CACHE_KEY_PREFIX: str = "db-driver-"

    # Empty means the driver-name cache stays in process memory
    REDIS_URL: str = ""

settings = Settings()
