from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Listing defaults, overridable through ``KESTREL_*`` environment variables."""

    # Pagination
    COUNT_PER_PAGE: int = 50

    # Request argument keys read by Model.all()
    ROWS_COUNT_KEY: str = "rows_count"
    NO_LIMIT_KEY: str = "no_limit"
    COUNT_KEY: str = "count"
    PAGE_KEY: str = "page"
    ORDER_KEY: str = "order"

    # "title|desc,id" -> [("title", "desc"), ("id", "asc")]
    ORDER_DELIMITER: str = ","
    DIRECTION_DELIMITER: str = "|"
    DEFAULT_ORDER_FIELD: str = "id"
    DEFAULT_ORDER_DIRECTION: str = "asc"

    model_config = SettingsConfigDict(
        env_prefix="KESTREL_",
        env_file=".env",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
