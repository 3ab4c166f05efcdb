"""Environment-driven configuration for the Elasticsearch provider.

Usage:
    from search_dal.settings import get_settings

    settings = get_settings()
    provider = await ElasticProvider.connect(settings.credentials(), settings.params())

Every field can be set through a `SEARCH_DAL_`-prefixed environment variable
or a `.env` file, e.g. `SEARCH_DAL_HOSTS='["http://es:9200"]'`.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from search_dal.providers.elasticsearch import ElasticCredentials, ElasticParams


class SearchDalSettings(BaseSettings):
    """Connection and pagination settings loaded from the environment."""

    model_config = SettingsConfigDict(
        env_prefix="SEARCH_DAL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Connection
    hosts: list[str] = Field(default_factory=lambda: ["http://localhost:9200"])
    username: str | None = None
    password: str | None = None
    api_key: str | None = None
    request_timeout: float = 30.0
    max_connection_attempts: int = 3
    connection_retry_backoff: int = 10_000

    # Pagination
    index: str | None = None
    cursor_field: str = "_id"
    secondary_cursor_field: str | None = None
    page_size: int = 5000

    # Logging
    log_level: str = "INFO"

    def credentials(self) -> ElasticCredentials:
        return ElasticCredentials(
            hosts=self.hosts,
            username=self.username,
            password=self.password,
            api_key=self.api_key,
            request_timeout=self.request_timeout,
        )

    def params(self) -> ElasticParams:
        return ElasticParams(
            index=self.index,
            cursor_field=self.cursor_field,
            secondary_cursor_field=self.secondary_cursor_field,
            page_size=self.page_size,
            max_connection_attempts=self.max_connection_attempts,
            connection_retry_backoff=self.connection_retry_backoff,
        )


@lru_cache
def get_settings() -> SearchDalSettings:
    """Return the process-wide settings instance."""
    return SearchDalSettings()
