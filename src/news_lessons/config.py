from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    newsdata_api_key: str | None = None
    google_api_key: str | None = None

    lesson_model_name: str = "gemini-1.5-flash"
    lesson_max_output_tokens: int = 3000
    lesson_json_mode: bool = True

    news_page_size: int = 5
    news_cache_ttl_seconds: float = 60 * 60
    lesson_cache_ttl_seconds: float = 24 * 60 * 60
    cache_max_entries: int = 256
    http_timeout_seconds: float = 10.0

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


settings = Settings()
