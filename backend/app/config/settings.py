"""Application configuration models and utilities."""

from functools import lru_cache

from pydantic import Field, HttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables."""

    supabase_url: HttpUrl = Field(..., alias="SUPABASE_URL")
    supabase_key: str = Field(..., alias="SUPABASE_KEY")
    use_mock_data: bool = Field(default=False, alias="USE_MOCK_DATA")
    app_name: str = Field(default="Wandercraft Back Office", alias="APP_NAME")
    public_site_url: HttpUrl = Field(
        default="http://localhost:8501", alias="PUBLIC_SITE_URL"
    )
    comment_author: str = Field(default="Current User", alias="COMMENT_AUTHOR")

    model_config = SettingsConfigDict(
        env_file=(".env.local", ".env"), env_file_encoding="utf-8", extra="ignore"
    )

    def trip_url(self, trip_id: str) -> str:
        """Build the public detail URL for a published trip."""
        return f"{str(self.public_site_url).rstrip('/')}/trip/{trip_id}"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached app settings instance."""
    return Settings()
