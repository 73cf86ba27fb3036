from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


BASE_DIR = Path(__file__).resolve().parents[1]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Server Settings
    host: str = Field(default="127.0.0.1", description="Server host")
    port: int = Field(default=3000, description="Server port")
    log_level: str = Field(default="INFO", description="Logging level")

    # Upstream endpoints
    xrpl_api_base_url: str = Field(
        default="https://api.xrpl.to",
        description="Base URL of the xrpl.to token analytics API",
    )
    logo_base_url: str = Field(
        default="https://s1.xrpl.to",
        description="Base URL of the token logo image host",
    )

    # Timeouts
    logo_timeout_ms: int = Field(default=2000, ge=1, description="Logo fetch timeout in milliseconds")
    request_timeout_seconds: float = Field(default=15.0, gt=0, description="Timeout for catalog and detail requests")

    # Storage
    static_dir: Path = Field(
        default=BASE_DIR / "public",
        description="Directory served as static assets at /",
    )
    logo_store_path: Path = Field(
        default=BASE_DIR / "public" / "logos.json",
        description="JSON document mapping token fingerprints to logo data URIs",
    )

    # Pagination
    default_page_limit: int = Field(default=100, ge=1, description="Page size used when the client sends none")
    max_page_limit: int = Field(default=500, ge=1, description="Largest page size forwarded upstream")
    logo_concurrency: int = Field(default=8, ge=1, description="Concurrent logo resolutions per page")

    # Response cache bounds (0 disables the bound)
    response_cache_max_size: int = Field(default=0, ge=0, description="Maximum response cache entries, 0 for unbounded")
    response_cache_ttl_seconds: int = Field(default=0, ge=0, description="Response cache TTL in seconds, 0 for no expiry")

    @property
    def logo_timeout_seconds(self) -> float:
        return self.logo_timeout_ms / 1000


# Global settings instance
settings = Settings()
