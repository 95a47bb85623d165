from functools import lru_cache
from pathlib import Path
from typing import Optional
from pydantic import AnyHttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment with defaults.

    Environment variable mapping follows pydantic's rules (e.g., APP_NAME, DEBUG, DATA_DIR,
    EXCHANGE_API_KEY, ADMIN_API_TOKEN).
    """

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Basic app metadata
    app_name: str = "Storefront FX"
    debug: bool = False
    version: str = "0.1.0"

    # Data & persistence
    data_dir: Path = Path("data")
    db_filename: str = "storefront_fx.sqlite3"
    db_path: Optional[Path] = None  # derived if not provided

    # Remote exchange rate API (exchangerate-api.com v6)
    exchange_api_base_url: AnyHttpUrl = "https://v6.exchangerate-api.com/v6"
    exchange_api_key: str = ""
    # Allowed: 'exchangerate-api' (live HTTP), 'static' (fallback constant, no network)
    exchange_rate_provider: str = "exchangerate-api"
    http_timeout_seconds: float = 10.0
    # Each attempt is billed against the monthly quota
    exchange_api_retries: int = 0

    # Rate policy
    rates_cache_ttl_seconds: int = 24 * 60 * 60
    fallback_rate: float = 18.89
    quota_limit: int = 1500

    # Admin session
    admin_api_token: Optional[str] = None

    def init_post_load(self) -> None:
        """Finalize derived fields and ensure directories exist."""
        if self.db_path is None:
            self.db_path = self.data_dir / self.db_filename
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        allowed = {"exchangerate-api", "static"}
        if self.exchange_rate_provider not in allowed:
            raise ValueError(
                f"Unsupported exchange_rate_provider '{self.exchange_rate_provider}'. Allowed: {allowed}"
            )
        if self.rates_cache_ttl_seconds <= 0:
            raise ValueError("rates_cache_ttl_seconds must be positive")
        if self.fallback_rate <= 0:
            raise ValueError("fallback_rate must be positive")
        if self.quota_limit <= 0:
            raise ValueError("quota_limit must be positive")

    @property
    def exchange_api_url(self) -> str:
        base = str(self.exchange_api_base_url).rstrip("/")
        return f"{base}/{self.exchange_api_key}/latest/USD"


@lru_cache
def get_settings() -> Settings:
    settings = Settings()
    settings.init_post_load()
    return settings
