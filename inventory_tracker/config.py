"""Application configuration using pydantic-settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Database
    database_url: str = "sqlite:///inventory.db"

    # Persisted product collection
    storage_key: str = "@inventory_products_v1"

    # Inventory policy
    default_category: str = "Outros"
    near_expiry_days: int = 7  # days
    currency_symbol: str = "R$"

    # Application
    debug: bool = False
    log_level: str = "INFO"
    api_host: str = "127.0.0.1"
    api_port: int = 8000


settings = Settings()
