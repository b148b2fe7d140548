"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = "sqlite:///./domus.db"
    sql_echo: bool = False

    # Service
    service_name: str = "domus-rentals"
    log_level: str = "INFO"

    # Payment status
    nominal_rooms_per_house: int = 4  # Capacity assumed by the legacy occupancy rate
    recency_overdue_months: int = 1  # Months allowed since last payment before the badge turns overdue


settings = Settings()
