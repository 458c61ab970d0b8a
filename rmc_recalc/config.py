"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = "sqlite:///./rmc_recalc.db"

    # External Services
    rate_api_base: str = "https://api.bcb.gov.br"
    rate_series_code: int = 25467  # SGS series with the monthly average rate

    # Service
    service_name: str = "rmc-recalc"
    log_level: str = "INFO"

    # HTTP Client
    http_timeout_seconds: float = 5.0

    # Text extraction
    ocr_language: str = "por"
    ocr_resolution: int = 300
    max_upload_bytes: int = 20 * 1024 * 1024


settings = Settings()
