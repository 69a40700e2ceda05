"""
Configuration management for RiskCast API
"""
from typing import List, Optional
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    # API Configuration
    api_title: str = "RiskCast API"
    api_description: str = "Dataset-driven disaster risk scoring for environmental readings"
    api_version: str = "1.0.0"
    debug: bool = False

    # Security Configuration
    api_key: Optional[str] = None
    cors_origins: List[str] = ["http://localhost:3000", "http://localhost:5173"]

    # Storage Configuration
    data_dir: str = "data"
    datasets_file: str = "datasets.json"
    history_file: str = "prediction_history.json"
    history_limit: int = 10
    use_file_storage: bool = True

    # Upload Configuration
    max_upload_bytes: int = 10 * 1024 * 1024  # 10MB
    allowed_extensions: List[str] = [".csv", ".pdf"]

    # Analysis Configuration
    min_dataset_records: int = 10
    min_correlation_points: int = 6
    trend_window: int = 30

    # Live weather feed (simulated)
    openweather_api_key: Optional[str] = None
    live_refresh_seconds: int = 300  # 5 minutes

    # Logging Configuration
    log_level: str = "INFO"
    log_format: str = "json"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="RISKCAST_",
        case_sensitive=False,
    )

    @field_validator('cors_origins', mode='before')
    @classmethod
    def parse_cors_origins(cls, v):
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(',')]
        return v

    @field_validator('allowed_extensions', mode='before')
    @classmethod
    def parse_allowed_extensions(cls, v):
        if isinstance(v, str):
            return [ext.strip().lower() for ext in v.split(',')]
        return v

    @field_validator('debug', 'use_file_storage', mode='before')
    @classmethod
    def parse_bool(cls, v):
        if isinstance(v, str):
            return v.lower() in ('true', '1', 'yes', 'on')
        return v


# Global settings instance
settings = Settings()
