"""
Configuration Management Module

Provides centralized configuration using pydantic-settings for environment-based configuration.
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings


class LedgerConfig(BaseSettings):
    """Payment ledger configuration"""

    # Logging configuration
    log_level: str = "WARNING"
    log_format: str = "json"  # json or text

    # Ledger rules
    strict_transaction_ids: bool = False  # Also reject reused withdrawal ids

    # CSV configuration
    csv_delimiter: str = ","

    class Config:
        env_prefix = "PAYMENT_LEDGER_"
        env_file = ".env"
        case_sensitive = False

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        value = value.upper()
        if value not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {value}")
        return value

    @field_validator("log_format")
    @classmethod
    def _check_log_format(cls, value: str) -> str:
        value = value.lower()
        if value not in ("json", "text"):
            raise ValueError(f"Unknown log format: {value}")
        return value

    @field_validator("csv_delimiter")
    @classmethod
    def _check_delimiter(cls, value: str) -> str:
        if len(value) != 1:
            raise ValueError("CSV delimiter must be a single character")
        return value


# Global configuration instance
config = LedgerConfig()


def get_config() -> LedgerConfig:
    """Get global configuration instance"""
    return config


def reload_config() -> LedgerConfig:
    """Reload configuration from environment"""
    global config
    config = LedgerConfig()
    return config
