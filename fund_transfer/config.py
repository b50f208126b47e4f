"""
Configuration Management Module

Provides centralized configuration using pydantic-settings for environment-based configuration.
"""

from decimal import Decimal
from typing import List, Optional

from pydantic_settings import BaseSettings


class TransferConfig(BaseSettings):
    """Fund transfer simulator configuration"""

    # Transfer limits (PHP)
    min_amount: Decimal = Decimal("100")
    max_amount: Decimal = Decimal("50000")

    # External accounts accepted as transfer destinations
    valid_external_accounts: List[str] = [
        "1234567890",
        "9876543210",
        "5678901234",
        "7777888899",
    ]

    # Notification configuration
    user_email: str = "testuser@example.com"
    notification_subject: str = "Fund Transfer Confirmation"

    # API configuration
    api_host: str = "0.0.0.0"
    api_port: int = 8090

    # Logging configuration
    log_level: str = "INFO"
    log_format: str = "json"  # json or text
    log_file: Optional[str] = None  # If None, logs to stdout

    # Feature flags
    enable_event_logging: bool = True

    class Config:
        env_prefix = "FUNDTRANSFER_"
        env_file = ".env"
        case_sensitive = False


# Configuration loaded from the environment at import time
config = TransferConfig()


def get_config() -> TransferConfig:
    """Get global configuration instance"""
    return config


def reload_config() -> TransferConfig:
    """Reload configuration from environment"""
    global config
    config = TransferConfig()
    return config
