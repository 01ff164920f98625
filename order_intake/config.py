"""
Configuration for the order intake application.
"""

# Load environment variables FIRST
from dotenv import load_dotenv
load_dotenv()

import os
from typing import Optional
from urllib.parse import urlparse


class Config:
    """Base configuration."""

    # Backend service (extraction, matching, persistence)
    BACKEND_URL: str = os.getenv("BACKEND_URL", "http://localhost:8000")
    REQUEST_TIMEOUT: float = float(os.getenv("REQUEST_TIMEOUT", "30"))

    # File intake
    MAX_UPLOAD_BYTES: int = int(os.getenv("MAX_UPLOAD_BYTES", str(10 * 1024 * 1024)))  # 10 MiB
    PREVIEW_DIR: Optional[str] = os.getenv("PREVIEW_DIR", None)  # None = system temp dir

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    LOG_FILE: str = os.getenv("LOG_FILE", "order_intake.log")

    # UI
    UI_PAGE_TITLE: str = os.getenv("UI_PAGE_TITLE", "Order Intake")

    @classmethod
    def validate(cls) -> None:
        """Validate configuration."""
        parsed = urlparse(cls.BACKEND_URL)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"Invalid BACKEND_URL: {cls.BACKEND_URL}")

        if cls.REQUEST_TIMEOUT <= 0:
            raise ValueError("REQUEST_TIMEOUT must be positive")

        if cls.MAX_UPLOAD_BYTES <= 0:
            raise ValueError("MAX_UPLOAD_BYTES must be positive")


class DevelopmentConfig(Config):
    """Development configuration."""
    LOG_LEVEL = "DEBUG"


class ProductionConfig(Config):
    """Production configuration."""
    LOG_LEVEL = "INFO"


class TestConfig(Config):
    """Test configuration."""
    BACKEND_URL = "http://backend.test"
    REQUEST_TIMEOUT = 5.0
    LOG_LEVEL = "DEBUG"


def get_config(env: str = None) -> Config:
    """Get configuration based on environment."""
    if env is None:
        env = os.getenv("ENV", "development").lower()

    if env == "production":
        config = ProductionConfig()
    elif env == "test":
        config = TestConfig()
    else:
        config = DevelopmentConfig()

    # Validate configuration on creation
    config.validate()
    return config
