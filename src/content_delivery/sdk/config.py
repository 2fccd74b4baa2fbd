"""
Configuration management for the SDK.
"""

import logging
from dataclasses import dataclass


@dataclass
class SDKConfig:
    """Configuration for SDK operations."""

    debug: bool = False
    log_level: str = "INFO"

    def setup_logging(self) -> None:
        """Configure logging for the SDK."""
        level_name = "DEBUG" if self.debug else self.log_level
        level = getattr(logging, level_name.upper(), logging.INFO)

        logger = logging.getLogger("content_delivery.sdk")
        logger.setLevel(level)

        if not logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            )
            handler.setFormatter(formatter)
            logger.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given module name."""
    return logging.getLogger(f"content_delivery.sdk.{name}")
