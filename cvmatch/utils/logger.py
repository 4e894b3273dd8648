"""
Logging infrastructure for the cvmatch engine.

Uses Loguru for structured, easy-to-use logging with automatic rotation.
The library never configures sinks on import; entry points call
``setup_logging()``.
"""

import sys
from typing import Any

from loguru import logger

from cvmatch.utils.config import get_settings


def setup_logging() -> None:
    """
    Configure application-wide logging.

    Sets up console and file logging with appropriate formatting,
    rotation, and retention policies.
    """
    settings = get_settings()
    log_settings = settings.logging

    # Remove default handler
    logger.remove()

    # Security: diagnose=False outside development to keep secrets out of tracebacks
    enable_diagnose = settings.debug and settings.environment == "development"

    if log_settings.console_output:
        logger.add(
            sys.stderr,
            format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
            "<level>{message}</level>",
            level=log_settings.level,
            colorize=True,
            backtrace=True,
            diagnose=enable_diagnose,
        )

    if log_settings.file_output:
        log_file = log_settings.file_path
        log_file.parent.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_file,
            format=log_settings.format,
            level=log_settings.level,
            rotation=log_settings.rotation,
            retention=log_settings.retention,
            compression="zip",
            backtrace=True,
            diagnose=enable_diagnose,
            enqueue=True,  # Thread-safe logging
        )

    logger.info(f"Logging initialized - Level: {log_settings.level}")


def get_logger(name: str) -> Any:
    """
    Get a logger instance with the specified name.

    Args:
        name: The name for the logger (typically __name__)

    Returns:
        A configured logger instance
    """
    return logger.bind(name=name)


def sanitize_for_logging(data: Any) -> Any:
    """
    Sanitize data before logging to prevent sensitive information exposure.

    Redacts API keys, tokens, and other sensitive fields.
    """
    if isinstance(data, dict):
        sensitive_keys = {
            "password", "passwd", "pwd", "secret", "token", "api_key",
            "apikey", "auth", "credential", "private_key", "access_token",
        }
        return {
            k: "***REDACTED***"
            if any(s in str(k).lower() for s in sensitive_keys) and v is not None
            else sanitize_for_logging(v)
            for k, v in data.items()
        }
    elif isinstance(data, list):
        return [sanitize_for_logging(item) for item in data]
    return data

