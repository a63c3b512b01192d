#!/usr/bin/env python3
"""Logging configuration"""
import logging
import os
from dataclasses import dataclass

PACKAGE_LOGGER = "subscription_testkit"


@dataclass
class LoggingConfig:
    """Logging configuration"""
    log_level: str = "WARNING"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    enable_console: bool = True

    @classmethod
    def from_env(cls) -> 'LoggingConfig':
        """Load logging config from environment variables"""
        return cls(
            log_level=os.getenv("LOG_LEVEL", "WARNING").upper(),
            log_format=os.getenv("LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"),
            enable_console=os.getenv("TESTKIT_LOG_CONSOLE", "true").lower() == "true",
        )


def configure_logging(config: LoggingConfig) -> logging.Logger:
    """Attach a console handler to the package logger (idempotent)"""
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(getattr(logging, config.log_level, logging.WARNING))

    if config.enable_console and not any(
        getattr(h, "_testkit_handler", False) for h in logger.handlers
    ):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(config.log_format))
        handler._testkit_handler = True
        logger.addHandler(handler)

    return logger
