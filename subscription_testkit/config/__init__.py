#!/usr/bin/env python3
"""Configuration for subscription_testkit

Configuration hierarchy:
- testkit_config: backend strategy, factory defaults, job hooks
- logging_config: package logger settings
"""
import os
from dotenv import load_dotenv
from .logging_config import LoggingConfig, configure_logging
from .testkit_config import TestkitConfig, BACKEND_MEMORY, BACKEND_HOST

# Load environment file based on ENV
env = os.getenv("ENV") or os.getenv("ENVIRONMENT", "testing")
env_files = {
    "development": ".env",
    "dev": ".env",
    "testing": ".env.test",
    "test": ".env.test",
}
env_file = os.getenv("TESTKIT_ENV_FILE") or env_files.get(env, ".env.test")
load_dotenv(env_file, override=False)

# Create global settings instance
settings = TestkitConfig.from_env()

def get_settings() -> TestkitConfig:
    """Get global settings instance"""
    return settings

def reload_settings() -> TestkitConfig:
    """Reload settings from environment"""
    global settings
    settings = TestkitConfig.from_env()
    return settings

__all__ = [
    'TestkitConfig',
    'LoggingConfig',
    'configure_logging',
    'get_settings',
    'reload_settings',
    'settings',
    'BACKEND_MEMORY',
    'BACKEND_HOST',
]
