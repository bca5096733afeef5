"""
Configuration module for the Email Agent.

This module provides application configuration and credential handling.
"""

from .settings import (
    ConfigManager,
    AppConfig,
    LLMConfig,
    ComposerConfig,
    PacingConfig,
    MailConfig,
    ApiConfig,
    get_config,
    get_llm_config,
    get_composer_config,
    get_pacing_config,
    get_mail_config,
    validate_config,
    mask_secret,
    config_manager
)
from .credentials import ApiKeyStore

__all__ = [
    'ConfigManager',
    'AppConfig',
    'LLMConfig',
    'ComposerConfig',
    'PacingConfig',
    'MailConfig',
    'ApiConfig',
    'ApiKeyStore',
    'get_config',
    'get_llm_config',
    'get_composer_config',
    'get_pacing_config',
    'get_mail_config',
    'validate_config',
    'mask_secret',
    'config_manager'
]
