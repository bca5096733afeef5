"""
Configuration management for the Email Agent.

This module handles loading environment variables and application settings
for the generation provider, draft composer, pacing of the bulk loops and
the mail transport.
"""

import os
from typing import Dict, Any, Optional, List
from pathlib import Path
from dotenv import load_dotenv
import logging
from dataclasses import dataclass, asdict

logger = logging.getLogger(__name__)

SUPPORTED_PROVIDERS = ("groq", "openrouter")

@dataclass
class LLMConfig:
    """Configuration for the hosted generation endpoint."""
    provider: str = "groq"
    groq_api_key: Optional[str] = None
    openrouter_api_key: Optional[str] = None
    default_model: str = "llama-3.1-8b-instant"
    temperature: float = 0.7
    max_tokens: int = 1024
    timeout_seconds: float = 60.0

    def configured_api_key(self) -> Optional[str]:
        """Return the environment key for the selected provider."""
        if self.provider == "openrouter":
            return self.openrouter_api_key
        return self.groq_api_key

@dataclass
class ComposerConfig:
    """Retry policy for draft generation."""
    max_attempts: int = 3
    backoff_base_seconds: float = 1.0

@dataclass
class PacingConfig:
    """Fixed delays used by the sequential bulk loops."""
    generation_interval_seconds: float = 1.5
    send_interval_seconds: float = 2.0

@dataclass
class MailConfig:
    """Mail transport defaults."""
    timeout_seconds: float = 30.0
    attachment_filename: str = "resume.pdf"

@dataclass
class ApiConfig:
    """HTTP server settings."""
    host: str = "127.0.0.1"
    port: int = 8000

@dataclass
class AppConfig:
    """Main application configuration."""
    log_level: str = "INFO"
    log_to_file: bool = True
    data_dir: str = "data"

    # Component configurations
    llm: LLMConfig = None
    composer: ComposerConfig = None
    pacing: PacingConfig = None
    mail: MailConfig = None
    api: ApiConfig = None

    def __post_init__(self):
        if self.llm is None:
            self.llm = LLMConfig()
        if self.composer is None:
            self.composer = ComposerConfig()
        if self.pacing is None:
            self.pacing = PacingConfig()
        if self.mail is None:
            self.mail = MailConfig()
        if self.api is None:
            self.api = ApiConfig()

class ConfigManager:
    """Manages application configuration from environment variables and settings."""

    def __init__(self, env_file: Optional[str] = None):
        """Initialize configuration manager."""
        self.env_file = env_file or ".env"
        self.config = AppConfig()
        self.load_config()

    def load_config(self) -> None:
        """Read the .env file, if any, then every section from the environment."""
        if Path(self.env_file).exists():
            load_dotenv(self.env_file)
            logger.info(f"Loaded environment from {self.env_file}")

        self._load_llm(self.config.llm)
        self._load_delivery()

        self.config.log_level = os.getenv("LOG_LEVEL", "INFO")
        self.config.log_to_file = _env_flag("LOG_TO_FILE", True)
        self.config.data_dir = os.getenv("DATA_DIR", "data")

        logger.info(
            f"Configuration loaded (provider={self.config.llm.provider}, "
            f"key configured={bool(self.config.llm.configured_api_key())})"
        )

    def _load_llm(self, llm: LLMConfig) -> None:
        llm.provider = os.getenv("LLM_PROVIDER", "groq").strip().lower()
        llm.groq_api_key = os.getenv("GROQ_API_KEY") or None
        llm.openrouter_api_key = os.getenv("OPENROUTER_API_KEY") or None
        llm.default_model = os.getenv("DEFAULT_LLM_MODEL", "llama-3.1-8b-instant")
        llm.temperature = _env_number("LLM_TEMPERATURE", 0.7)
        llm.max_tokens = int(_env_number("LLM_MAX_TOKENS", 1024))

    def _load_delivery(self) -> None:
        """Composer retries, loop pacing, SMTP and HTTP settings."""
        self.config.composer.max_attempts = int(_env_number("MAX_GENERATION_ATTEMPTS", 3))
        self.config.composer.backoff_base_seconds = _env_number("BACKOFF_BASE_SECONDS", 1.0)
        self.config.pacing.generation_interval_seconds = _env_number("GENERATION_DELAY_SECONDS", 1.5)
        self.config.pacing.send_interval_seconds = _env_number("SEND_DELAY_SECONDS", 2.0)
        self.config.mail.timeout_seconds = _env_number("SMTP_TIMEOUT_SECONDS", 30.0)
        self.config.api.host = os.getenv("API_HOST", "127.0.0.1")
        self.config.api.port = int(_env_number("API_PORT", 8000))

    def get_llm_config(self) -> LLMConfig:
        """Get LLM configuration."""
        return self.config.llm

    def get_composer_config(self) -> ComposerConfig:
        """Get composer configuration."""
        return self.config.composer

    def get_pacing_config(self) -> PacingConfig:
        """Get pacing configuration."""
        return self.config.pacing

    def get_mail_config(self) -> MailConfig:
        """Get mail transport configuration."""
        return self.config.mail

    def get_app_config(self) -> AppConfig:
        """Get full application configuration."""
        return self.config

    def validate_config(self) -> Dict[str, List[str]]:
        """Validate configuration and return any issues."""
        issues = {
            "errors": [],
            "warnings": []
        }

        llm = self.config.llm
        if llm.provider not in SUPPORTED_PROVIDERS:
            issues["warnings"].append(
                f"Unknown LLM_PROVIDER '{llm.provider}' - falling back to groq"
            )

        if not llm.configured_api_key():
            key_name = "OPENROUTER_API_KEY" if llm.provider == "openrouter" else "GROQ_API_KEY"
            issues["errors"].append(
                f"No generation API key configured. Set {key_name} or enter a key in Settings"
            )

        if self.config.composer.max_attempts < 1:
            issues["errors"].append("MAX_GENERATION_ATTEMPTS must be at least 1")

        if self.config.pacing.generation_interval_seconds <= 0:
            issues["warnings"].append("GENERATION_DELAY_SECONDS is zero - bulk generation will not be paced")

        if self.config.pacing.send_interval_seconds <= 0:
            issues["warnings"].append("SEND_DELAY_SECONDS is zero - bulk sending will not be paced")

        return issues

    def mask_sensitive_config(self) -> Dict[str, Any]:
        """Configuration as a dict, API keys masked, for the settings page."""
        config_dict = asdict(self.config)
        llm = config_dict["llm"]
        for key in SECRET_FIELDS:
            if llm.get(key):
                llm[key] = mask_secret(llm[key])
        return config_dict

SECRET_FIELDS = ("groq_api_key", "openrouter_api_key")

def mask_secret(value: str) -> str:
    """Mask a secret for display, keeping at most its first 8 characters."""
    return f"{value[:8]}..." if len(value) > 8 else "***"

def _env_number(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None

def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")

# Global configuration instance
config_manager = ConfigManager()

def get_config() -> AppConfig:
    """Get the global configuration instance."""
    return config_manager.get_app_config()

def get_llm_config() -> LLMConfig:
    """Get LLM configuration."""
    return config_manager.get_llm_config()

def get_composer_config() -> ComposerConfig:
    """Get composer configuration."""
    return config_manager.get_composer_config()

def get_pacing_config() -> PacingConfig:
    """Get pacing configuration."""
    return config_manager.get_pacing_config()

def get_mail_config() -> MailConfig:
    """Get mail transport configuration."""
    return config_manager.get_mail_config()

def validate_config() -> Dict[str, List[str]]:
    """Validate current configuration."""
    return config_manager.validate_config()
