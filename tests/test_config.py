import asyncio

import pytest

from email_agent.ai_processing import LLMManager, LLMResponse, ProviderErrorKind, classify_provider_error
from email_agent.config import ApiKeyStore, ConfigManager, LLMConfig, mask_secret


def test_configured_key_follows_provider():
    config = LLMConfig(provider="openrouter", groq_api_key="gsk_a", openrouter_api_key="sk-or-b")

    assert config.configured_api_key() == "sk-or-b"
    config.provider = "groq"
    assert config.configured_api_key() == "gsk_a"


def test_user_key_overrides_environment_key():
    store = ApiKeyStore(LLMConfig(groq_api_key="gsk_from_env"))
    assert (store.get(), store.source) == ("gsk_from_env", "environment")

    store.set("  gsk_from_user  ")
    assert (store.get(), store.source) == ("gsk_from_user", "user")

    store.clear()
    assert store.source == "environment"


def test_empty_store_has_no_key():
    store = ApiKeyStore(LLMConfig())

    assert not store.has_key
    assert store.source is None
    assert store.masked() is None


def test_blank_key_is_rejected():
    with pytest.raises(ValueError):
        ApiKeyStore().set("   ")


def test_masking_keeps_only_a_prefix():
    assert mask_secret("gsk_1234567890") == "gsk_1234..."
    assert mask_secret("short") == "***"
    assert ApiKeyStore(api_key="gsk_1234567890").masked() == "gsk_1234..."


def test_environment_is_read(monkeypatch, tmp_path):
    monkeypatch.setenv("LLM_PROVIDER", "OpenRouter")
    monkeypatch.setenv("OPENROUTER_API_KEY", "sk-or-secret-key")
    monkeypatch.setenv("MAX_GENERATION_ATTEMPTS", "5")
    monkeypatch.setenv("SEND_DELAY_SECONDS", "0")
    monkeypatch.setenv("DATA_DIR", str(tmp_path / "data"))

    manager = ConfigManager(env_file=str(tmp_path / "missing.env"))

    assert manager.get_llm_config().provider == "openrouter"
    assert manager.get_composer_config().max_attempts == 5
    issues = manager.validate_config()
    assert issues["errors"] == []
    assert any("SEND_DELAY_SECONDS" in warning for warning in issues["warnings"])
    assert manager.mask_sensitive_config()["llm"]["openrouter_api_key"] == "sk-or-se..."


def test_malformed_number_names_the_variable(monkeypatch, tmp_path):
    monkeypatch.setenv("SEND_DELAY_SECONDS", "two")

    with pytest.raises(ValueError, match="SEND_DELAY_SECONDS"):
        ConfigManager(env_file=str(tmp_path / "missing.env"))


@pytest.mark.parametrize("status, message, kind", [
    (429, "Too many requests", ProviderErrorKind.RATE_LIMITED),
    (None, "You exceeded your current quota", ProviderErrorKind.RATE_LIMITED),
    (401, "Unauthorized", ProviderErrorKind.AUTHENTICATION),
    (403, "Forbidden", ProviderErrorKind.AUTHENTICATION),
    (400, "Bad request", ProviderErrorKind.INVALID_REQUEST),
    (500, "Internal error", ProviderErrorKind.UNAVAILABLE),
    (None, "Cannot connect to host", ProviderErrorKind.UNAVAILABLE),
])
def test_provider_errors_are_classified(status, message, kind):
    assert classify_provider_error(status, message) is kind


def test_only_rate_limits_are_transient():
    assert LLMResponse.failure("slow down", status=429).error_kind.is_transient
    assert not LLMResponse.failure("bad key", status=401).error_kind.is_transient


def test_manager_uses_injected_key_store(llm_config):
    store = ApiKeyStore(llm_config)
    manager = LLMManager(llm_config, api_key_store=store)
    assert not manager.has_api_key()
    assert manager.get_available_providers() == []

    store.set("gsk_user_key")

    assert manager.has_api_key()
    assert manager.get_provider_info()["key_source"] == "user"


def test_empty_key_fails_validation_without_a_call(llm_config):
    manager = LLMManager(llm_config, api_key_store=ApiKeyStore(llm_config))

    assert asyncio.run(manager.validate_api_key("")) == (False, "API key is required")
