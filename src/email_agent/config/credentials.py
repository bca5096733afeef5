"""
Holder for the generation API key.

A key entered by the user at runtime takes precedence over the one read from
the environment. Each HTTP app and each dashboard session owns its own store.
"""

from typing import Optional
import logging

from .settings import LLMConfig, mask_secret

logger = logging.getLogger(__name__)

class ApiKeyStore:
    """Explicit, injectable store for the provider API key."""

    def __init__(self, config: Optional[LLMConfig] = None, api_key: Optional[str] = None):
        self.config = config
        self._api_key = api_key or None

    def set(self, api_key: str) -> None:
        """Store a key supplied by the user."""
        api_key = (api_key or "").strip()
        if not api_key:
            raise ValueError("API key is required")
        self._api_key = api_key
        logger.info("Generation API key updated")

    def clear(self) -> None:
        """Forget the user supplied key."""
        self._api_key = None

    def get(self) -> Optional[str]:
        """Return the stored key, falling back to the configured one."""
        if self._api_key:
            return self._api_key
        if self.config is not None:
            return self.config.configured_api_key()
        return None

    @property
    def has_key(self) -> bool:
        return bool(self.get())

    @property
    def source(self) -> Optional[str]:
        """Where the active key comes from: 'user', 'environment' or None."""
        if self._api_key:
            return "user"
        if self.config is not None and self.config.configured_api_key():
            return "environment"
        return None

    def masked(self) -> Optional[str]:
        key = self.get()
        return mask_secret(key) if key else None
