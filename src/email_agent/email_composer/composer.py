"""
Draft Composer

Generates outreach drafts through the hosted language model with bounded
retries. Rate-limit and quota failures are retried with exponential backoff
and, once the attempts are exhausted, replaced by a fixed fallback email.
Every draft, generated or not, leaves through the reflow formatter so all
paths share the same layout.
"""

import asyncio
from typing import Any, Awaitable, Callable, List, Optional

from .formatter import reflow
from .profile import UserProfile
from .prompts import (
    DEFAULT_RECIPIENT,
    apply_custom_template,
    build_generation_prompt,
    extract_prompt_field
)
from ..ai_processing.llm_manager import LLMResponse, ProviderErrorKind, classify_provider_error
from ..config import ComposerConfig, get_composer_config
from ..document_manager.spreadsheet import CompanyRow
from ..utils import get_email_logger

logger = get_email_logger()

SleepFunc = Callable[[float], Awaitable[Any]]

class GenerationError(Exception):
    """A generation failure that retrying will not fix."""

    def __init__(self, kind: ProviderErrorKind, message: str):
        super().__init__(message)
        self.kind = kind

class ProfileIncompleteError(ValueError):
    """The sender profile lacks fields required before any network call."""

    def __init__(self, missing: List[str]):
        super().__init__("; ".join(missing))
        self.missing = missing

FALLBACK_TEMPLATE = """Subject: Contribution to {company} as a {position}

Dear {recipient},

I'm interested in the {position} position at {company}.

My experience in {reason} aligns well with your team's needs.

Resume attached - looking forward to connecting.

Best regards,
{sender}

{contact_info}"""

def build_fallback_email(prompt: str, profile: Optional[UserProfile] = None) -> str:
    """Fixed draft used when the provider stays rate limited."""
    purpose = profile.email_purpose if profile else None

    draft = FALLBACK_TEMPLATE.format(
        company=extract_prompt_field(prompt, "Company Name") or "your company",
        recipient=extract_prompt_field(prompt, "Recipient Name") or DEFAULT_RECIPIENT,
        sender=(profile.name if profile and profile.name else "[Your Name]"),
        position=(purpose.position if purpose and purpose.position else "[Position]"),
        reason=(purpose.reason if purpose and purpose.reason else "my field"),
        contact_info=profile.contact_block() if profile else ""
    )
    return reflow(draft)

class DraftComposer:
    """Runs the generation call with retry, backoff and fallback."""

    def __init__(self, llm_manager, config: Optional[ComposerConfig] = None, sleep: Optional[SleepFunc] = None):
        """
        Args:
            llm_manager: Anything with an async ``generate_text(prompt) -> LLMResponse``
            config: Retry policy; defaults to the application configuration
            sleep: Awaitable used for backoff waits
        """
        self.llm_manager = llm_manager
        self.config = config or get_composer_config()
        self._sleep = sleep or asyncio.sleep

    def backoff_seconds(self, attempt: int) -> float:
        """Wait after a failed 1-based ``attempt``."""
        return (2 ** attempt) * self.config.backoff_base_seconds

    async def compose(self, prompt: str, profile: Optional[UserProfile] = None, max_attempts: Optional[int] = None) -> str:
        """
        Generate a formatted draft for ``prompt``.

        Raises:
            GenerationError: on non-transient provider failures or an empty reply.
                Rate limiting never raises; the fallback draft is returned instead.
        """
        attempts = max_attempts if max_attempts is not None else self.config.max_attempts
        if attempts < 1:
            raise ValueError("max_attempts must be at least 1")

        for attempt in range(1, attempts + 1):
            logger.info(f"Attempt {attempt} to generate email")
            response: LLMResponse = await self.llm_manager.generate_text(prompt)

            if response.success:
                draft = reflow(response.content or "")
                if not draft:
                    raise GenerationError(ProviderErrorKind.UNAVAILABLE, "The model returned an empty draft")
                logger.info(f"Successfully generated email on attempt {attempt}")
                return draft

            kind = response.error_kind or classify_provider_error(None, response.error or "")
            logger.warning(f"Attempt {attempt} failed ({kind.value}): {response.error}")

            if not kind.is_transient:
                raise GenerationError(kind, response.error or "Generation failed")

            if attempt == attempts:
                logger.warning("Quota exceeded, using fallback template")
                return build_fallback_email(prompt, profile)

            wait = self.backoff_seconds(attempt)
            logger.info(f"Waiting {wait:.1f}s before retry")
            await self._sleep(wait)

class EmailDrafter:
    """Produces the final draft for one company, with or without a custom template."""

    def __init__(self, composer: DraftComposer):
        self.composer = composer

    async def draft(
        self,
        company: CompanyRow,
        profile: UserProfile,
        resume_text: str,
        custom_template: Optional[str] = None
    ) -> str:
        missing = profile.missing_fields(require_contact=False)
        if missing:
            raise ProfileIncompleteError(missing)

        if custom_template and custom_template.strip():
            logger.info(f"Using custom template for {company.company_name}")
            return reflow(apply_custom_template(custom_template, profile, company))

        prompt = build_generation_prompt(profile, company, resume_text)
        return await self.composer.compose(prompt, profile)
