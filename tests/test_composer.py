import asyncio

import pytest

from email_agent.ai_processing import LLMResponse, ProviderErrorKind
from email_agent.email_composer import (
    DraftComposer,
    GenerationError,
    ProfileIncompleteError,
    build_fallback_email,
    build_generation_prompt,
    split_subject,
)

from conftest import QUOTA_ERROR, FakeLLMManager


def test_quota_errors_retry_with_backoff_then_fall_back(profile, company, composer_config, recording_sleep):
    llm = FakeLLMManager(QUOTA_ERROR)
    composer = DraftComposer(llm, composer_config, sleep=recording_sleep)
    prompt = build_generation_prompt(profile, company, "resume text")

    draft = asyncio.run(composer.compose(prompt, profile, max_attempts=3))

    assert llm.calls == 3
    assert recording_sleep.waits == [2.0, 4.0]
    assert "Jane Doe" in draft
    assert "Backend Engineer" in draft
    assert "Acme" in draft
    assert "Dear Bob," in draft
    assert "Email: jane@x.com\nPhone: 555-1234" in draft


def test_non_quota_error_propagates_without_retry(profile, composer_config, recording_sleep):
    llm = FakeLLMManager(LLMResponse.failure("groq API error 401: Invalid API Key", status=401))
    composer = DraftComposer(llm, composer_config, sleep=recording_sleep)

    with pytest.raises(GenerationError) as excinfo:
        asyncio.run(composer.compose("Company Name: Acme", profile))

    assert excinfo.value.kind is ProviderErrorKind.AUTHENTICATION
    assert llm.calls == 1
    assert recording_sleep.waits == []


def test_recovers_after_transient_failure(profile, composer_config, recording_sleep):
    llm = FakeLLMManager(
        QUOTA_ERROR,
        LLMResponse(success=True, content="Dear Bob,\nThanks for reading.\nBest regards,\nJane Doe"),
    )
    composer = DraftComposer(llm, composer_config, sleep=recording_sleep)

    draft = asyncio.run(composer.compose("Company Name: Acme", profile))

    assert llm.calls == 2
    assert recording_sleep.waits == [2.0]
    assert draft == "Dear Bob,\n\nThanks for reading.\n\nBest regards,\n\nJane Doe"


def test_empty_reply_is_an_error(composer_config, recording_sleep):
    composer = DraftComposer(FakeLLMManager(LLMResponse(success=True, content="   ")), composer_config, sleep=recording_sleep)

    with pytest.raises(GenerationError):
        asyncio.run(composer.compose("prompt"))


def test_max_attempts_must_be_positive(composer_config, recording_sleep):
    composer = DraftComposer(FakeLLMManager(QUOTA_ERROR), composer_config, sleep=recording_sleep)

    with pytest.raises(ValueError):
        asyncio.run(composer.compose("prompt", max_attempts=0))


def test_fallback_defaults_without_prompt_fields():
    draft = build_fallback_email("no labelled lines here")

    assert "your company" in draft
    assert "Dear Hiring Manager," in draft
    assert "[Your Name]" in draft


def test_prompt_carries_company_and_recipient_lines(profile, company):
    prompt = build_generation_prompt(profile, company, "resume text")

    assert "Company Name: Acme" in prompt
    assert "Recipient Name: Bob" in prompt
    assert "Email: jane@x.com\nPhone: 555-1234" in prompt


def test_custom_template_skips_the_model(profile, company, make_drafter):
    llm = FakeLLMManager(QUOTA_ERROR)
    template = "Dear [RECIPIENT_NAME], I admire [COMPANY_NAME]. Best regards, [YOUR_NAME] [CONTACT_INFO]"

    draft = asyncio.run(make_drafter(llm).draft(company, profile, "resume", custom_template=template))

    assert llm.calls == 0
    assert draft.split("\n\n") == [
        "Subject: Application for Backend Engineer Position at Acme",
        "Dear Bob,",
        "I admire Acme.",
        "Best regards,",
        "Jane Doe",
        "Email: jane@x.com\nPhone: 555-1234",
    ]


def test_drafter_rejects_incomplete_profile(profile, company, make_drafter):
    profile.email_purpose.position = ""
    llm = FakeLLMManager(QUOTA_ERROR)

    with pytest.raises(ProfileIncompleteError) as excinfo:
        asyncio.run(make_drafter(llm).draft(company, profile, "resume"))

    assert llm.calls == 0
    assert any("position" in message for message in excinfo.value.missing)


def test_split_subject_removes_subject_block():
    assert split_subject("Subject: Hi\n\nDear Bob,\n\nHello.") == ("Hi", "Dear Bob,\n\nHello.")


def test_split_subject_on_a_subject_only_draft():
    assert split_subject("Subject: Hi") == ("Hi", "")


def test_split_subject_defaults_from_position():
    assert split_subject("Dear Bob,", "Designer") == ("Application for Designer Role", "Dear Bob,")
