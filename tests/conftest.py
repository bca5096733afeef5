import smtplib

import pytest

from email_agent.ai_processing import LLMResponse
from email_agent.config import ComposerConfig, LLMConfig, MailConfig, PacingConfig
from email_agent.document_manager import CompanyRow
from email_agent.email_composer import DraftComposer, EmailDrafter, UserProfile


class FakeLLMManager:
    """Returns queued responses in order; the last one repeats."""

    def __init__(self, *responses, has_key=True):
        self.responses = list(responses) or [LLMResponse(success=True, content="")]
        self.prompts = []
        self._has_key = has_key

    async def generate_text(self, prompt, system_prompt="", **kwargs):
        self.prompts.append(prompt)
        index = min(len(self.prompts), len(self.responses)) - 1
        return self.responses[index]

    @property
    def calls(self):
        return len(self.prompts)

    def has_api_key(self):
        return self._has_key

    async def validate_api_key(self, api_key):
        if api_key == "gsk_valid_key_123":
            return True, None
        return False, "Invalid API key. Please check your API key."


class RecordingSleep:
    def __init__(self):
        self.waits = []

    async def __call__(self, seconds):
        self.waits.append(seconds)


class FakeSMTP:
    """Stands in for an smtplib connection."""

    def __init__(self, fail_login=False, fail_send_to=()):
        self.fail_login = fail_login
        self.fail_send_to = set(fail_send_to)
        self.sent = []
        self.logins = []
        self.closed = False

    def login(self, user, password):
        self.logins.append(user)
        if self.fail_login:
            raise smtplib.SMTPAuthenticationError(535, b"5.7.8 Username and Password not accepted")

    def send_message(self, message):
        if message["To"] in self.fail_send_to:
            raise smtplib.SMTPRecipientsRefused({message["To"]: (550, b"No such user")})
        self.sent.append(message)

    def quit(self):
        self.closed = True


class FakeTransportFactory:
    def __init__(self, smtp=None):
        self.smtp = smtp or FakeSMTP()
        self.settings = []

    def __call__(self, settings, timeout):
        self.settings.append(settings)
        return self.smtp


QUOTA_ERROR = LLMResponse.failure("Rate limit reached: you exceeded your current quota", status=429)


@pytest.fixture
def recording_sleep():
    return RecordingSleep()


@pytest.fixture
def composer_config():
    return ComposerConfig(max_attempts=3, backoff_base_seconds=1.0)


@pytest.fixture
def profile():
    profile = UserProfile.with_default_fields("Jane Doe")
    profile.email_purpose.position = "Backend Engineer"
    profile.email_purpose.reason = "building reliable APIs"
    profile.update_contact_field("email", value="jane@x.com")
    profile.update_contact_field("phone", value="555-1234")
    return profile


@pytest.fixture
def company():
    return CompanyRow(company_name="Acme", hr_email="hr@acme.com", recipient_name="Bob")


@pytest.fixture
def make_drafter(composer_config, recording_sleep):
    def build(llm_manager):
        return EmailDrafter(DraftComposer(llm_manager, composer_config, sleep=recording_sleep))
    return build


@pytest.fixture
def llm_config():
    return LLMConfig(provider="groq", groq_api_key=None, openrouter_api_key=None)


@pytest.fixture
def mail_config():
    return MailConfig(timeout_seconds=5, attachment_filename="resume.pdf")


@pytest.fixture
def pacing_config():
    return PacingConfig(generation_interval_seconds=1.5, send_interval_seconds=2.0)
