import asyncio

import pytest

from email_agent.ai_processing import LLMResponse
from email_agent.document_manager import CompanyRow
from email_agent.email_composer import ProfileIncompleteError
from email_agent.mailer import EmailConfig, EmailService
from email_agent.tracker import ApplicationStatus, ApplicationTracker
from email_agent.utils import FixedIntervalPacer
from email_agent.workflow_orchestrator import BulkOrchestrator

from conftest import FakeLLMManager, FakeSMTP, FakeTransportFactory, RecordingSleep

DRAFT = LLMResponse(
    success=True,
    content="Subject: Hello from Jane\nDear Bob, I like your work. Best regards, Jane Doe Email: jane@x.com",
)
AUTH_ERROR = LLMResponse.failure("groq API error 401: invalid api key", status=401)

ROWS = [
    CompanyRow("Acme", "hr@acme.com", "Bob"),
    CompanyRow("Globex", "talent@globex.com"),
    CompanyRow("Initech", "jobs@initech.com"),
]


@pytest.fixture
def pacer_sleeps():
    return RecordingSleep(), RecordingSleep()


def build_orchestrator(llm, make_drafter, pacer_sleeps):
    generation_sleep, send_sleep = pacer_sleeps
    return BulkOrchestrator(
        make_drafter(llm),
        ApplicationTracker(),
        generation_pacer=FixedIntervalPacer(1.5, sleep=generation_sleep),
        send_pacer=FixedIntervalPacer(2.0, sleep=send_sleep),
    )


def test_generate_all_marks_each_record(profile, make_drafter, pacer_sleeps):
    orchestrator = build_orchestrator(FakeLLMManager(DRAFT), make_drafter, pacer_sleeps)

    summary = asyncio.run(orchestrator.generate_all(ROWS, profile, "resume"))

    assert (summary.total, summary.succeeded, summary.failed) == (3, 3, 0)
    record = orchestrator.tracker.get("app-0")
    assert record.status is ApplicationStatus.GENERATED
    assert record.subject == "Hello from Jane"
    assert record.email_content.startswith("Dear Bob,")
    assert "Subject:" not in record.email_content
    assert pacer_sleeps[0].waits == [1.5, 1.5]


def test_generation_failure_does_not_stop_the_batch(profile, make_drafter, pacer_sleeps):
    llm = FakeLLMManager(DRAFT, AUTH_ERROR, DRAFT)
    orchestrator = build_orchestrator(llm, make_drafter, pacer_sleeps)

    summary = asyncio.run(orchestrator.generate_all(ROWS, profile, "resume"))

    statuses = [record.status for record in orchestrator.tracker]
    assert statuses == [ApplicationStatus.GENERATED, ApplicationStatus.FAILED, ApplicationStatus.GENERATED]
    assert orchestrator.tracker.get("app-1").error
    assert summary.failures.keys() == {"app-1"}


def test_profile_without_contact_details_is_rejected_up_front(profile, make_drafter, pacer_sleeps):
    for contact in profile.contact_fields:
        contact.value = ""
    llm = FakeLLMManager(DRAFT)
    orchestrator = build_orchestrator(llm, make_drafter, pacer_sleeps)

    with pytest.raises(ProfileIncompleteError):
        asyncio.run(orchestrator.generate_all(ROWS, profile, "resume"))

    assert len(orchestrator.tracker) == 0
    assert llm.calls == 0


def test_send_all_sends_generated_records_only(profile, make_drafter, pacer_sleeps, mail_config):
    llm = FakeLLMManager(DRAFT, AUTH_ERROR, DRAFT, DRAFT)
    orchestrator = build_orchestrator(llm, make_drafter, pacer_sleeps)
    rows = ROWS + [CompanyRow("Umbrella", "hr@umbrella.com")]
    asyncio.run(orchestrator.generate_all(rows, profile, "resume"))

    transport = FakeTransportFactory(FakeSMTP(fail_send_to={"jobs@initech.com"}))
    service = EmailService(
        EmailConfig(service="gmail", user="jane@gmail.com", password="abcdefghijklmnop"),
        mail_config,
        transport,
    )

    summary = asyncio.run(orchestrator.send_all(service))

    tracker = orchestrator.tracker
    assert (summary.total, summary.succeeded, summary.failed) == (3, 2, 1)
    assert tracker.get("app-0").status is ApplicationStatus.SENT
    assert tracker.get("app-0").sent_at is not None
    assert tracker.get("app-1").status is ApplicationStatus.FAILED
    assert tracker.get("app-2").status is ApplicationStatus.FAILED
    assert tracker.get("app-2").sent_at is None
    assert tracker.get("app-3").status is ApplicationStatus.SENT
    assert [m["To"] for m in transport.smtp.sent] == ["hr@acme.com", "hr@umbrella.com"]
    assert transport.smtp.sent[0]["Subject"] == "Hello from Jane"
    assert pacer_sleeps[1].waits == [2.0, 2.0]


def test_send_all_without_generated_records(make_drafter, pacer_sleeps, mail_config):
    orchestrator = build_orchestrator(FakeLLMManager(DRAFT), make_drafter, pacer_sleeps)
    service = EmailService(EmailConfig(), mail_config, FakeTransportFactory())

    summary = asyncio.run(orchestrator.send_all(service))

    assert summary.total == 0
    assert pacer_sleeps[1].waits == []


def test_progress_callbacks_receive_each_stage(profile, make_drafter, pacer_sleeps):
    orchestrator = build_orchestrator(FakeLLMManager(DRAFT), make_drafter, pacer_sleeps)
    events = []
    orchestrator.add_progress_callback(lambda event, data: events.append((event, data["application_id"])))

    asyncio.run(orchestrator.generate_all(ROWS[:1], profile, "resume"))

    assert events == [("generating", "app-0"), ("generated", "app-0")]


def test_preview_leaves_tracker_untouched(profile, make_drafter, pacer_sleeps):
    orchestrator = build_orchestrator(FakeLLMManager(DRAFT), make_drafter, pacer_sleeps)

    subject, body = asyncio.run(orchestrator.preview(ROWS[0], profile, "resume"))

    assert subject == "Hello from Jane"
    assert body.startswith("Dear Bob,")
    assert len(orchestrator.tracker) == 0
