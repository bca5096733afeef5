from datetime import date, datetime, timedelta, timezone

import pytest

from email_agent.document_manager import CompanyRow
from email_agent.tracker import EXPORT_COLUMNS, ApplicationStatus, ApplicationTracker


@pytest.fixture
def tracker():
    tracker = ApplicationTracker()
    tracker.create_from_rows([
        CompanyRow("Acme", "hr@acme.com", "Bob"),
        CompanyRow("Globex", "talent@globex.com"),
        CompanyRow("Initech", "jobs@initech.com"),
        CompanyRow("Umbrella", "hr@umbrella.com"),
    ])
    return tracker


def test_records_are_created_pending_with_index_ids(tracker):
    assert [record.id for record in tracker] == ["app-0", "app-1", "app-2", "app-3"]
    assert all(record.status is ApplicationStatus.PENDING for record in tracker)


def test_sent_status_stamps_the_send_time(tracker):
    record = tracker.get("app-0")

    tracker.set_status(record, ApplicationStatus.SENT)

    assert record.sent_at is not None
    assert record.sent_at.tzinfo is not None


def test_update_only_touches_editable_fields(tracker):
    tracker.update("app-1", status="responded", notes="Replied on Monday", follow_up_date=date(2026, 1, 5))
    record = tracker.get("app-1")

    assert record.status is ApplicationStatus.RESPONDED
    assert record.notes == "Replied on Monday"

    with pytest.raises(ValueError):
        tracker.update("app-1", hr_email="other@globex.com")
    with pytest.raises(ValueError):
        tracker.update("app-1", status="archived")
    with pytest.raises(KeyError):
        tracker.update("app-99", notes="x")


def test_delete_is_explicit(tracker):
    assert tracker.delete("app-2") is True
    assert tracker.delete("app-2") is False
    assert len(tracker) == 3


def test_filter_by_status(tracker):
    tracker.set_status(tracker.get("app-0"), ApplicationStatus.FAILED, error="boom")

    assert [r.id for r in tracker.filter("failed")] == ["app-0"]
    assert len(tracker.filter("all")) == 4


def test_csv_export_has_fixed_columns(tracker):
    tracker.update("app-0", subject="Hello", notes="Call back")

    lines = tracker.export_csv().splitlines()

    assert lines[0] == ",".join(EXPORT_COLUMNS)
    assert lines[1].startswith("Acme,hr@acme.com,Bob,pending,,Hello,Call back")
    assert len(lines) == 5


def test_analytics_rates(tracker):
    now = datetime(2026, 3, 4, 12, 0, tzinfo=timezone.utc)  # a Wednesday
    records = tracker.records
    records[0].status = ApplicationStatus.SENT
    records[0].sent_at = now - timedelta(days=1)
    records[1].status = ApplicationStatus.RESPONDED
    records[1].sent_at = now - timedelta(days=10)
    records[2].status = ApplicationStatus.INTERVIEW

    summary = tracker.analytics(now=now)

    assert (summary.total, summary.sent, summary.responded, summary.interviews) == (4, 1, 1, 1)
    assert summary.pending == 1
    assert summary.response_rate == 100.0
    assert summary.interview_rate == 100.0
    assert summary.success_rate == 50.0
    assert summary.sent_last_7_days == 1
    assert summary.sends_by_weekday == {"Tue": 1, "Sun": 1}


def test_analytics_on_empty_tracker():
    summary = ApplicationTracker().analytics()

    assert summary.total == 0
    assert summary.response_rate == 0.0
    assert summary.sends_by_weekday == {}


def test_upcoming_follow_ups_and_interviews(tracker):
    today = date(2026, 3, 4)
    tracker.update("app-0", follow_up_date=today + timedelta(days=3))
    tracker.update("app-1", follow_up_date=today + timedelta(days=1))
    tracker.update("app-2", follow_up_date=today + timedelta(days=8))
    tracker.update("app-3", interview_date=today)

    assert [r.id for r in tracker.upcoming_follow_ups(today)] == ["app-1", "app-0"]
    assert [r.id for r in tracker.upcoming_interviews(today)] == ["app-3"]
