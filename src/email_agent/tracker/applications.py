"""
Application Tracker

In-memory list of application records, one per target company, mutated in
place as drafts are generated and sent. Records are only removed by an
explicit delete. The tracker also exports the list to CSV and derives the
analytics shown on the dashboard.
"""

from dataclasses import dataclass, asdict
from datetime import date, datetime, timedelta, timezone
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Union

import pandas as pd

from ..document_manager.spreadsheet import CompanyRow
from ..utils import get_workflow_logger

logger = get_workflow_logger()

class ApplicationStatus(str, Enum):
    PENDING = "pending"
    GENERATING = "generating"
    GENERATED = "generated"
    SENDING = "sending"
    SENT = "sent"
    FAILED = "failed"
    RESPONDED = "responded"
    REJECTED = "rejected"
    INTERVIEW = "interview"

# Statuses that still count as work in progress on the analytics page
IN_PROGRESS_STATUSES = (
    ApplicationStatus.PENDING,
    ApplicationStatus.GENERATING,
    ApplicationStatus.GENERATED
)

EXPORT_COLUMNS = [
    "Company", "HR Email", "Recipient", "Status", "Sent At",
    "Subject", "Notes", "Follow Up", "Interview"
]

EDITABLE_FIELDS = {
    "status", "subject", "email_content", "notes",
    "follow_up_date", "interview_date", "recipient_name"
}

UPCOMING_WINDOW_DAYS = 7

@dataclass
class ApplicationRecord:
    id: str
    company_name: str
    hr_email: str
    recipient_name: Optional[str] = None
    status: ApplicationStatus = ApplicationStatus.PENDING
    sent_at: Optional[datetime] = None
    email_content: Optional[str] = None
    subject: Optional[str] = None
    notes: Optional[str] = None
    follow_up_date: Optional[date] = None
    interview_date: Optional[date] = None
    error: Optional[str] = None

    @classmethod
    def from_row(cls, index: int, row: CompanyRow) -> "ApplicationRecord":
        return cls(
            id=f"app-{index}",
            company_name=row.company_name,
            hr_email=row.hr_email,
            recipient_name=row.recipient_name
        )

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["status"] = self.status.value
        for key in ("sent_at", "follow_up_date", "interview_date"):
            if data[key] is not None:
                data[key] = data[key].isoformat()
        return data

@dataclass
class AnalyticsSummary:
    total: int
    sent: int
    responded: int
    interviews: int
    rejected: int
    pending: int
    failed: int
    response_rate: float
    interview_rate: float
    success_rate: float
    sent_last_7_days: int
    sends_by_weekday: Dict[str, int]

def _percentage(part: int, whole: int) -> float:
    return (part / whole) * 100 if whole > 0 else 0.0

def _as_date(value: Union[date, datetime, None]) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    return value

class ApplicationTracker:
    """Holds the application records of one session."""

    def __init__(self, records: Optional[Iterable[ApplicationRecord]] = None):
        self._records: List[ApplicationRecord] = list(records or [])

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self):
        return iter(self._records)

    @property
    def records(self) -> List[ApplicationRecord]:
        return list(self._records)

    def create_from_rows(self, rows: List[CompanyRow]) -> List[ApplicationRecord]:
        """Replace the current records with one pending record per company row."""
        self._records = [ApplicationRecord.from_row(index, row) for index, row in enumerate(rows)]
        logger.info(f"Created {len(self._records)} application records")
        return self.records

    def get(self, record_id: str) -> Optional[ApplicationRecord]:
        for record in self._records:
            if record.id == record_id:
                return record
        return None

    def update(self, record_id: str, **changes) -> ApplicationRecord:
        """Apply user edits to one record.

        Raises:
            KeyError: if the record does not exist.
            ValueError: for a field that cannot be edited or an unknown status.
        """
        record = self.get(record_id)
        if record is None:
            raise KeyError(record_id)

        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot edit field(s): {', '.join(sorted(unknown))}")

        if "status" in changes:
            changes["status"] = ApplicationStatus(changes["status"])

        for key, value in changes.items():
            setattr(record, key, value)
        return record

    def set_status(self, record: ApplicationRecord, status: ApplicationStatus, error: Optional[str] = None) -> None:
        record.status = status
        record.error = error
        if status == ApplicationStatus.SENT:
            record.sent_at = datetime.now(timezone.utc)

    def delete(self, record_id: str) -> bool:
        before = len(self._records)
        self._records = [r for r in self._records if r.id != record_id]
        deleted = len(self._records) != before
        if deleted:
            logger.info(f"Deleted application {record_id}")
        return deleted

    def filter(self, status: Optional[Union[ApplicationStatus, str]] = None) -> List[ApplicationRecord]:
        if status in (None, "", "all"):
            return self.records
        wanted = ApplicationStatus(status)
        return [r for r in self._records if r.status == wanted]

    def counts(self) -> Dict[str, int]:
        counts = {status.value: 0 for status in ApplicationStatus}
        for record in self._records:
            counts[record.status.value] += 1
        return counts

    def to_dataframe(self) -> pd.DataFrame:
        """Records as the export table, one row per application."""
        rows = [
            {
                "Company": r.company_name,
                "HR Email": r.hr_email,
                "Recipient": r.recipient_name or "",
                "Status": r.status.value,
                "Sent At": r.sent_at.isoformat() if r.sent_at else "",
                "Subject": r.subject or "",
                "Notes": r.notes or "",
                "Follow Up": r.follow_up_date.isoformat() if r.follow_up_date else "",
                "Interview": r.interview_date.isoformat() if r.interview_date else ""
            }
            for r in self._records
        ]
        return pd.DataFrame(rows, columns=EXPORT_COLUMNS)

    def export_csv(self) -> str:
        return self.to_dataframe().to_csv(index=False)

    def export_filename(self, today: Optional[date] = None) -> str:
        return f"job-applications-{(today or date.today()).isoformat()}.csv"

    def analytics(self, now: Optional[datetime] = None) -> AnalyticsSummary:
        now = now or datetime.now(timezone.utc)
        counts = self.counts()

        total = len(self._records)
        sent = counts[ApplicationStatus.SENT.value]
        responded = counts[ApplicationStatus.RESPONDED.value]
        interviews = counts[ApplicationStatus.INTERVIEW.value]
        rejected = counts[ApplicationStatus.REJECTED.value]
        pending = sum(counts[s.value] for s in IN_PROGRESS_STATUSES)

        sent_times = pd.Series([r.sent_at for r in self._records if r.sent_at], dtype="object")
        week_ago = now - timedelta(days=UPCOMING_WINDOW_DAYS)
        sent_last_7_days = int(sum(1 for t in sent_times if t >= week_ago))
        sends_by_weekday = sent_times.map(lambda t: t.strftime("%a")).value_counts().to_dict()

        return AnalyticsSummary(
            total=total,
            sent=sent,
            responded=responded,
            interviews=interviews,
            rejected=rejected,
            pending=pending,
            failed=counts[ApplicationStatus.FAILED.value],
            response_rate=_percentage(responded, sent),
            interview_rate=_percentage(interviews, responded),
            success_rate=_percentage(responded + interviews, total),
            sent_last_7_days=sent_last_7_days,
            sends_by_weekday={day: int(n) for day, n in sends_by_weekday.items()}
        )

    def _upcoming(self, attribute: str, today: Optional[date]) -> List[ApplicationRecord]:
        today = today or date.today()
        horizon = today + timedelta(days=UPCOMING_WINDOW_DAYS)
        due = [
            r for r in self._records
            if _as_date(getattr(r, attribute)) and today <= _as_date(getattr(r, attribute)) <= horizon
        ]
        return sorted(due, key=lambda r: _as_date(getattr(r, attribute)))

    def upcoming_follow_ups(self, today: Optional[date] = None) -> List[ApplicationRecord]:
        return self._upcoming("follow_up_date", today)

    def upcoming_interviews(self, today: Optional[date] = None) -> List[ApplicationRecord]:
        return self._upcoming("interview_date", today)
