"""
Bulk Workflow Orchestrator

Runs the two sequential bulk loops of a session: draft generation for every
company row, then delivery of every generated draft. Each loop handles one
application at a time, waits on its pacing policy between external calls and
records the outcome on the matching application record. A failure marks that
record as failed and the loop moves on to the next one.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from .config import PacingConfig, get_pacing_config
from .document_manager.spreadsheet import CompanyRow
from .email_composer import (
    EmailDrafter,
    GenerationError,
    ProfileIncompleteError,
    UserProfile,
    split_subject
)
from .mailer import Attachment, EmailData, EmailService
from .tracker import ApplicationRecord, ApplicationStatus, ApplicationTracker
from .utils import FixedIntervalPacer, PacingPolicy, get_progress_logger, get_workflow_logger

logger = get_workflow_logger()

ProgressCallback = Callable[[str, Dict[str, Any]], None]

@dataclass
class BatchSummary:
    """Outcome of one bulk loop."""
    batch: str
    total: int = 0
    succeeded: int = 0
    failed: int = 0
    failures: Dict[str, str] = field(default_factory=dict)

    def record_failure(self, record: ApplicationRecord, error: str) -> None:
        self.failed += 1
        self.failures[record.id] = error

class BulkOrchestrator:
    """Coordinates drafting and sending for the applications of one session."""

    def __init__(
        self,
        drafter: EmailDrafter,
        tracker: ApplicationTracker,
        generation_pacer: Optional[PacingPolicy] = None,
        send_pacer: Optional[PacingPolicy] = None,
        pacing_config: Optional[PacingConfig] = None
    ):
        pacing = pacing_config or get_pacing_config()
        self.drafter = drafter
        self.tracker = tracker
        self.generation_pacer = generation_pacer or FixedIntervalPacer(pacing.generation_interval_seconds)
        self.send_pacer = send_pacer or FixedIntervalPacer(pacing.send_interval_seconds)
        self.progress_callbacks: List[ProgressCallback] = []

    def add_progress_callback(self, callback: ProgressCallback):
        """Add a progress callback function."""
        self.progress_callbacks.append(callback)

    def remove_progress_callback(self, callback: ProgressCallback):
        if callback in self.progress_callbacks:
            self.progress_callbacks.remove(callback)

    def _notify_progress(self, event_type: str, data: Dict[str, Any]):
        """Notify all progress callbacks."""
        for callback in self.progress_callbacks:
            try:
                callback(event_type, data)
            except Exception as e:
                logger.error(f"Error in progress callback: {e}")

    async def preview(
        self,
        row: CompanyRow,
        profile: UserProfile,
        resume_text: str,
        custom_template: Optional[str] = None
    ) -> Tuple[str, str]:
        """Draft a single email for review without touching the tracker."""
        draft = await self.drafter.draft(row, profile, resume_text, custom_template)
        return split_subject(draft, profile.email_purpose.position)

    async def generate_all(
        self,
        rows: List[CompanyRow],
        profile: UserProfile,
        resume_text: str,
        custom_template: Optional[str] = None
    ) -> BatchSummary:
        """
        Draft one email per company row.

        Raises:
            ProfileIncompleteError: before any record is created when the
                profile lacks a name, a position or any contact detail.
            ValueError: when there are no company rows.
        """
        missing = profile.missing_fields()
        if missing:
            raise ProfileIncompleteError(missing)
        if not rows:
            raise ValueError("Please upload a spreadsheet with company data first")

        records = self.tracker.create_from_rows(rows)
        summary = BatchSummary(batch="generation", total=len(records))
        progress = get_progress_logger(logger, len(records), "Email generation")
        logger.batch_started("generation", len(records))

        for index, (record, row) in enumerate(zip(records, rows)):
            logger.application_started(record.id, record.company_name, "generation")
            self.tracker.set_status(record, ApplicationStatus.GENERATING)
            self._notify_progress("generating", {"application_id": record.id, "index": index, "total": summary.total})

            try:
                draft = await self.drafter.draft(row, profile, resume_text, custom_template)
                record.subject, record.email_content = split_subject(draft, profile.email_purpose.position)
                self.tracker.set_status(record, ApplicationStatus.GENERATED)
                summary.succeeded += 1
            except GenerationError as e:
                logger.error(f"Generation failed for {record.company_name} ({e.kind.value}): {e}")
                self.tracker.set_status(record, ApplicationStatus.FAILED, error=str(e))
                summary.record_failure(record, str(e))
            except Exception as e:
                logger.exception(f"Unexpected error generating email for {record.company_name}: {e}")
                self.tracker.set_status(record, ApplicationStatus.FAILED, error=str(e))
                summary.record_failure(record, str(e))

            logger.application_completed(record.status.value)
            progress.update(message=record.company_name)
            self._notify_progress(record.status.value, {"application_id": record.id, "index": index, "total": summary.total})

            if index < len(records) - 1:
                await self.generation_pacer.wait()

        progress.complete()
        logger.batch_completed("generation", summary.succeeded, summary.failed)
        return summary

    async def send_all(
        self,
        email_service: EmailService,
        attachments: Optional[List[Attachment]] = None
    ) -> BatchSummary:
        """Send every application whose draft is ready."""
        ready = self.tracker.filter(ApplicationStatus.GENERATED)
        summary = BatchSummary(batch="sending", total=len(ready))
        if not ready:
            logger.info("No generated emails to send")
            return summary

        progress = get_progress_logger(logger, len(ready), "Email sending")
        logger.batch_started("sending", len(ready))

        for index, record in enumerate(ready):
            logger.application_started(record.id, record.company_name, "sending")
            self.tracker.set_status(record, ApplicationStatus.SENDING)
            self._notify_progress("sending", {"application_id": record.id, "index": index, "total": summary.total})

            email = EmailData(
                to=record.hr_email,
                subject=record.subject or f"Application for {record.company_name}",
                body=record.email_content or "",
                attachments=list(attachments or [])
            )
            # smtplib blocks; keep the event loop free while it runs
            result = await asyncio.to_thread(email_service.send_email, email)

            if result.success:
                self.tracker.set_status(record, ApplicationStatus.SENT)
                summary.succeeded += 1
            else:
                self.tracker.set_status(record, ApplicationStatus.FAILED, error=result.error)
                summary.record_failure(record, result.error or "Unknown transport error")

            logger.application_completed(record.status.value)
            progress.update(message=record.company_name)
            self._notify_progress(record.status.value, {"application_id": record.id, "index": index, "total": summary.total})

            if index < len(ready) - 1:
                await self.send_pacer.wait()

        progress.complete()
        logger.batch_completed("sending", summary.succeeded, summary.failed)
        return summary
