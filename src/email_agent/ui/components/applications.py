"""
Applications Tab Component

Lists the tracked applications with a status filter, lets the user edit or
delete a record and exports the list to CSV.
"""

from datetime import date

import streamlit as st

from ...tracker import ApplicationRecord, ApplicationStatus
from ..utils.styling import create_email_preview, create_status_badge

class ApplicationsTab:
    """Application tracker tab component."""

    def __init__(self):
        self.tracker = st.session_state.tracker
        self.logger = st.session_state.logger

    def render(self):
        """Render the applications tab content."""
        st.markdown("### 📋 Applications")

        if not len(self.tracker):
            st.info("No applications yet. Generate emails in the Compose & Send tab.")
            return

        self._render_summary()

        col1, col2 = st.columns([3, 1])
        with col1:
            status_filter = st.selectbox(
                "Status",
                ["all"] + [status.value for status in ApplicationStatus],
                key="applications_status_filter"
            )
        with col2:
            st.download_button(
                "⬇️ Export CSV",
                data=self.tracker.export_csv(),
                file_name=self.tracker.export_filename(),
                mime="text/csv",
                width="stretch"
            )

        records = self.tracker.filter(status_filter)
        st.caption(f"{len(records)} of {len(self.tracker)} applications")

        for record in records:
            self._render_record(record)

    def _render_summary(self):
        counts = self.tracker.counts()
        columns = st.columns(4)
        for column, status in zip(columns, ("sent", "responded", "interview", "rejected")):
            with column:
                st.metric(status.title(), counts[status])

    def _render_record(self, record: ApplicationRecord):
        with st.expander(f"{record.company_name} · {record.hr_email} · {record.status.value}"):
            st.markdown(create_status_badge(record.status.value), unsafe_allow_html=True)

            if record.error:
                st.error(record.error)
            if record.sent_at:
                st.caption(f"Sent at {record.sent_at.strftime('%Y-%m-%d %H:%M')} UTC")
            if record.email_content:
                st.markdown(f"**Subject:** {record.subject or ''}")
                st.markdown(create_email_preview(record.email_content), unsafe_allow_html=True)

            self._render_edit_form(record)

            if st.button("🗑️ Delete", key=f"delete_{record.id}"):
                self.tracker.delete(record.id)
                st.rerun()

    def _render_edit_form(self, record: ApplicationRecord):
        statuses = [status.value for status in ApplicationStatus]

        with st.form(f"edit_{record.id}"):
            status = st.selectbox("Status", statuses, index=statuses.index(record.status.value))
            subject = st.text_input("Subject", value=record.subject or "")
            body = st.text_area("Email", value=record.email_content or "", height=200)
            notes = st.text_area("Notes", value=record.notes or "", height=80)

            col1, col2 = st.columns(2)
            with col1:
                follow_up = st.date_input("Follow-up date", value=record.follow_up_date)
            with col2:
                interview = st.date_input("Interview date", value=record.interview_date)

            if st.form_submit_button("💾 Save", width="stretch"):
                self.tracker.update(
                    record.id,
                    status=status,
                    subject=subject or None,
                    email_content=body or None,
                    notes=notes or None,
                    follow_up_date=follow_up if isinstance(follow_up, date) else None,
                    interview_date=interview if isinstance(interview, date) else None
                )
                self.logger.info(f"Updated application {record.id}")
                st.success("✅ Application updated")
                st.rerun()
