"""
Compose & Send Tab Component

Profile editing, company sheet and resume upload, single draft preview and
the two bulk loops (generate all, send all).
"""

import asyncio
import base64
from typing import Optional

import pandas as pd
import streamlit as st

from ...document_manager import SpreadsheetFormatError, extract_resume_text, parse_company_file
from ...email_composer import ContactKind, GenerationError, ProfileIncompleteError
from ...mailer import Attachment, EmailService
from ..utils.session import get_system_health
from ..utils.styling import create_email_preview

TEMPLATE_HELP = "Available tokens: [RECIPIENT_NAME], [COMPANY_NAME], [YOUR_NAME], [CONTACT_INFO]"

DEFAULT_TEMPLATE = """Dear [RECIPIENT_NAME],

I would like to contribute to [COMPANY_NAME] and have attached my resume for your consideration.

Best regards,
[YOUR_NAME]

[CONTACT_INFO]"""

class ComposeTab:
    """Compose & Send tab component."""

    def __init__(self):
        self.logger = st.session_state.logger
        self.profile = st.session_state.profile
        self.tracker = st.session_state.tracker
        self.orchestrator = st.session_state.orchestrator
        self.llm_manager = st.session_state.llm_manager
        self.mail_config = st.session_state.config.mail

    def render(self):
        """Render the compose tab content."""
        self._render_readiness()

        col1, col2 = st.columns([1, 1])
        with col1:
            self._render_profile()
        with col2:
            self._render_uploads()

        self._render_template_options()
        self._render_preview()
        self._render_bulk_actions()

    def _render_readiness(self):
        health = get_system_health()
        if health['missing']:
            st.info("Still needed before sending: " + ", ".join(name.replace('_', ' ') for name in health['missing']))

    def _render_profile(self):
        """Sender name, purpose and free-form contact fields."""
        st.markdown("#### 👤 Your Profile")

        self.profile.name = st.text_input("Full name", value=self.profile.name, key="profile_name")
        self.profile.email_purpose.position = st.text_input(
            "Position you're applying for",
            value=self.profile.email_purpose.position,
            key="profile_position"
        )
        self.profile.email_purpose.reason = st.text_area(
            "Why you're reaching out",
            value=self.profile.email_purpose.reason,
            key="profile_reason",
            height=80
        )

        st.markdown("**Contact details**")
        for contact in list(self.profile.contact_fields):
            label_col, value_col, remove_col = st.columns([2, 4, 1])
            with label_col:
                label = st.text_input("Label", value=contact.label, key=f"label_{contact.id}", label_visibility="collapsed")
            with value_col:
                value = st.text_input("Value", value=contact.value, key=f"value_{contact.id}", label_visibility="collapsed")
            with remove_col:
                if st.button("✖", key=f"remove_{contact.id}"):
                    self.profile.remove_contact_field(contact.id)
                    st.rerun()
            self.profile.update_contact_field(contact.id, label=label, value=value)

        add_col1, add_col2 = st.columns([3, 1])
        with add_col1:
            kind = st.selectbox(
                "New field type",
                [k.value for k in ContactKind],
                key="new_contact_kind",
                label_visibility="collapsed"
            )
        with add_col2:
            if st.button("➕ Add field", key="add_contact_field"):
                self.profile.add_contact_field(kind=ContactKind(kind))
                st.rerun()

        missing = self.profile.missing_fields()
        if missing:
            for message in missing:
                st.caption(f"⚠️ {message}")
        else:
            st.success("✅ Profile complete")

    def _render_uploads(self):
        """Company sheet and resume uploads."""
        st.markdown("#### 📁 Companies & Resume")

        company_file = st.file_uploader(
            "Company list (CSV or Excel)",
            type=["csv", "xlsx", "xls"],
            key="company_file"
        )
        if company_file is not None and company_file.name != st.session_state.company_file_name:
            try:
                rows = parse_company_file(company_file.getvalue(), company_file.name)
                st.session_state.company_rows = rows
                st.session_state.company_file_name = company_file.name
                self.logger.info(f"Loaded {len(rows)} companies from {company_file.name}")
            except SpreadsheetFormatError as e:
                st.error(f"❌ {e}")

        rows = st.session_state.company_rows
        if rows:
            st.success(f"✅ {len(rows)} companies loaded")
            st.dataframe(pd.DataFrame([row.to_dict() for row in rows]), width="stretch", height=180)

        resume_file = st.file_uploader(
            "Resume",
            type=["pdf", "doc", "docx", "txt", "md"],
            key="resume_file"
        )
        if resume_file is not None and resume_file.name != st.session_state.resume_file_name:
            data = resume_file.getvalue()
            st.session_state.resume_bytes = data
            st.session_state.resume_file_name = resume_file.name
            st.session_state.resume_text = extract_resume_text(data, resume_file.name)

        if st.session_state.resume_text:
            with st.expander(f"📄 Resume text ({st.session_state.resume_file_name})"):
                st.text(st.session_state.resume_text[:2000])

    def _render_template_options(self):
        st.markdown("#### ✍️ Template")
        st.session_state.use_custom_template = st.checkbox(
            "Use my own template instead of AI generation",
            value=st.session_state.use_custom_template,
            key="use_custom_template_checkbox"
        )
        if st.session_state.use_custom_template:
            st.session_state.custom_template = st.text_area(
                "Custom template",
                value=st.session_state.custom_template or DEFAULT_TEMPLATE,
                height=220,
                help=TEMPLATE_HELP,
                key="custom_template_text"
            )

    def _custom_template(self) -> Optional[str]:
        if st.session_state.use_custom_template:
            return st.session_state.custom_template
        return None

    def _check_generation_ready(self) -> bool:
        if not st.session_state.company_rows:
            st.error("❌ Please upload a spreadsheet with company data first")
            return False
        if not st.session_state.resume_text:
            st.error("❌ Please upload your resume first")
            return False
        if not self._custom_template() and not self.llm_manager.has_api_key():
            st.error("❌ No generation API key configured. Add one in Settings.")
            return False
        return True

    def _render_preview(self):
        """Draft one email for review before a bulk run."""
        st.markdown("#### 👀 Preview")
        rows = st.session_state.company_rows
        if not rows:
            st.caption("Upload a company list to preview a draft.")
            return

        names = [row.company_name for row in rows]
        selected = st.selectbox("Company", names, key="preview_company")

        if st.button("✨ Generate preview", key="generate_preview"):
            if self._check_generation_ready():
                row = rows[names.index(selected)]
                try:
                    with st.spinner(f"Drafting email for {row.company_name}..."):
                        subject, body = asyncio.run(self.orchestrator.preview(
                            row, self.profile, st.session_state.resume_text, self._custom_template()
                        ))
                    st.session_state.preview = {"company": row.company_name, "subject": subject, "body": body}
                except ProfileIncompleteError as e:
                    st.error(f"❌ {e}")
                except GenerationError as e:
                    st.error(f"❌ Failed to generate email: {e}")

        preview = st.session_state.preview
        if preview:
            st.markdown(f"**Subject:** {preview['subject']}")
            st.markdown(create_email_preview(preview['body']), unsafe_allow_html=True)

    def _run_with_progress(self, label: str, coroutine_factory):
        progress_bar = st.progress(0.0, text=label)

        def on_progress(event_type, data):
            total = max(data.get('total', 1), 1)
            progress_bar.progress(min((data['index'] + 1) / total, 1.0), text=f"{label} ({event_type})")

        self.orchestrator.add_progress_callback(on_progress)
        try:
            return asyncio.run(coroutine_factory())
        finally:
            self.orchestrator.remove_progress_callback(on_progress)

    def _render_bulk_actions(self):
        st.markdown("#### 🚀 Bulk Actions")
        col1, col2 = st.columns(2)

        with col1:
            if st.button("🤖 Generate all emails", width="stretch", key="generate_all"):
                self._generate_all()

        with col2:
            ready = len(self.tracker.filter("generated"))
            if st.button(f"📤 Send all ({ready} ready)", width="stretch", key="send_all", disabled=ready == 0):
                self._send_all()

    def _generate_all(self):
        if not self._check_generation_ready():
            return
        try:
            summary = self._run_with_progress(
                "Generating emails",
                lambda: self.orchestrator.generate_all(
                    st.session_state.company_rows,
                    self.profile,
                    st.session_state.resume_text,
                    self._custom_template()
                )
            )
        except ProfileIncompleteError as e:
            for message in e.missing:
                st.error(f"❌ {message}")
            return

        st.success(f"✅ Generated {summary.succeeded} emails")
        if summary.failed:
            st.warning(f"⚠️ {summary.failed} emails failed to generate. See the Applications tab.")

    def _send_all(self):
        email_config = st.session_state.email_config
        if email_config is None:
            st.error("❌ Please configure your email account in Settings first")
            return

        attachments = []
        if st.session_state.resume_bytes:
            attachments.append(Attachment(
                filename=self.mail_config.attachment_filename,
                content=base64.b64encode(st.session_state.resume_bytes).decode("ascii")
            ))

        service = EmailService(email_config, self.mail_config)
        summary = self._run_with_progress(
            "Sending emails",
            lambda: self.orchestrator.send_all(service, attachments)
        )

        st.success(f"✅ Sent {summary.succeeded} emails")
        if summary.failed:
            st.warning(f"⚠️ {summary.failed} emails failed to send. See the Applications tab.")
