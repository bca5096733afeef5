"""
Settings Tab Component

Mail account, generation API key and a read-only view of the pacing and
configuration checks.
"""

import asyncio

import streamlit as st

from ...config import config_manager
from ...mailer import EmailConfig

SERVICES = ["gmail", "outlook", "smtp"]

class SettingsTab:
    """Settings tab component."""

    def __init__(self):
        self.config = st.session_state.config
        self.api_key_store = st.session_state.api_key_store
        self.llm_manager = st.session_state.llm_manager
        self.orchestrator = st.session_state.orchestrator
        self.logger = st.session_state.logger

    def render(self):
        """Render the settings tab content."""
        st.markdown("### ⚙️ Settings")

        col1, col2 = st.columns(2)
        with col1:
            self._render_email_settings()
        with col2:
            self._render_api_key_settings()

        self._render_pacing()
        self._render_config_issues()

    def _render_email_settings(self):
        """Sender account used for the send loop."""
        st.markdown("#### 📧 Email Account")
        current = st.session_state.email_config or EmailConfig()

        with st.form("email_config_form"):
            service = st.selectbox("Service", SERVICES, index=SERVICES.index(current.service))
            user = st.text_input("Email address", value=current.user)
            password = st.text_input(
                "Password",
                value=current.password,
                type="password",
                help="For Gmail use a 16-character App Password, not your account password."
            )
            host = st.text_input("SMTP host (custom SMTP only)", value=current.host or "")
            port = st.number_input("SMTP port (custom SMTP only)", min_value=0, max_value=65535, value=current.port or 0)
            secure = st.checkbox("Use SSL (custom SMTP only)", value=current.secure)

            if st.form_submit_button("💾 Save Email Settings", width="stretch"):
                email_config = EmailConfig(
                    service=service,
                    user=user.strip(),
                    password=password,
                    host=host.strip() or None,
                    port=int(port) or None,
                    secure=secure
                )
                errors = email_config.validation_errors()
                if errors:
                    for error in errors:
                        st.error(f"❌ {error}")
                else:
                    st.session_state.email_config = email_config
                    self.logger.info(f"Email settings saved for service {service}")
                    st.success("✅ Email configuration is valid")

        if st.session_state.email_config:
            st.caption(f"Sending as {st.session_state.email_config.user}")

    def _render_api_key_settings(self):
        """Generation API key, validated before it is stored."""
        st.markdown("#### 🔑 Generation API Key")

        if self.api_key_store.has_key:
            st.success(f"✅ Key configured ({self.api_key_store.source}): {self.api_key_store.masked()}")
        else:
            st.warning("⚠️ No API key configured")

        info = self.llm_manager.get_provider_info()
        st.caption(f"Provider: {info['name']} · Model: {info['model']}")

        with st.form("api_key_form"):
            api_key = st.text_input("API key", type="password")
            if st.form_submit_button("✅ Validate & Save", width="stretch"):
                if not api_key.strip():
                    st.error("❌ API key is required")
                else:
                    with st.spinner("Testing API key..."):
                        valid, error = asyncio.run(self.llm_manager.validate_api_key(api_key.strip()))
                    if valid:
                        self.api_key_store.set(api_key)
                        st.success("✅ API key is valid and saved for this session")
                    else:
                        st.error(f"❌ {error}")

        if self.api_key_store.source == "user" and st.button("🗑️ Forget session key"):
            self.api_key_store.clear()
            st.rerun()

    def _render_pacing(self):
        st.markdown("#### ⏱️ Pacing")
        col1, col2 = st.columns(2)
        with col1:
            st.json(self.orchestrator.generation_pacer.get_status())
        with col2:
            st.json(self.orchestrator.send_pacer.get_status())
        st.caption(
            f"Retries: up to {self.config.composer.max_attempts} attempts, "
            f"backoff base {self.config.composer.backoff_base_seconds:.1f}s"
        )

    def _render_config_issues(self):
        issues = config_manager.validate_config()
        if self.api_key_store.source == "user":
            issues["errors"] = [e for e in issues["errors"] if "API key" not in e]

        with st.expander("🔧 Configuration check"):
            for error in issues["errors"]:
                st.error(error)
            for warning in issues["warnings"]:
                st.warning(warning)
            if not issues["errors"] and not issues["warnings"]:
                st.success("✅ No configuration issues")
            st.json(config_manager.mask_sensitive_config())
