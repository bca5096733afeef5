"""
Session state management for the Streamlit dashboard.

Everything a user enters lives in ``st.session_state`` for the lifetime of
the browser session: the profile, uploaded company rows, resume text, the
application tracker, the API key store and the mail settings. Nothing is
persisted on the server.
"""

import streamlit as st

from ...ai_processing import LLMManager
from ...config import ApiKeyStore, get_config
from ...email_composer import DraftComposer, EmailDrafter, UserProfile
from ...tracker import ApplicationTracker
from ...utils import get_ui_logger, setup_logging
from ...workflow_orchestrator import BulkOrchestrator

def init_session_state():
    """Initialize all session state variables."""

    # Initialize logging first
    if 'logger_initialized' not in st.session_state:
        setup_logging()
        st.session_state.logger_initialized = True
        st.session_state.logger = get_ui_logger()

    if 'config' not in st.session_state:
        st.session_state.config = get_config()

    config = st.session_state.config

    if 'api_key_store' not in st.session_state:
        st.session_state.api_key_store = ApiKeyStore(config.llm)

    if 'llm_manager' not in st.session_state:
        st.session_state.llm_manager = LLMManager(config.llm, st.session_state.api_key_store)

    if 'tracker' not in st.session_state:
        st.session_state.tracker = ApplicationTracker()

    if 'orchestrator' not in st.session_state:
        drafter = EmailDrafter(DraftComposer(st.session_state.llm_manager, config.composer))
        st.session_state.orchestrator = BulkOrchestrator(
            drafter,
            st.session_state.tracker,
            pacing_config=config.pacing
        )

    if 'profile' not in st.session_state:
        st.session_state.profile = UserProfile.with_default_fields()

    defaults = {
        'company_rows': [],
        'company_file_name': None,
        'resume_text': "",
        'resume_bytes': None,
        'resume_file_name': None,
        'email_config': None,
        'use_custom_template': False,
        'custom_template': "",
        'preview': None,
    }
    for key, value in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = value

def get_system_health():
    """Readiness of the pieces the bulk loops need."""
    profile = st.session_state.get('profile')
    components = {
        'api_key': st.session_state.api_key_store.has_key,
        'profile': bool(profile) and not profile.missing_fields(),
        'companies': bool(st.session_state.get('company_rows')),
        'resume': bool(st.session_state.get('resume_text')),
        'email': st.session_state.get('email_config') is not None,
    }
    missing = [name for name, ready in components.items() if not ready]
    return {
        'overall': 'healthy' if not missing else 'warning',
        'components': components,
        'missing': missing,
    }
