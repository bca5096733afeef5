"""
Main Streamlit Application for the Email Agent.

Entry point of the dashboard: compose and send outreach emails, track the
resulting applications, review analytics and manage settings.
"""

import streamlit as st

from email_agent.ui.components import AnalyticsTab, ApplicationsTab, ComposeTab, SettingsTab
from email_agent.ui.utils.session import init_session_state
from email_agent.ui.utils.styling import apply_custom_css

# Configure Streamlit page
st.set_page_config(
    page_title="Email Agent",
    page_icon="📧",
    layout="wide",
    initial_sidebar_state="collapsed"
)

def main():
    """Main application entry point."""
    init_session_state()
    apply_custom_css()

    st.markdown("""
    <div class="app-header">
        <h1>📧 Job Application Email Agent</h1>
        <p>Draft, send and track personalized outreach emails</p>
    </div>
    """, unsafe_allow_html=True)

    tab1, tab2, tab3, tab4 = st.tabs([
        "✍️ Compose & Send",
        "📋 Applications",
        "📈 Analytics",
        "⚙️ Settings"
    ])

    with tab1:
        ComposeTab().render()

    with tab2:
        ApplicationsTab().render()

    with tab3:
        AnalyticsTab().render()

    with tab4:
        SettingsTab().render()

    st.markdown("""
    <div class="app-footer">
        <hr>
        <p><strong>Email Agent</strong> | Nothing you enter is stored on the server</p>
    </div>
    """, unsafe_allow_html=True)

if __name__ == "__main__":
    main()
