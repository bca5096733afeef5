"""
Custom CSS styling for the Streamlit dashboard.
"""

import html

import streamlit as st

STATUS_COLORS = {
    "pending": "#6c757d",
    "generating": "#17a2b8",
    "generated": "#007bff",
    "sending": "#17a2b8",
    "sent": "#28a745",
    "failed": "#dc3545",
    "responded": "#6f42c1",
    "rejected": "#fd7e14",
    "interview": "#20c997",
}

def apply_custom_css():
    """Apply custom CSS styling to the dashboard."""

    st.markdown("""
    <style>
    .main .block-container {
        padding-top: 0.75rem !important;
        padding-bottom: 1.5rem !important;
        max-width: 1100px;
    }

    /* Header banner */
    .app-header {
        background: linear-gradient(120deg, #1d3557 0%, #457b9d 100%);
        color: white;
        padding: 1.25rem 1.5rem;
        border-radius: 10px;
        margin-bottom: 1.5rem;
        text-align: center;
    }

    .app-header h1 {
        margin: 0;
        font-size: 1.9rem;
        font-weight: 650;
    }

    .app-header p {
        margin: 0.5rem 0 0 0;
        opacity: 0.85;
    }

    .stTabs [aria-selected="true"] {
        background: linear-gradient(120deg, #1d3557 0%, #457b9d 100%);
        color: white !important;
    }

    /* Metric cards, accent color set per card */
    .metric-card {
        padding: 0.9rem 1rem;
        border-left: 5px solid #457b9d;
        border-radius: 6px;
        background: rgba(69, 123, 157, 0.06);
        margin-bottom: 0.75rem;
    }

    .metric-value {
        font-size: 1.7rem;
        font-weight: 650;
        line-height: 1.1;
    }

    .metric-label {
        font-size: 0.8rem;
        margin-top: 0.35rem;
        text-transform: uppercase;
        letter-spacing: 0.04em;
        opacity: 0.75;
    }

    /* Status badges */
    .status-badge {
        display: inline-block;
        padding: 0.15rem 0.6rem;
        border-radius: 12px;
        color: white;
        font-size: 0.8rem;
        font-weight: 600;
    }

    /* Email preview */
    .email-preview {
        white-space: pre-wrap;
        font-family: ui-monospace, monospace;
        padding: 1rem;
        border-radius: 8px;
        border: 1px solid rgba(128, 128, 128, 0.3);
    }

    .app-footer {
        margin-top: 3rem;
        text-align: center;
        font-size: 0.9rem;
        opacity: 0.8;
    }
    </style>
    """, unsafe_allow_html=True)

def create_metric_card(value, label, status=None):
    """Metric card whose accent follows an application status color."""
    accent = f' style="border-left-color: {STATUS_COLORS[status]};"' if status in STATUS_COLORS else ""
    return (
        f'<div class="metric-card"{accent}>'
        f'<div class="metric-value">{value}</div>'
        f'<div class="metric-label">{html.escape(label)}</div>'
        '</div>'
    )

def create_status_badge(status: str) -> str:
    """Colored badge for an application status."""
    color = STATUS_COLORS.get(status, "#6c757d")
    return f'<span class="status-badge" style="background-color: {color};">{html.escape(status.title())}</span>'

def create_email_preview(content: str) -> str:
    return f'<div class="email-preview">{html.escape(content)}</div>'
