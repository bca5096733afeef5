"""
Streamlit dashboard for the Email Agent.
"""
