"""
Job Application Email Agent

Drafts personalized outreach emails for a list of target companies:
- Company sheet and resume ingestion
- Draft generation through a hosted language model with retry and fallback
- Reflow formatting into a consistent email layout
- Sequential, paced sending over SMTP
- In-session application tracking and analytics

Nothing is persisted on the server; each dashboard session or API app owns
its own state.
"""

__version__ = "1.0.0"
