"""
Application tracking for the Email Agent.
"""

from .applications import (
    AnalyticsSummary,
    ApplicationRecord,
    ApplicationStatus,
    ApplicationTracker,
    EXPORT_COLUMNS
)

__all__ = [
    'AnalyticsSummary',
    'ApplicationRecord',
    'ApplicationStatus',
    'ApplicationTracker',
    'EXPORT_COLUMNS'
]
