"""
UI Components for the Email Agent dashboard.
"""

from .compose import ComposeTab
from .applications import ApplicationsTab
from .analytics import AnalyticsTab
from .settings import SettingsTab

__all__ = [
    'ComposeTab',
    'ApplicationsTab',
    'AnalyticsTab',
    'SettingsTab'
]
