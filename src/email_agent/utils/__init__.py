"""
Utility modules for the Email Agent.

This package provides logging and pacing utilities.
"""

from .logger import (
    setup_logging,
    get_logger,
    get_progress_logger,
    get_ai_logger,
    get_email_logger,
    get_mail_logger,
    get_ui_logger,
    get_api_logger,
    get_workflow_logger,
    AgentLogger,
    ProgressLogger
)

from .pacing import (
    PacingPolicy,
    FixedIntervalPacer,
    TokenBucketPacer,
    TokenBucketConfig
)

__all__ = [
    # Logging
    'setup_logging',
    'get_logger',
    'get_progress_logger',
    'get_ai_logger',
    'get_email_logger',
    'get_mail_logger',
    'get_ui_logger',
    'get_api_logger',
    'get_workflow_logger',
    'AgentLogger',
    'ProgressLogger',

    # Pacing
    'PacingPolicy',
    'FixedIntervalPacer',
    'TokenBucketPacer',
    'TokenBucketConfig'
]
