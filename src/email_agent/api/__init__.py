"""
HTTP API for the Email Agent.
"""

from .server import create_app, main

__all__ = [
    'create_app',
    'main'
]
