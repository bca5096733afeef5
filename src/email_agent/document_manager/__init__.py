"""
Document management for the Email Agent.

This module parses the uploaded company sheet and the resume.
"""

from .spreadsheet import (
    CompanyRow,
    SpreadsheetFormatError,
    parse_company_file,
    rows_from_frame
)

from .resume import (
    SAMPLE_RESUME_TEXT,
    extract_resume_text
)

__all__ = [
    'CompanyRow',
    'SpreadsheetFormatError',
    'parse_company_file',
    'rows_from_frame',
    'SAMPLE_RESUME_TEXT',
    'extract_resume_text'
]
