"""
Spreadsheet and CSV parsing for the list of target companies.

Columns are located by fuzzy header matching: the first header containing
"company" or "name" holds the company, the first containing "email" or "hr"
holds the HR address, and an optional header containing "recipient",
"contact" or "person" holds the recipient name.
"""

import io
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence
import logging

import pandas as pd

logger = logging.getLogger(__name__)

CSV_EXTENSIONS = {".csv"}
EXCEL_EXTENSIONS = {".xlsx", ".xls"}

COMPANY_HINTS = ("company", "name")
EMAIL_HINTS = ("email", "hr")
RECIPIENT_HINTS = ("recipient", "contact", "person")

class SpreadsheetFormatError(ValueError):
    """The uploaded file cannot be turned into company rows."""

@dataclass
class CompanyRow:
    """One target company from the uploaded sheet."""
    company_name: str
    hr_email: str
    recipient_name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "companyName": self.company_name,
            "hrEmail": self.hr_email,
            "recipientName": self.recipient_name,
        }

def _find_column(headers: Sequence[str], hints: Sequence[str]) -> Optional[int]:
    for index, header in enumerate(headers):
        if any(hint in header for hint in hints):
            return index
    return None

def _cell(value: Any) -> str:
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return ""
    return str(value).strip()

def _read_frame(data: bytes, extension: str) -> pd.DataFrame:
    if extension in CSV_EXTENSIONS:
        return pd.read_csv(
            io.BytesIO(data),
            dtype=str,
            keep_default_na=False,
            skipinitialspace=True,
            skip_blank_lines=True
        )
    if extension in EXCEL_EXTENSIONS:
        return pd.read_excel(io.BytesIO(data), sheet_name=0, dtype=str)
    raise SpreadsheetFormatError(
        f"Unsupported file type '{extension or 'unknown'}'. Upload a .csv, .xlsx or .xls file"
    )

def rows_from_frame(frame: pd.DataFrame) -> List[CompanyRow]:
    """Map a parsed sheet onto CompanyRow objects, preserving row order."""
    headers = [str(column).strip().lower() for column in frame.columns]

    company_index = _find_column(headers, COMPANY_HINTS)
    email_index = _find_column(headers, EMAIL_HINTS)
    recipient_index = _find_column(headers, RECIPIENT_HINTS)

    if company_index is None or email_index is None:
        raise SpreadsheetFormatError(
            "Could not find company name or email columns. Please ensure your file has "
            "columns containing 'company'/'name' and 'email'/'hr'"
        )

    companies = []
    for values in frame.itertuples(index=False, name=None):
        company_name = _cell(values[company_index])
        hr_email = _cell(values[email_index])
        if not company_name or not hr_email:
            continue

        recipient = _cell(values[recipient_index]) if recipient_index is not None else ""
        companies.append(CompanyRow(
            company_name=company_name,
            hr_email=hr_email,
            recipient_name=recipient or None
        ))

    return companies

def parse_company_file(data: bytes, filename: str) -> List[CompanyRow]:
    """
    Parse an uploaded CSV or Excel file into company rows.

    Args:
        data: Raw file bytes
        filename: Original file name, used for its extension

    Returns:
        CompanyRow list in sheet order; rows missing a company or email are skipped

    Raises:
        SpreadsheetFormatError: unreadable file or missing required columns
    """
    extension = Path(filename or "").suffix.lower()
    if not data or not data.strip():
        raise SpreadsheetFormatError("The uploaded file is empty")

    try:
        frame = _read_frame(data, extension)
    except SpreadsheetFormatError:
        raise
    except (ValueError, zipfile.BadZipFile) as e:
        logger.error(f"Error parsing {filename}: {e}")
        raise SpreadsheetFormatError(
            f"Failed to parse {filename}. Please ensure it's a valid CSV or Excel file"
        ) from e

    companies = rows_from_frame(frame)
    logger.info(f"Parsed {len(companies)} companies from {filename}")
    return companies
