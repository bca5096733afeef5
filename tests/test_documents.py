import io

import pandas as pd
import pytest

from email_agent.document_manager import (
    SAMPLE_RESUME_TEXT,
    CompanyRow,
    SpreadsheetFormatError,
    extract_resume_text,
    parse_company_file,
)


def test_csv_with_contact_column():
    rows = parse_company_file(b"Company,Email,Contact\nAcme,hr@acme.com,Bob\n", "companies.csv")

    assert rows == [CompanyRow(company_name="Acme", hr_email="hr@acme.com", recipient_name="Bob")]


def test_rows_missing_company_or_email_are_skipped():
    data = b"Company Name,HR Email\nAcme,hr@acme.com\n,nobody@x.com\nGlobex,\nInitech,jobs@initech.com\n"

    rows = parse_company_file(data, "list.CSV")

    assert [row.company_name for row in rows] == ["Acme", "Initech"]
    assert all(row.recipient_name is None for row in rows)


def test_missing_email_column_is_rejected():
    with pytest.raises(SpreadsheetFormatError):
        parse_company_file(b"Company,Website\nAcme,acme.com\n", "companies.csv")


def test_unsupported_extension_is_rejected():
    with pytest.raises(SpreadsheetFormatError):
        parse_company_file(b"Company,Email\n", "companies.json")


def test_empty_file_is_rejected():
    with pytest.raises(SpreadsheetFormatError):
        parse_company_file(b"", "companies.csv")


def test_excel_sheet_is_parsed():
    buffer = io.BytesIO()
    pd.DataFrame({
        "Company": ["Acme", "Globex"],
        "HR Email": ["hr@acme.com", "talent@globex.com"],
        "Recipient": ["Bob", ""],
    }).to_excel(buffer, index=False)

    rows = parse_company_file(buffer.getvalue(), "companies.xlsx")

    assert rows[0] == CompanyRow("Acme", "hr@acme.com", "Bob")
    assert rows[1].recipient_name is None


def test_broken_excel_file_is_rejected():
    with pytest.raises(SpreadsheetFormatError):
        parse_company_file(b"not a zip archive", "companies.xlsx")


def test_text_resume_is_decoded():
    assert extract_resume_text("Jane Doe\nEngineer\n".encode("utf-8"), "resume.txt") == "Jane Doe\nEngineer"


def test_other_resume_formats_use_sample_text():
    assert extract_resume_text(b"%PDF-1.4", "resume.pdf") == SAMPLE_RESUME_TEXT
