"""
Resume text extraction.

Plain text resumes are decoded directly. Other formats are not parsed yet
and yield a fixed sample resume so the rest of the workflow can run.
"""

from pathlib import Path
import logging

logger = logging.getLogger(__name__)

TEXT_EXTENSIONS = {".txt", ".md"}

SAMPLE_RESUME_TEXT = """John Doe
Software Developer
Email: john.doe@email.com | Phone: +1-234-567-8900

PROFESSIONAL SUMMARY:
Experienced developer with 3+ years of expertise in building scalable web applications.

TECHNICAL SKILLS:
- Programming Languages: Java, JavaScript, Python
- Databases: MySQL, PostgreSQL, MongoDB
- Tools: Git, Docker, Jenkins

PROFESSIONAL EXPERIENCE:
Software Developer | Tech Solutions Inc. | 2022 - Present
- Developed and maintained REST APIs
- Optimized database queries reducing response time by 40%

EDUCATION:
Bachelor of Technology in Computer Science
XYZ University | 2021"""

def extract_resume_text(data: bytes, filename: str) -> str:
    """Return the plain text of an uploaded resume."""
    extension = Path(filename or "").suffix.lower()

    if extension in TEXT_EXTENSIONS:
        text = data.decode("utf-8", errors="replace").strip()
        if text:
            return text
        logger.warning(f"Resume {filename} is empty, using sample resume text")
        return SAMPLE_RESUME_TEXT

    # TODO: parse PDF and Word resumes instead of returning the sample text
    logger.warning(f"Text extraction for '{extension or 'unknown'}' files is not supported, using sample resume text")
    return SAMPLE_RESUME_TEXT
