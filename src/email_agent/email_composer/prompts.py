"""
Prompt construction and template substitution for outreach drafts.
"""

import re
from typing import Optional, Tuple

from .profile import UserProfile
from ..document_manager.spreadsheet import CompanyRow

DEFAULT_RECIPIENT = "Hiring Manager"
DEFAULT_REASON = "Seeking opportunity to contribute to the team"

TEMPLATE_TOKENS = ("[RECIPIENT_NAME]", "[COMPANY_NAME]", "[YOUR_NAME]", "[CONTACT_INFO]")

_SUBJECT_FIELD = re.compile(r"Subject:\s*(.+)")
_SUBJECT_BLOCK = re.compile(r"Subject:.*?(?:\n\n?|$)")

GENERATION_PROMPT = """You are writing a professional job application email. Follow these instructions precisely:

SENDER INFORMATION:
- Name: {name}
- Position applying for: {position}
- Purpose: {reason}

TONE & STYLE:
- Be polite, concise, and professional
- Keep it VERY SHORT - maximum 3-4 sentences total for the entire email body
- Focus on providing value to the company, not just asking for a role
- Write naturally so it reads like a person wrote it
- Maximum 50-60 words for the entire email body

EMAIL STRUCTURE:
- Subject line: Contribution to {company} as a {position}
- Greeting: Dear {recipient},
- Sentence 1: Brief interest statement (10-12 words max)
- Sentence 2: One relevant skill or experience mention (12-15 words max)
- Sentence 3: Resume attachment and looking forward (10-12 words max)
- Closing: "Best regards,"

CONTENT RULES:
- Write content specific to the position: {position}
- Only mention skills and experience the sender actually has
- Do not invent experience, skills or technologies
- If it is a non-technical role, keep the content general and professional

SIGNATURE:
You MUST use these exact values for the signature:

Best regards,
{name}

{contact_info}

- Use exactly the name "{name}"
- Use exactly the contact info "{contact_info_inline}"
- Never substitute different contact details or placeholder names

OUTPUT FORMAT:
- Clean plain text, no Markdown, quotation marks or commentary
- Blank lines between paragraphs
- One contact detail per line in the signature

Generate the email now using:
Company Name: {company}
HR Contact: {hr_email}
Recipient Name: {recipient}

Additional context from resume:
{resume_text}"""

def build_generation_prompt(profile: UserProfile, company: CompanyRow, resume_text: str) -> str:
    """Build the instruction sent to the language model for one company."""
    contact_info = profile.contact_block()
    return GENERATION_PROMPT.format(
        name=profile.name,
        position=profile.email_purpose.position,
        reason=profile.email_purpose.reason or DEFAULT_REASON,
        company=company.company_name,
        hr_email=company.hr_email,
        recipient=company.recipient_name or DEFAULT_RECIPIENT,
        contact_info=contact_info,
        contact_info_inline=contact_info.replace("\n", ", "),
        resume_text=resume_text
    )

def extract_prompt_field(prompt: str, label: str) -> Optional[str]:
    """Value of a "Label: value" line in a prompt, if present."""
    match = re.search(rf"{re.escape(label)}: ([^\n]+)", prompt)
    return match.group(1) if match else None

def apply_custom_template(template: str, profile: UserProfile, company: CompanyRow) -> str:
    """Substitute the template tokens and make sure a subject line exists."""
    substitutions = {
        "[RECIPIENT_NAME]": company.recipient_name or DEFAULT_RECIPIENT,
        "[COMPANY_NAME]": company.company_name,
        "[YOUR_NAME]": profile.name,
        "[CONTACT_INFO]": profile.contact_block(),
    }
    processed = template
    for token, value in substitutions.items():
        processed = processed.replace(token, value)

    if "Subject:" not in processed:
        processed = (
            f"Subject: Application for {profile.email_purpose.position} Position at {company.company_name}"
            f"\n\n{processed}"
        )
    return processed

def split_subject(email_content: str, position: str = "") -> Tuple[str, str]:
    """
    Separate the subject from a formatted draft.

    Returns:
        (subject, body) where body no longer contains the subject line
    """
    match = _SUBJECT_FIELD.search(email_content)
    if match:
        subject = match.group(1).strip()
        body = _SUBJECT_BLOCK.sub("", email_content, count=1)
        return subject, body
    return f"Application for {position} Role", email_content
