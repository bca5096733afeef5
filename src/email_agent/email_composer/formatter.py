"""
Reflow formatter for email drafts.

Model output arrives with arbitrary line breaks. ``reflow`` throws the
original structure away and rebuilds a conventional layout from textual
cues: an optional subject line, the greeting, short paragraphs, the closing,
the sender name and a contact block with one "Label: value" per line. Every
section is separated by exactly one blank line.

Sentences are found by splitting on a period followed by whitespace, so
abbreviations, decimals and dotted hosts followed by a space start a new
sentence. Existing drafts depend on that behaviour.

Contact lines lose their trailing period, so a contact block followed by more
prose before the closing is not stable: a second pass joins the prose onto
the last contact line. Drafts that keep contact details after the closing
reflow to the same text every time.
"""

import re
from typing import List, Optional, Tuple

SUBJECT_PREFIX = "Subject:"
CLOSING_LINE = "Best regards,"
CLOSING_PHRASES = ("Best regards", "Sincerely")
CONTACT_LABELS = ("Email:", "Phone:", "LinkedIn:", "GitHub:", "Website:")
PARAGRAPH_BREAK_PHRASES = ("I am excited", "I have attached", "Please feel free")
SENTENCES_PER_PARAGRAPH = 2

_WHITESPACE = re.compile(r"\s+")
_GREETING = re.compile(r"(Dear [^,]+,)", re.IGNORECASE)
_SENTENCE_BOUNDARY = re.compile(r"\.\s+")
_CONTACT_BOUNDARY = re.compile("(?=" + "|".join(re.escape(label) for label in CONTACT_LABELS) + ")")
_TRAILING_PERIOD = re.compile(r"\.$")
_EXCESS_NEWLINES = re.compile(r"\n{3,}")

def _find_closing(unit: str) -> Optional[Tuple[int, str]]:
    """Position and text of the earliest closing phrase in ``unit``."""
    found = [(unit.find(phrase), phrase) for phrase in CLOSING_PHRASES if phrase in unit]
    return min(found) if found else None

def _terminate(sentence: str) -> str:
    """Append a period unless the sentence already ends in terminal punctuation."""
    return sentence if sentence.endswith((".", "!", "?")) else sentence + "."

def _has_contact_label(unit: str) -> bool:
    return any(label in unit for label in CONTACT_LABELS)

def _contact_parts(text: str) -> List[str]:
    """Split before every contact label; trim and drop one trailing period."""
    parts = (_TRAILING_PERIOD.sub("", part.strip()) for part in _CONTACT_BOUNDARY.split(text))
    return [part for part in parts if part]

class _SectionBuilder:
    """Accumulates sections while walking the sentence units in order."""

    def __init__(self):
        self.sections: List[str] = []
        self.paragraph: List[str] = []
        self.contacts: List[str] = []

    def add(self, section: str) -> None:
        self.sections.append(section)

    def flush_paragraph(self) -> None:
        if self.paragraph:
            self.sections.append(" ".join(self.paragraph))
            self.paragraph = []

    def flush_contacts(self) -> None:
        if self.contacts:
            self.sections.append("\n".join(self.contacts))
            self.contacts = []

    def flush(self) -> None:
        self.flush_contacts()
        self.flush_paragraph()

    def closing(self, unit: str, position: int, phrase: str) -> None:
        lead = unit[:position].strip()
        self.flush_contacts()
        if lead:
            self.paragraph.append(_terminate(lead))
        self.flush_paragraph()

        self.add(CLOSING_LINE)
        parts = _CONTACT_BOUNDARY.split(unit[position + len(phrase):])
        name = parts[0].strip().lstrip(",").strip().rstrip(",").strip()
        if name:
            self.add(name)
        self.contacts.extend(_contact_parts("".join(parts[1:])))

    def contact(self, unit: str) -> None:
        # Consecutive contact units build a single block
        self.flush_paragraph()
        self.contacts.extend(_contact_parts(unit))

    def sentence(self, unit: str, is_last: bool) -> None:
        self.flush_contacts()
        unit = _terminate(unit)
        self.paragraph.append(unit)

        if (len(self.paragraph) >= SENTENCES_PER_PARAGRAPH
                or any(phrase in unit for phrase in PARAGRAPH_BREAK_PHRASES)
                or is_last):
            self.flush_paragraph()

def split_subject_line(text: str) -> Tuple[str, str]:
    """Return (subject line, rest) when ``text`` starts with a subject."""
    if text.startswith(SUBJECT_PREFIX):
        subject, _, rest = text.partition("\n")
        return subject, rest
    return "", text

def reflow(raw_text: str) -> str:
    """Re-segment an email draft into the canonical layout."""
    subject, body = split_subject_line(raw_text.strip())
    subject_block = f"{subject}\n\n" if subject else ""

    body = _WHITESPACE.sub(" ", body).strip()

    builder = _SectionBuilder()

    greeting = _GREETING.search(body)
    if greeting:
        builder.add(greeting.group(1))
        body = body.replace(greeting.group(1), "", 1).strip()

    units = _SENTENCE_BOUNDARY.split(body)
    last_index = len(units) - 1

    for index, unit in enumerate(units):
        unit = unit.strip()
        if not unit:
            continue

        closing = _find_closing(unit)
        if closing is not None:
            builder.closing(unit, *closing)
        elif _has_contact_label(unit):
            builder.contact(unit)
        else:
            builder.sentence(unit, index == last_index)

    builder.flush()

    sections = "\n\n".join(s.strip() for s in builder.sections if s.strip())
    return _EXCESS_NEWLINES.sub("\n\n", subject_block + sections).strip()
