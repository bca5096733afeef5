"""
Sender profile: name, contact details and the purpose of the outreach.

The profile lives for one dashboard session or one HTTP request. Contact
fields are kept in display order; only fields with both a label and a value
are ever rendered into an email.
"""

from dataclasses import dataclass, field
from enum import Enum
from itertools import count
from typing import Any, Dict, List, Optional

_custom_field_ids = count(1)

class ContactKind(str, Enum):
    EMAIL = "email"
    PHONE = "phone"
    URL = "url"
    TEXT = "text"

@dataclass
class ContactField:
    """One free-form "Label: value" pair of the signature."""
    id: str
    label: str
    value: str
    kind: ContactKind = ContactKind.TEXT

    @property
    def is_complete(self) -> bool:
        return bool(self.label.strip() and self.value.strip())

    def render(self) -> str:
        return f"{self.label}: {self.value}"

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "label": self.label, "value": self.value, "type": self.kind.value}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ContactField":
        kind = data.get("type") or data.get("kind") or ContactKind.TEXT.value
        try:
            kind = ContactKind(kind)
        except ValueError:
            kind = ContactKind.TEXT
        return cls(
            id=str(data.get("id") or new_contact_field_id()),
            label=data.get("label") or "",
            value=data.get("value") or "",
            kind=kind
        )

@dataclass
class EmailPurpose:
    position: str = ""
    reason: str = ""

@dataclass
class UserProfile:
    """Who is sending the outreach and why."""
    name: str = ""
    contact_fields: List[ContactField] = field(default_factory=list)
    email_purpose: EmailPurpose = field(default_factory=EmailPurpose)

    @classmethod
    def with_default_fields(cls, name: str = "") -> "UserProfile":
        return cls(name=name, contact_fields=default_contact_fields())

    def add_contact_field(self, label: str = "", value: str = "", kind: ContactKind = ContactKind.TEXT) -> ContactField:
        contact = ContactField(id=new_contact_field_id(), label=label, value=value, kind=kind)
        self.contact_fields.append(contact)
        return contact

    def update_contact_field(self, field_id: str, **updates) -> Optional[ContactField]:
        for contact in self.contact_fields:
            if contact.id == field_id:
                for key, value in updates.items():
                    if hasattr(contact, key):
                        setattr(contact, key, value)
                return contact
        return None

    def remove_contact_field(self, field_id: str) -> bool:
        before = len(self.contact_fields)
        self.contact_fields = [c for c in self.contact_fields if c.id != field_id]
        return len(self.contact_fields) != before

    def contact_lines(self) -> List[str]:
        return contact_lines(self.contact_fields)

    def contact_block(self) -> str:
        return render_contact_block(self.contact_fields)

    def missing_fields(self, require_contact: bool = True) -> List[str]:
        """Human readable list of what blocks generation."""
        missing = []
        if not self.name.strip():
            missing.append("Please enter your full name in the profile")
        if not self.email_purpose.position.strip():
            missing.append("Please specify the position you're applying for")
        if require_contact and not any(c.value.strip() for c in self.contact_fields):
            missing.append("Please add at least one contact method (email, phone, etc.)")
        return missing

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "contactFields": [c.to_dict() for c in self.contact_fields],
            "emailPurpose": {
                "position": self.email_purpose.position,
                "reason": self.email_purpose.reason
            }
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UserProfile":
        purpose = data.get("emailPurpose") or data.get("email_purpose") or {}
        fields = data.get("contactFields") or data.get("contact_fields") or []
        return cls(
            name=data.get("name") or "",
            contact_fields=[ContactField.from_dict(f) for f in fields],
            email_purpose=EmailPurpose(
                position=purpose.get("position") or "",
                reason=purpose.get("reason") or ""
            )
        )

def new_contact_field_id() -> str:
    return f"custom-{next(_custom_field_ids)}"

def default_contact_fields() -> List[ContactField]:
    return [
        ContactField(id="email", label="Email", value="", kind=ContactKind.EMAIL),
        ContactField(id="phone", label="Phone", value="", kind=ContactKind.PHONE),
        ContactField(id="linkedin", label="LinkedIn", value="", kind=ContactKind.URL),
        ContactField(id="github", label="GitHub", value="", kind=ContactKind.URL),
    ]

def contact_lines(fields: List[ContactField]) -> List[str]:
    """Rendered lines for complete fields, in their original order."""
    return [c.render() for c in fields if c.is_complete]

def render_contact_block(fields: List[ContactField]) -> str:
    return "\n".join(contact_lines(fields))
