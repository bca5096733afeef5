"""
Request bodies of the HTTP API.

Field names are snake_case in Python and camelCase on the wire. Required
fields are optional here so the routes can answer with their own 400
messages instead of a generic validation error.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..email_composer import UserProfile
from ..mailer import EmailConfig

class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

class ContactFieldModel(CamelModel):
    id: str = ""
    label: str = ""
    value: str = ""
    type: str = "text"

class EmailPurposeModel(CamelModel):
    position: str = ""
    reason: str = ""

class UserProfileModel(CamelModel):
    name: str = ""
    contact_fields: List[ContactFieldModel] = Field(default_factory=list)
    email_purpose: EmailPurposeModel = Field(default_factory=EmailPurposeModel)

    def to_profile(self) -> UserProfile:
        return UserProfile.from_dict(self.model_dump(by_alias=True))

class GenerateRequest(CamelModel):
    company_name: Optional[str] = None
    hr_email: Optional[str] = None
    resume_text: Optional[str] = None
    user_profile: Optional[UserProfileModel] = None
    recipient_name: Optional[str] = None
    use_custom_template: bool = False
    custom_template: Optional[str] = None

class SenderConfigModel(CamelModel):
    service: str = "gmail"
    user: Optional[str] = None
    password: Optional[str] = None
    host: Optional[str] = None
    port: Optional[int] = None
    secure: bool = False

    def to_email_config(self) -> EmailConfig:
        return EmailConfig.from_dict(self.model_dump())

class SendRequest(CamelModel):
    to: Optional[str] = None
    subject: Optional[str] = None
    body: Optional[str] = None
    resume_file: Optional[str] = None
    sender_config: Optional[SenderConfigModel] = None

class ApiKeyRequest(CamelModel):
    api_key: Optional[str] = None
