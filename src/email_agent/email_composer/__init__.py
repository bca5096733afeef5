"""
Email Composer Module

This module drafts personalized outreach emails: sender profile handling,
prompt construction, generation with retry and fallback, and the reflow
formatter that gives every draft the same layout.
"""

from .profile import (
    ContactKind,
    ContactField,
    EmailPurpose,
    UserProfile,
    contact_lines,
    default_contact_fields,
    render_contact_block
)

from .formatter import reflow

from .prompts import (
    apply_custom_template,
    build_generation_prompt,
    extract_prompt_field,
    split_subject
)

from .composer import (
    DraftComposer,
    EmailDrafter,
    GenerationError,
    ProfileIncompleteError,
    build_fallback_email
)

__all__ = [
    'ContactKind',
    'ContactField',
    'EmailPurpose',
    'UserProfile',
    'contact_lines',
    'default_contact_fields',
    'render_contact_block',
    'reflow',
    'apply_custom_template',
    'build_generation_prompt',
    'extract_prompt_field',
    'split_subject',
    'DraftComposer',
    'EmailDrafter',
    'GenerationError',
    'ProfileIncompleteError',
    'build_fallback_email'
]
