"""
Lead field rules and sanitization.

The same predicates back the browser-side form controller and the relay, so a
lead the form accepts is never rejected by the server for a different reason.
"""

import re
import html

from leadrelay.shared.relay.errors import MissingField, InvalidName, InvalidContact
from leadrelay.shared.relay.schemas import LeadRequest, LeadSubmission


MIN_NAME_LENGTH = 2
MAX_NAME_LENGTH = 50
TRUNCATION_MARKER = "..."

# Latin and Cyrillic letters (including ё/Ё) and whitespace
NAME_PATTERN = re.compile(r"[а-яёА-ЯЁa-zA-Z\s]+")
# Telegram username: 5-32 chars, starts with a letter, no trailing underscore
HANDLE_PATTERN = re.compile(r"[A-Za-z][A-Za-z0-9_]{3,30}[A-Za-z0-9]")


def clean_handle(contact: str) -> str:
    """Strips one leading @ from a Telegram handle."""
    if contact.startswith("@"):
        return contact[1:]
    return contact


def validate_name(name: str) -> bool:
    if not isinstance(name, str):
        return False
    if len(name) < MIN_NAME_LENGTH or len(name) > MAX_NAME_LENGTH:
        return False
    return NAME_PATTERN.fullmatch(name) is not None


def validate_contact(contact: str) -> bool:
    if not isinstance(contact, str):
        return False
    return HANDLE_PATTERN.fullmatch(clean_handle(contact)) is not None


def sanitize_message(message: str, max_length: int) -> str:
    """
    Escape HTML in a free-text message and cut it to max_length characters.

    Args:
        message: Raw message text
        max_length: Maximum length of the escaped text before the marker

    Returns:
        Escaped text, with TRUNCATION_MARKER appended when it was cut
    """
    if not message:
        return ""
    escaped = html.escape(message, quote=True)
    if len(escaped) > max_length:
        escaped = escaped[:max_length] + TRUNCATION_MARKER
    return escaped


def validate_lead(lead: LeadRequest, max_message_length: int) -> LeadSubmission:
    """
    Apply the relay's field rules to a parsed request, in the order the
    browser reports them.

    Raises:
        MissingField, InvalidName, InvalidContact
    """
    if not lead.name or not lead.contact:
        raise MissingField()

    if not validate_name(lead.name):
        raise InvalidName()

    if not validate_contact(lead.contact):
        raise InvalidContact()

    return LeadSubmission(
        name=lead.name,
        contact=clean_handle(lead.contact),
        message=sanitize_message(lead.message, max_message_length),
    )
