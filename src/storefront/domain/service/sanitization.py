"""Domain service: Input Sanitization & Validation.

Turns raw checkout input (customer, addresses, notes) into sanitized
value objects, or raises a ValidationError subclass naming the field at
fault.  No side effects.

Free text goes through ``sanitize_text``: markup is stripped with bleach,
entities are decoded back to plain characters, and anything that could
still be read as markup or script (angle brackets, ``javascript:``,
inline ``on<event>=`` handlers) is removed.  The transform is repeated
until the text stops changing, which makes it idempotent.
"""

from __future__ import annotations

import html
import re
from collections.abc import Mapping
from typing import Any

import bleach
from email_validator import EmailNotValidError, validate_email

from storefront.domain.exceptions import (
    IncompleteAddressError,
    InvalidCustomerNameError,
    InvalidEmailError,
    InvalidPhoneError,
    ValidationError,
)
from storefront.domain.model.customer import Address, Customer

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 100
PHONE_MAX_LENGTH = 20
NOTES_MAX_LENGTH = 500

# (payload key, Address attribute, max length)
ADDRESS_FIELDS = (
    ("street", "street", 200),
    ("city", "city", 50),
    ("state", "state", 50),
    ("zipCode", "zip_code", 10),
    ("country", "country", 50),
)

_ANGLE_BRACKETS = re.compile(r"[<>]")
_SCRIPT_PROTOCOL = re.compile(r"javascript\s*:", re.IGNORECASE)
_EVENT_HANDLER = re.compile(r"\bon\w+\s*=", re.IGNORECASE)
_WHITESPACE = re.compile(r"\s+")
_PHONE_CHARS = re.compile(r"^\+?[\d\s\-()]+$")
_REGIONAL_PHONE = re.compile(r"^(254|0)?\d{9}$")


def _sanitize_once(value: str) -> str:
    text = bleach.clean(value, tags=set(), attributes={}, strip=True, strip_comments=True)
    text = html.unescape(text)
    text = _ANGLE_BRACKETS.sub("", text)
    text = _SCRIPT_PROTOCOL.sub("", text)
    text = _EVENT_HANDLER.sub("", text)
    return _WHITESPACE.sub(" ", text).strip()


def sanitize_text(value: Any) -> str:
    """Collapse ``value`` to plain text; non-strings become ``""``."""
    if not isinstance(value, str):
        return ""
    # A pass that changes the text only removes or decodes, so it gets shorter.
    current = value
    while True:
        cleaned = _sanitize_once(current)
        if cleaned == current:
            return current
        current = cleaned


def validate_customer_name(raw: Any) -> str:
    name = sanitize_text(raw)
    if not NAME_MIN_LENGTH <= len(name) <= NAME_MAX_LENGTH:
        raise InvalidCustomerNameError(
            f"Customer name must be between {NAME_MIN_LENGTH} and "
            f"{NAME_MAX_LENGTH} characters",
            field="customer.name",
        )
    return name


def validate_email_address(raw: Any) -> str:
    if not isinstance(raw, str) or not raw.strip():
        raise InvalidEmailError("Customer email is required", field="customer.email")
    candidate = raw.strip().lower()
    try:
        result = validate_email(candidate, check_deliverability=False)
    except EmailNotValidError as exc:
        raise InvalidEmailError(
            f"Please enter a valid email: {exc}", field="customer.email"
        ) from exc
    return result.normalized.lower()


def validate_phone(raw: Any) -> str | None:
    """Return the trimmed phone number, or None when none was given."""
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return None
    if not isinstance(raw, str):
        raise InvalidPhoneError("Phone number must be a string", field="customer.phone")
    phone = raw.strip()
    if len(phone) > PHONE_MAX_LENGTH or not _PHONE_CHARS.match(phone):
        raise InvalidPhoneError(f"Invalid phone number: {phone!r}", field="customer.phone")
    digits = re.sub(r"\D", "", phone)
    if not _REGIONAL_PHONE.match(digits):
        raise InvalidPhoneError(f"Invalid phone number: {phone!r}", field="customer.phone")
    return phone


def validate_customer(raw: Any) -> Customer:
    if not isinstance(raw, Mapping):
        raise InvalidCustomerNameError("Customer details are required", field="customer")
    return Customer(
        name=validate_customer_name(raw.get("name")),
        email=validate_email_address(raw.get("email")),
        phone=validate_phone(raw.get("phone")),
    )


def validate_address(raw: Any, field: str) -> Address:
    """Validate an address payload; ``field`` prefixes error field names."""
    if not isinstance(raw, Mapping):
        raise IncompleteAddressError(f"{field} must be an object", field=field)
    values: dict[str, str] = {}
    for key, attr, max_length in ADDRESS_FIELDS:
        value = sanitize_text(raw.get(key))
        if not value:
            raise IncompleteAddressError(f"{field}.{key} is required", field=f"{field}.{key}")
        if len(value) > max_length:
            raise IncompleteAddressError(
                f"{field}.{key} cannot be more than {max_length} characters",
                field=f"{field}.{key}",
            )
        values[attr] = value
    return Address(**values)


def validate_notes(raw: Any) -> str | None:
    if raw is None:
        return None
    if not isinstance(raw, str):
        raise ValidationError("Notes must be text", field="notes")
    notes = sanitize_text(raw)
    if len(notes) > NOTES_MAX_LENGTH:
        raise ValidationError(
            f"Notes cannot be more than {NOTES_MAX_LENGTH} characters", field="notes"
        )
    return notes or None
