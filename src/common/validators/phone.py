# File: common/validators/phone.py

from typing import Optional

import phonenumbers

INVALID_PHONE_MESSAGE = "phone must be a valid phone number"
PHONE_FORMAT_MESSAGE = "phone must be in international format (e.g. +989123456789)"


def validate_and_format_phone(phone: str) -> str:
    """
    Normalises an admin phone number to E.164 so the unique index on
    `admins.phone` compares like with like.

    Raises:
        ValueError: unparseable or not a valid number.
    """
    try:
        parsed = phonenumbers.parse(phone.strip())
    except phonenumbers.NumberParseException:
        raise ValueError(PHONE_FORMAT_MESSAGE)
    if not phonenumbers.is_valid_number(parsed):
        raise ValueError(INVALID_PHONE_MESSAGE)
    return phonenumbers.format_number(parsed, phonenumbers.PhoneNumberFormat.E164)


def validate_admin_phone(phone: Optional[str]) -> Optional[str]:
    return validate_and_format_phone(phone) if phone is not None else None
