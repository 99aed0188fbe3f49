# File: common/validators/email.py

import re
from typing import Optional

EMAIL_REGEX = re.compile(
    r"^[a-zA-Z0-9_.+-]+@[a-zA-Z0-9-]+\.[a-zA-Z0-9-.]+$"
)
INVALID_EMAIL_MESSAGE = "email must be an email"


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_REGEX.fullmatch(email.strip()))


def validate_admin_email(email: Optional[str]) -> Optional[str]:
    """
    Request-model hook for admin emails. Returns the stripped address, passes
    None through for partial updates and raises ValueError with the message
    the validation envelope reports.
    """
    if email is None:
        return None
    if not is_valid_email(email):
        raise ValueError(INVALID_EMAIL_MESSAGE)
    return email.strip()
