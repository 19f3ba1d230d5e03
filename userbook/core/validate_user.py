"""User Form Validation: turns raw form strings into a well-formed User.

Invariants:
    - validate_user_input is PURE: no IO, deterministic
    - Empty name/email is reported before the email format is checked
    - Values are passed through unchanged (no trimming, no lowercasing)
    - The returned User never carries an id
"""

import re

from userbook.core.domain_types import RejectionReason, User
from userbook.core.errors import UserInputError
from userbook.core.parse_int import parse_int64


EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9._%+\-]+@[a-zA-Z0-9.\-]+\.[a-zA-Z]{2,}")


def validate_user_input(name: str, email: str, age_raw: str) -> User:
    """Validate the three form fields; raise UserInputError on the first failure."""
    if name == "" or email == "":
        raise UserInputError(RejectionReason.EMPTY_FIELD)

    if not EMAIL_PATTERN.fullmatch(email):
        raise UserInputError(RejectionReason.INVALID_EMAIL_FORMAT)

    age = parse_int64(age_raw)
    if age is None:
        raise UserInputError(RejectionReason.INVALID_AGE)
    if age <= 0:
        raise UserInputError(RejectionReason.NON_POSITIVE_AGE)

    return User(name=name, email=email, age=age)
