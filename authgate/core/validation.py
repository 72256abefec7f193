"""
Password composition rules and strength scoring for the signup form.
"""
import re
from typing import Optional

from authgate.models.auth import PasswordStrength

SPECIAL_CHARACTERS = "@$!%*?&"

_UPPER = re.compile(r"[A-Z]")
_LOWER = re.compile(r"[a-z]")
_DIGIT = re.compile(r"[0-9]")
_SPECIAL = re.compile(r"[@$!%*?&]")

MIN_LENGTH = 8
STRONG_LENGTH = 12
MAX_SCORE = 6

WEAK = ("Weak", "#ef4444")
MEDIUM = ("Medium", "#f59e0b")
STRONG = ("Strong", "#22c55e")


def validate_password(password: str) -> Optional[str]:
    """
    Check password composition, fail-fast.

    Rules are evaluated in order and the first failing rule's message is
    returned. Returns None when the password satisfies every rule.
    """
    if len(password) < MIN_LENGTH:
        return f"Password must be at least {MIN_LENGTH} characters."
    if not _UPPER.search(password):
        return "Password must contain an uppercase letter."
    if not _LOWER.search(password):
        return "Password must contain a lowercase letter."
    if not _DIGIT.search(password):
        return "Password must contain a number."
    if not _SPECIAL.search(password):
        return "Password must contain a special character."
    return None


def score_password(password: str) -> PasswordStrength:
    """
    Count the satisfied strength predicates (0-6) and map them to a label.

    Predicates: length >= 8, length >= 12, uppercase, lowercase, digit,
    special character.
    """
    predicates = (
        len(password) >= MIN_LENGTH,
        len(password) >= STRONG_LENGTH,
        bool(_UPPER.search(password)),
        bool(_LOWER.search(password)),
        bool(_DIGIT.search(password)),
        bool(_SPECIAL.search(password)),
    )
    score = sum(predicates)

    if score <= 2:
        label, color = WEAK
    elif score <= 4:
        label, color = MEDIUM
    else:
        label, color = STRONG

    return PasswordStrength(score=score, label=label, color=color)
