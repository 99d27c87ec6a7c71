# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
Password generation and strength scoring.  Pure functions, no storage.

Randomness comes from the OS CSPRNG (``secrets``) throughout, including the
shuffle.
"""

import math
import re
import secrets
import string

from core.errors import InvalidInputError

_LOWERCASE = string.ascii_lowercase
_UPPERCASE = string.ascii_uppercase
_NUMBERS   = string.digits
_SYMBOLS   = "!@#$%^&*()_+-=[]{}|;:,.<>?"

# Characters easily confused with one another when read aloud or printed
_AMBIGUOUS = set("0O1lI|`")

_COMMON_SEQUENCES = re.compile(r"123|abc|qwe|asd|zxc", re.IGNORECASE)
_COMMON_WORDS = re.compile(
    r"password|admin|login|user|test|welcome|letmein|monkey|dragon|master|shadow|superman|batman",
    re.IGNORECASE,
)
_REPEATS = re.compile(r"(.)\1{2,}")
_YEARS = re.compile(r"19\d{2}|20\d{2}")


def _strip_ambiguous(chars: str) -> str:
    return "".join(c for c in chars if c not in _AMBIGUOUS)


def _shuffle(chars: list[str]) -> None:
    """In-place Fisher–Yates shuffle driven by ``secrets``."""
    for i in range(len(chars) - 1, 0, -1):
        j = secrets.randbelow(i + 1)
        chars[i], chars[j] = chars[j], chars[i]


def generate_password(
    length: int = 16,
    include_uppercase: bool = True,
    include_lowercase: bool = True,
    include_numbers: bool = True,
    include_symbols: bool = True,
    exclude_ambiguous: bool = False,
) -> dict:
    """
    Random password with at least one character from every selected set.

    Returns ``{"password": str, "strength": int}``.
    """
    selected = [
        (include_lowercase, _LOWERCASE),
        (include_uppercase, _UPPERCASE),
        (include_numbers, _NUMBERS),
        (include_symbols, _SYMBOLS),
    ]

    pool = ""
    required: list[str] = []
    for enabled, chars in selected:
        if not enabled:
            continue
        if exclude_ambiguous:
            chars = _strip_ambiguous(chars)
        pool += chars
        # Guarantee one character from each chosen class
        required.append(secrets.choice(chars))

    if not pool:
        raise InvalidInputError("No character sets selected for password generation")

    password_chars = required[:length]
    while len(password_chars) < length:
        password_chars.append(secrets.choice(pool))
    # Avoid predictable positions for the guaranteed characters
    _shuffle(password_chars)
    password = "".join(password_chars)

    return {
        "password": password,
        "strength": _generated_strength(
            password,
            include_lowercase,
            include_uppercase,
            include_numbers,
            include_symbols,
            exclude_ambiguous,
        ),
    }


def _generated_strength(
    password: str,
    lowercase: bool,
    uppercase: bool,
    numbers: bool,
    symbols: bool,
    excludes_ambiguous: bool,
) -> int:
    """40 points for length, 15 per selected class present, +5 for no ambiguity."""
    score = min(len(password) * 2.5, 40)

    present = 0
    if lowercase and re.search(r"[a-z]", password):
        present += 1
    if uppercase and re.search(r"[A-Z]", password):
        present += 1
    if numbers and re.search(r"\d", password):
        present += 1
    if symbols and re.search(r"[^a-zA-Z0-9]", password):
        present += 1
    score += present * 15

    if excludes_ambiguous:
        score += 5

    return min(100, math.floor(score + 0.5))


def calculate_password_strength(password: str) -> dict:
    """
    Score an arbitrary password 0-100 and explain the score.

    Returns ``{"strength": int, "feedback": [str, ...]}``; the first feedback
    line is always the overall verdict.
    """
    feedback: list[str] = []

    # Length: up to 40 points
    score = min(len(password) * 2.5, 40)
    if len(password) < 8:
        feedback.append("Password should be at least 8 characters long")
    elif len(password) < 12:
        feedback.append("Consider using 12+ characters for better security")
    elif len(password) < 16:
        feedback.append("Excellent length! Consider 16+ characters for maximum security")

    # Diversity: 15 points per character class, up to 60
    has_lower = bool(re.search(r"[a-z]", password))
    has_upper = bool(re.search(r"[A-Z]", password))
    has_digit = bool(re.search(r"\d", password))
    has_symbol = bool(re.search(r"[^a-zA-Z0-9]", password))
    score += sum((has_lower, has_upper, has_digit, has_symbol)) * 15

    if not has_lower:
        feedback.append("Add lowercase letters")
    if not has_upper:
        feedback.append("Add uppercase letters")
    if not has_digit:
        feedback.append("Add numbers")
    if not has_symbol:
        feedback.append("Add special characters (!@#$%^&* etc.)")

    # Penalties
    if _REPEATS.search(password):
        score -= 10
        feedback.append("Avoid repeating characters")
    if _COMMON_SEQUENCES.search(password):
        score -= 15
        feedback.append("Avoid common sequences (123, abc, qwe, etc.)")
    if _COMMON_WORDS.search(password):
        score -= 20
        feedback.append("Avoid common words and phrases")
    if _YEARS.search(password):
        score -= 10
        feedback.append("Avoid using years or dates")

    score = max(0, min(100, score))

    if score >= 90:
        feedback.insert(0, "Excellent password strength!")
    elif score >= 75:
        feedback.insert(0, "Good password strength")
    elif score >= 50:
        feedback.insert(0, "Moderate password strength")
    else:
        feedback.insert(0, "Weak password - consider improvements")

    return {"strength": math.floor(score + 0.5), "feedback": feedback}
