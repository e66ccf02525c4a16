"""
Validator predicates

Pure functions used by rule factories and by presentation code. Each
predicate answers a single question about a value and never raises on
malformed input - it returns False instead.

Example:
    is_valid_email("user@example.com")  # True
    is_valid_credit_card("4532015112830366")  # True

    # Inside a rule list for FormController
    email_rules = [
        lambda value: "" if is_required(value) else "Email is required",
        lambda value: "" if is_valid_email(value) else "Invalid email",
    ]
"""

import math
import re
import urllib.parse
from datetime import date, datetime, time
from typing import Any, Dict, Optional

from .config_loader import get_config

EMAIL_REGEX = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MEXICAN_PHONE_REGEX = re.compile(r"^(\+52|52)?[\s-]?([1-9][0-9]{9})$")
CURP_REGEX = re.compile(r"^[A-Z]{4}[0-9]{6}[HM][A-Z]{5}[A-Z0-9][0-9]$")
RFC_REGEX = re.compile(r"^[A-ZÑ&]{3,4}[0-9]{6}[A-Z0-9]{3}$")
POSTAL_CODE_REGEX = re.compile(r"^[0-9]{5}$")
NAME_REGEX = re.compile(r"^[a-zA-ZáéíóúüñÁÉÍÓÚÜÑ\s'.-]+$")
NUMERIC_REGEX = re.compile(r"^[0-9]+$")
URL_SCHEME_REGEX = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*$")
SPECIAL_CHARS_REGEX = re.compile(r"[!@#$%^&*(),.?\":{}|<>]")

DAYS_PER_YEAR = 365.25


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def to_datetime(value: Any) -> Optional[datetime]:
    """
    Coerce a date-like value to a datetime.

    Accepts datetime, date and ISO 8601 strings. Returns None for anything
    that cannot be parsed.
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    if isinstance(value, str) and value.strip():
        try:
            return datetime.fromisoformat(value.strip())
        except ValueError:
            return None
    return None


# ============================================
# Format validators
# ============================================

def is_valid_email(email: Any) -> bool:
    """Address shape check plus the configured email max_length."""
    text = _text(email)
    max_length = get_config().get_email_limits().get("max_length")
    if max_length is not None and len(text) > max_length:
        return False
    return bool(EMAIL_REGEX.match(text))


def validate_password(password: Any, **options: Any) -> Dict[str, Any]:
    """
    Check a password against a configurable policy.

    Args:
        password: Candidate password
        **options: Policy overrides. Any of min_length, max_length, require_uppercase,
                   require_lowercase, require_numbers, require_special_chars.
                   Missing options come from the configured password policy.

    Returns:
        {"is_valid": bool, "errors": [message, ...]} with messages in policy
        order (minimum length, maximum length, uppercase, lowercase, number,
        special character)

    Example:
        validate_password("abc", min_length=6, require_uppercase=False)
        # {"is_valid": False, "errors": ["Must be at least 6 characters",
        #                                "Must include at least one number", ...]}
    """
    policy = get_config().get_password_policy()
    messages = policy["messages"]

    min_length = options.get("min_length", policy.get("min_length", 8))
    max_length = options.get("max_length", policy.get("max_length"))
    require_uppercase = options.get("require_uppercase", policy.get("require_uppercase", True))
    require_lowercase = options.get("require_lowercase", policy.get("require_lowercase", True))
    require_numbers = options.get("require_numbers", policy.get("require_numbers", True))
    require_special_chars = options.get(
        "require_special_chars", policy.get("require_special_chars", True)
    )

    text = _text(password)
    errors = []

    if len(text) < min_length:
        errors.append(messages["min_length"].format(min=min_length))
    if max_length is not None and len(text) > max_length:
        errors.append(messages["max_length"].format(max=max_length))
    if require_uppercase and not re.search(r"[A-Z]", text):
        errors.append(messages["uppercase"])
    if require_lowercase and not re.search(r"[a-z]", text):
        errors.append(messages["lowercase"])
    if require_numbers and not re.search(r"[0-9]", text):
        errors.append(messages["number"])
    if require_special_chars and not SPECIAL_CHARS_REGEX.search(text):
        errors.append(messages["special"])

    return {"is_valid": not errors, "errors": errors}


def is_valid_mexican_phone(phone: Any) -> bool:
    """Accepts +52 55 1234 5678, 52 55 1234 5678, 55 1234 5678 and 5512345678."""
    cleaned = re.sub(r"[\s-]", "", _text(phone))
    return bool(MEXICAN_PHONE_REGEX.match(cleaned))


def is_valid_curp(curp: Any) -> bool:
    """CURP (Clave Única de Registro de Población), uppercase only."""
    return bool(CURP_REGEX.match(_text(curp)))


def is_valid_rfc(rfc: Any) -> bool:
    """RFC for individuals (13 characters) and companies (12 characters)."""
    return bool(RFC_REGEX.match(_text(rfc)))


def is_valid_url(url: Any) -> bool:
    text = _text(url).strip()
    if not text or any(c.isspace() for c in text):
        return False
    try:
        parsed = urllib.parse.urlparse(text)
    except ValueError:
        return False
    if not parsed.scheme or not URL_SCHEME_REGEX.match(parsed.scheme):
        return False
    return bool(parsed.netloc or parsed.path)


# ============================================
# Content validators
# ============================================

def is_required(value: Any) -> bool:
    """
    True when a value counts as filled in.

    None, blank strings and empty collections (e.g. an empty file list) are
    not filled in. False and 0 are.
    """
    if value is None:
        return False
    if isinstance(value, (list, tuple, set, frozenset, dict)):
        return len(value) > 0
    return str(value).strip() != ""


def has_min_length(value: Any, min_length: int) -> bool:
    return bool(value) and len(str(value)) >= min_length


def has_max_length(value: Any, max_length: int) -> bool:
    return not value or len(str(value)) <= max_length


def is_numeric(value: Any) -> bool:
    """Digits only (no sign, no decimal point)."""
    return bool(NUMERIC_REGEX.match(_text(value)))


def is_valid_age(birth_date: Any, min_age: int = 0, max_age: int = 120,
                 today: Optional[date] = None) -> bool:
    """
    Check that the age derived from a birth date falls within [min_age, max_age].

    Args:
        birth_date: date, datetime or ISO string
        min_age: Minimum age in whole years
        max_age: Maximum age in whole years
        today: Reference date (defaults to today)
    """
    birth = to_datetime(birth_date)
    if birth is None:
        return False
    reference = datetime.combine(today or date.today(), time.min)
    age = math.floor((reference - birth.replace(tzinfo=None)).days / DAYS_PER_YEAR)
    return min_age <= age <= max_age


def is_valid_mexican_postal_code(postal_code: Any) -> bool:
    return bool(POSTAL_CODE_REGEX.match(_text(postal_code)))


def is_valid_name(name: Any) -> bool:
    """Letters (including Spanish accents), spaces, apostrophes, dots and hyphens."""
    text = _text(name)
    return bool(NAME_REGEX.match(text)) and len(text.strip()) > 0


def is_match(value1: Any, value2: Any) -> bool:
    return value1 == value2


def is_valid_credit_card(card_number: Any) -> bool:
    """Luhn checksum over 13 to 19 digits; separators are ignored."""
    digits = re.sub(r"[^0-9]", "", _text(card_number))
    if len(digits) < 13 or len(digits) > 19:
        return False

    total = 0
    for index, char in enumerate(reversed(digits)):
        digit = int(char)
        if index % 2 == 1:
            digit *= 2
            if digit > 9:
                digit -= 9
        total += digit

    return total % 10 == 0


def is_in_range(value: Any, min_value: float, max_value: float) -> bool:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return False
    if math.isnan(number):
        return False
    return min_value <= number <= max_value


def is_valid_date(value: Any, fmt: str = "YYYY-MM-DD") -> bool:
    """
    Check that a string is a real calendar date in the given format.

    Args:
        value: Date string
        fmt: Format built from YYYY, MM and DD tokens, e.g. "DD/MM/YYYY"

    Example:
        is_valid_date("2023-12-25")  # True
        is_valid_date("25/12/2023", "DD/MM/YYYY")  # True
        is_valid_date("2023-02-30")  # False
    """
    if not value or not isinstance(value, str):
        return False
    shape = re.escape(fmt).replace("YYYY", "[0-9]{4}").replace("MM", "[0-9]{2}").replace("DD", "[0-9]{2}")
    if not re.fullmatch(shape, value):
        return False
    pattern = fmt.replace("YYYY", "%Y").replace("MM", "%m").replace("DD", "%d")
    try:
        datetime.strptime(value, pattern)
    except ValueError:
        return False
    return True


def is_future_date(value: Any, today: Optional[date] = None) -> bool:
    """True when the value is later than the start of today."""
    moment = to_datetime(value)
    if moment is None:
        return False
    start_of_today = datetime.combine(today or date.today(), time.min)
    return moment.replace(tzinfo=None) > start_of_today


def is_past_date(value: Any, today: Optional[date] = None) -> bool:
    """True when the value is earlier than the end of today (today counts as past)."""
    moment = to_datetime(value)
    if moment is None:
        return False
    end_of_today = datetime.combine(today or date.today(), time.max)
    return moment.replace(tzinfo=None) < end_of_today
