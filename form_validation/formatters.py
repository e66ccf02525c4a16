"""
Display formatters

Pure string/number/date transforms used by presentation code (labels, helper
text, read-only views). The controller never calls these.

Rendering is fixed to English conventions: comma thousands separators,
dot decimals and English month names.
"""

import math
import re
import unicodedata
from datetime import date, datetime
from typing import Any, Optional, Union

from .validators import to_datetime

Number = Union[int, float]

CURRENCY_SYMBOLS = {
    "MXN": "$",
    "USD": "$",
    "CAD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
}
ZERO_DECIMAL_CURRENCIES = {"JPY"}

DATE_FORMATS = {
    "short": "%d/%m/%Y",
    "medium": "%d %b %Y",
    "long": "%d %B %Y",
    "full": "%A, %d %B %Y",
    "datetime": "%d %b %Y %H:%M",
    "time": "%H:%M",
}

RELATIVE_UNITS = [
    ("year", 31536000),
    ("month", 2592000),
    ("day", 86400),
    ("hour", 3600),
    ("minute", 60),
    ("second", 1),
]


# ============================================
# Numbers and currency
# ============================================

def format_currency(amount: Number, currency: str = "MXN") -> str:
    """
    Format an amount as currency.

    Example:
        format_currency(1234.56)           # "$1,234.56"
        format_currency(500.75, "EUR")     # "€500.75"
        format_currency(2500.99, "JPY")    # "¥2,501"
        format_currency(10, "CHF")         # "CHF 10.00"
    """
    decimals = 0 if currency in ZERO_DECIMAL_CURRENCIES else 2
    body = f"{abs(amount):,.{decimals}f}"
    sign = "-" if amount < 0 else ""
    symbol = CURRENCY_SYMBOLS.get(currency)
    if symbol is None:
        return f"{sign}{currency} {body}"
    return f"{sign}{symbol}{body}"


def format_number(num: Number, decimals: int = 1) -> str:
    """
    Abbreviate large numbers with K/M/B/T suffixes.

    Example:
        format_number(999)         # "999"
        format_number(1234)        # "1.2K"
        format_number(1500000)     # "1.5M"
        format_number(1234, 0)     # "1K"
    """
    if num < 1000:
        return str(num)

    units = ["", "K", "M", "B", "T"]
    unit_index = min(int(math.log10(abs(num)) // 3), len(units) - 1)
    scaled = num / (1000 ** unit_index)
    # 999999 rounds to 1000.0K; move up a unit instead
    if round(abs(scaled), decimals) >= 1000 and unit_index < len(units) - 1:
        unit_index += 1
        scaled = num / (1000 ** unit_index)
    return f"{scaled:.{decimals}f}{units[unit_index]}"


def format_number_with_commas(num: Number) -> str:
    """Thousands separators; floats keep up to three decimals."""
    if isinstance(num, int):
        return f"{num:,}"
    text = f"{num:,.3f}".rstrip("0").rstrip(".")
    return text


def format_percentage(value: Number, decimals: int = 1) -> str:
    """Format a ratio as a percentage: format_percentage(0.256) -> "25.6%"."""
    return f"{value * 100:.{decimals}f}%"


# ============================================
# Dates and durations
# ============================================

def format_date(value: Union[str, date, datetime], fmt: str = "short",
                now: Optional[datetime] = None) -> str:
    """
    Format a date using a named style.

    Args:
        value: date, datetime or ISO string
        fmt: One of short, medium, long, full, datetime, time, relative
        now: Reference time for the relative style

    Raises:
        ValueError: If the value is not a date or the style is unknown
    """
    moment = to_datetime(value)
    if moment is None:
        raise ValueError(f"Not a date: {value!r}")
    if fmt == "relative":
        return format_relative_time(moment, now)
    if fmt not in DATE_FORMATS:
        raise ValueError(f"Unknown date format: {fmt}")
    return moment.strftime(DATE_FORMATS[fmt])


def format_relative_time(value: Union[str, date, datetime],
                         now: Optional[datetime] = None) -> str:
    """
    Describe a moment relative to now.

    Example:
        format_relative_time(now - timedelta(days=3), now)   # "3 days ago"
        format_relative_time(now + timedelta(hours=1), now)  # "in 1 hour"
        format_relative_time(now, now)                       # "now"
    """
    moment = to_datetime(value)
    if moment is None:
        raise ValueError(f"Not a date: {value!r}")
    reference = now or datetime.now(moment.tzinfo)
    if (moment.tzinfo is None) != (reference.tzinfo is None):
        moment = moment.replace(tzinfo=None)
        reference = reference.replace(tzinfo=None)
    diff_seconds = (moment - reference).total_seconds()

    for unit, seconds in RELATIVE_UNITS:
        interval = int(round(diff_seconds / seconds))
        if abs(interval) >= 1:
            label = unit if abs(interval) == 1 else f"{unit}s"
            if interval > 0:
                return f"in {interval} {label}"
            return f"{abs(interval)} {label} ago"

    return "now"


def format_duration(seconds: int) -> str:
    """format_duration(3725) -> "1h 2m 5s"; format_duration(0) -> "0s"."""
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    remaining = seconds % 60

    parts = []
    if hours > 0:
        parts.append(f"{hours}h")
    if minutes > 0:
        parts.append(f"{minutes}m")
    if remaining > 0 or not parts:
        parts.append(f"{remaining}s")
    return " ".join(parts)


def format_execution_time(milliseconds: Number) -> str:
    if milliseconds < 1000:
        return f"{milliseconds}ms"
    if milliseconds < 60000:
        return f"{milliseconds / 1000:.2f}s"
    minutes = int(milliseconds // 60000)
    seconds = int((milliseconds % 60000) // 1000)
    return f"{minutes}m {seconds}s"


# ============================================
# Text
# ============================================

def capitalize(text: str) -> str:
    if not text:
        return text
    return text[0].upper() + text[1:].lower()


def to_title_case(text: str) -> str:
    return re.sub(r"\S+", lambda m: capitalize(m.group(0)), text)


def _words(text: str) -> list:
    spaced = re.sub(r"(?<=[a-z0-9])(?=[A-Z])", " ", text)
    return [w for w in re.split(r"[^a-zA-Z0-9]+", spaced) if w]


def to_camel_case(text: str) -> str:
    words = [w.lower() for w in _words(text)]
    if not words:
        return ""
    return words[0] + "".join(w.capitalize() for w in words[1:])


def to_kebab_case(text: str) -> str:
    return "-".join(w.lower() for w in _words(text))


def to_snake_case(text: str) -> str:
    return "_".join(w.lower() for w in _words(text))


def create_slug(text: str) -> str:
    """
    URL slug with accents removed.

    Example:
        create_slug("Título con Acentos!")  # "titulo-con-acentos"
    """
    normalized = unicodedata.normalize("NFD", text.lower())
    stripped = "".join(c for c in normalized if not unicodedata.combining(c)).strip()
    stripped = re.sub(r"[^\w\s-]", "", stripped)
    stripped = re.sub(r"[\s_-]+", "-", stripped)
    return stripped.strip("-")


def truncate_text(text: str, max_length: int, suffix: str = "...") -> str:
    if not text or len(text) <= max_length:
        return text
    return text[: max_length - len(suffix)] + suffix


def format_email(email: str, max_length: int = 30) -> str:
    """Shorten the local part of a long email, keeping the domain intact."""
    if not email or len(email) <= max_length or "@" not in email:
        return email
    local, domain = email.split("@", 1)
    if len(local) > max_length - len(domain) - 4:
        keep = max(max_length - len(domain) - 7, 1)
        return f"{local[:keep]}...@{domain}"
    return email


def format_range(min_value: Any, max_value: Any, unit: str = "") -> str:
    return f"{unit}{min_value} - {unit}{max_value}"


# ============================================
# Files
# ============================================

def format_file_name(file_name: str, max_length: int = 20) -> str:
    """Shorten a file name while keeping its extension."""
    if not file_name:
        return ""

    dot = file_name.rfind(".")
    if dot == -1:
        return file_name[:max_length] + "..." if len(file_name) > max_length else file_name

    name, extension = file_name[:dot], file_name[dot:]
    if len(name) <= max_length:
        return file_name
    return name[: max_length - 3] + "..." + extension


def format_file_size(size: int, decimals: int = 1) -> str:
    """
    Human readable byte count (powers of 1024).

    Example:
        format_file_size(0)        # "0 Bytes"
        format_file_size(1536)     # "1.5 KB"
    """
    if size == 0:
        return "0 Bytes"

    units = ["Bytes", "KB", "MB", "GB", "TB"]
    decimals = max(decimals, 0)
    index = 0
    while index < len(units) - 1 and size >= 1024 ** (index + 1):
        index += 1
    scaled = round(size / (1024 ** index), decimals)
    text = f"{scaled:.{decimals}f}".rstrip("0").rstrip(".") if decimals else f"{scaled:.0f}"
    return f"{text} {units[index]}"


# ============================================
# Contact and payment data
# ============================================

def format_phone_number(phone: str, pattern: str = "(###) ###-####") -> str:
    """
    Fill a '#' pattern with the digits of a ten digit number.

    Twelve digit numbers starting with the Mexican country code 52 are
    formatted as "+52 " followed by the national number. Anything else is
    returned unchanged.
    """
    digits = re.sub(r"[^0-9]", "", phone)

    if len(digits) == 10 and pattern.count("#") == 10:
        it = iter(digits)
        return "".join(next(it) if c == "#" else c for c in pattern)

    if len(digits) == 12 and digits.startswith("52"):
        return f"+52 {format_phone_number(digits[2:], pattern)}"

    return phone


def format_postal_code(postal_code: str, country: str = "MX") -> str:
    digits = re.sub(r"[^0-9]", "", postal_code)

    if country == "US":
        if len(digits) == 9:
            return f"{digits[:5]}-{digits[5:]}"
        return digits[:5]

    if country == "CA":
        compact = re.sub(r"[^A-Za-z0-9]", "", postal_code).upper()
        if len(compact) == 6:
            return f"{compact[:3]} {compact[3:]}"
        return postal_code.upper()

    return digits[:5]


def format_card_number(card_number: str, mask_digits: bool = True) -> str:
    """
    Group card digits in fours, masking the middle groups.

    Example:
        format_card_number("4532015112830366")         # "4532 **** **** 0366"
        format_card_number("4532015112830366", False)  # "4532 0151 1283 0366"
    """
    digits = re.sub(r"[^0-9]", "", card_number)
    groups = [digits[i:i + 4] for i in range(0, len(digits), 4)]

    if mask_digits and len(groups) >= 4:
        groups = [
            group if index in (0, len(groups) - 1) else "*" * len(group)
            for index, group in enumerate(groups)
        ]
    return " ".join(groups)


def format_coordinates(latitude: float, longitude: float, precision: int = 4) -> str:
    """format_coordinates(19.4326, -99.1332) -> "19.4326°N, 99.1332°W"."""
    lat_dir = "N" if latitude >= 0 else "S"
    lng_dir = "E" if longitude >= 0 else "W"
    return (
        f"{abs(latitude):.{precision}f}°{lat_dir}, "
        f"{abs(longitude):.{precision}f}°{lng_dir}"
    )
