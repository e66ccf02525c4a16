"""
Rule type and rule factories for FormController.

A rule is any callable mapping a candidate field value to an error message,
with an empty string meaning "valid". The factories here build named rules
whose default messages come from the configured message catalogue.

Ordering matters: FormController stops at the first failing rule, so put
required_rule() first. Most format rules skip empty values so that an empty
optional field is valid and an empty required field reports "required"
rather than a format error.

Example:
    rules = {
        "name": [required_rule(), min_length_rule(2)],
        "email": [required_rule("Email is required"), email_rule()],
        "confirm_password": [
            required_rule(),
            match_rule(lambda: form.values["password"]),
        ],
    }
"""

import re
from typing import Any, Callable, Optional

from .config_loader import get_config
from . import validators


class Rule:
    """
    A named validation step for a single field.

    Calling the rule returns the error message, or an empty string when the
    value is valid. get_id() and description() feed rule discovery and
    per-rule diagnostics.
    """

    def __init__(self, rule_id: str, fn: Callable[[Any], str], description: str = ""):
        """
        Args:
            rule_id: Short identifier, e.g. "min_length"
            fn: Callable returning the error message for a value
            description: Plain English description of what the rule checks
        """
        self._rule_id = rule_id
        self._fn = fn
        self._description = description

    def __call__(self, value: Any) -> str:
        return self._fn(value) or ""

    def get_id(self) -> str:
        return self._rule_id

    def description(self) -> str:
        return self._description

    def __repr__(self) -> str:
        return f"Rule({self._rule_id!r})"


def _message(key: str, message: Optional[str], **params: Any) -> str:
    if message:
        return message
    return get_config().get_message(key, **params)


def _predicate_rule(rule_id: str, predicate: Callable[[Any], bool], message: str,
                    description: str) -> Rule:
    """Rule that skips empty values and fails when the predicate is false."""

    def check(value: Any) -> str:
        if not validators.is_required(value):
            return ""
        return "" if predicate(value) else message

    return Rule(rule_id, check, description)


def required_rule(message: Optional[str] = None) -> Rule:
    msg = _message("required", message)
    return Rule(
        "required",
        lambda value: "" if validators.is_required(value) else msg,
        "Value must be filled in",
    )


def min_length_rule(min_length: int, message: Optional[str] = None) -> Rule:
    msg = _message("min_length", message, min=min_length)

    def check(value: Any) -> str:
        if not value:
            return ""
        return "" if validators.has_min_length(value, min_length) else msg

    return Rule("min_length", check, f"At least {min_length} characters")


def max_length_rule(max_length: int, message: Optional[str] = None) -> Rule:
    msg = _message("max_length", message, max=max_length)
    return Rule(
        "max_length",
        lambda value: "" if validators.has_max_length(value, max_length) else msg,
        f"At most {max_length} characters",
    )


def email_rule(message: Optional[str] = None) -> Rule:
    return _predicate_rule(
        "email", validators.is_valid_email, _message("invalid_email", message),
        "Value must be an email address",
    )


def pattern_rule(pattern: str, message: Optional[str] = None) -> Rule:
    """Fails when the value does not fully match the regular expression."""
    compiled = re.compile(pattern)
    return _predicate_rule(
        "pattern",
        lambda value: compiled.fullmatch(str(value)) is not None,
        _message("invalid_format", message),
        f"Value must match {pattern}",
    )


def match_rule(get_other: Callable[[], Any], message: Optional[str] = None) -> Rule:
    """
    Fails when the value differs from another value read at validation time.

    Args:
        get_other: Zero-argument callable returning the value to compare
                   against, e.g. lambda: form.values["password"]
        message: Error message (defaults to the password mismatch message)
    """
    msg = _message("password_mismatch", message)
    return Rule(
        "match",
        lambda value: "" if validators.is_match(get_other(), value) else msg,
        "Value must match another field",
    )


def password_rule(message: Optional[str] = None, **policy: Any) -> Rule:
    """
    Fails with the first policy violation reported by validate_password().

    Args:
        message: Fixed message to use instead of the policy's own messages
        **policy: Policy overrides passed to validate_password()
    """

    def check(value: Any) -> str:
        if not validators.is_required(value):
            return ""
        result = validators.validate_password(value, **policy)
        if result["is_valid"]:
            return ""
        return message or result["errors"][0]

    return Rule("password", check, "Password must satisfy the password policy")


def phone_rule(message: Optional[str] = None) -> Rule:
    return _predicate_rule(
        "phone", validators.is_valid_mexican_phone, _message("invalid_phone", message),
        "Value must be a Mexican phone number",
    )


def url_rule(message: Optional[str] = None) -> Rule:
    return _predicate_rule(
        "url", validators.is_valid_url, _message("invalid_url", message),
        "Value must be a URL",
    )


def numeric_rule(message: Optional[str] = None) -> Rule:
    return _predicate_rule(
        "numeric", validators.is_numeric, _message("not_numeric", message),
        "Value must contain digits only",
    )


def range_rule(min_value: float, max_value: float, message: Optional[str] = None) -> Rule:
    return _predicate_rule(
        "range",
        lambda value: validators.is_in_range(value, min_value, max_value),
        _message("out_of_range", message, min=min_value, max=max_value),
        f"Value must be between {min_value} and {max_value}",
    )


def age_rule(min_age: int = 0, max_age: int = 120, message: Optional[str] = None) -> Rule:
    return _predicate_rule(
        "age",
        lambda value: validators.is_valid_age(value, min_age, max_age),
        _message("invalid_age", message, min=min_age, max=max_age),
        f"Age derived from birth date must be between {min_age} and {max_age}",
    )


def date_rule(fmt: str = "YYYY-MM-DD", message: Optional[str] = None) -> Rule:
    return _predicate_rule(
        "date",
        lambda value: validators.is_valid_date(value, fmt),
        _message("invalid_date", message),
        f"Value must be a date formatted {fmt}",
    )


def future_date_rule(message: Optional[str] = None) -> Rule:
    return _predicate_rule(
        "future_date", validators.is_future_date, _message("future_date_required", message),
        "Date must be after today",
    )


def past_date_rule(message: Optional[str] = None) -> Rule:
    return _predicate_rule(
        "past_date", validators.is_past_date, _message("past_date_required", message),
        "Date must not be after today",
    )


def postal_code_rule(message: Optional[str] = None) -> Rule:
    return _predicate_rule(
        "postal_code", validators.is_valid_mexican_postal_code,
        _message("invalid_postal_code", message),
        "Value must be a five digit postal code",
    )


def name_rule(message: Optional[str] = None) -> Rule:
    return _predicate_rule(
        "name", validators.is_valid_name, _message("invalid_name", message),
        "Value must be a person's name",
    )


def credit_card_rule(message: Optional[str] = None) -> Rule:
    return _predicate_rule(
        "credit_card", validators.is_valid_credit_card,
        _message("invalid_credit_card", message),
        "Value must be a card number passing the Luhn check",
    )


def curp_rule(message: Optional[str] = None) -> Rule:
    return _predicate_rule(
        "curp", validators.is_valid_curp, _message("invalid_curp", message),
        "Value must be a CURP",
    )


def rfc_rule(message: Optional[str] = None) -> Rule:
    return _predicate_rule(
        "rfc", validators.is_valid_rfc, _message("invalid_rfc", message),
        "Value must be an RFC",
    )
