"""
Input events and field-state vocabulary shared by the controller and the
presentation layer.

The presentation layer tells the controller what kind of input produced a
change, so the controller never has to guess the shape of the payload:

    on_change = form.handle_change("accept_terms", CHECKBOX)
    on_change(ChangeEvent(checked=True))
"""

from dataclasses import dataclass
from typing import Any, Optional, Sequence

# Field presentation states returned by FormController.get_field_state()
FIELD_NEUTRAL = "neutral"
FIELD_ERROR = "error"
FIELD_SUCCESS = "success"

# Input kinds
TEXT = "text"
EMAIL = "email"
PASSWORD = "password"
NUMBER = "number"
TEL = "tel"
URL = "url"
DATE = "date"
TEXTAREA = "textarea"
SELECT = "select"
CHECKBOX = "checkbox"
FILE = "file"

INPUT_KINDS = frozenset(
    [TEXT, EMAIL, PASSWORD, NUMBER, TEL, URL, DATE, TEXTAREA, SELECT, CHECKBOX, FILE]
)


@dataclass
class ChangeEvent:
    """Payload emitted by an input when its value changes."""

    value: Any = None
    checked: bool = False
    files: Sequence[Any] = ()


class SubmitEvent:
    """Form submission event. Handlers call prevent_default() to keep the page."""

    def __init__(self):
        self.default_prevented = False

    def prevent_default(self) -> None:
        self.default_prevented = True


def check_kind(kind: Optional[str]) -> None:
    """Raise ValueError for an input kind the controller does not know."""
    if kind is not None and kind not in INPUT_KINDS:
        raise ValueError(
            f"Unknown input kind: {kind!r}. "
            f"Expected one of: {', '.join(sorted(INPUT_KINDS))}"
        )


def extract_value(payload: Any, kind: Optional[str]) -> Any:
    """
    Extract the effective field value from a change payload.

    Args:
        payload: Raw value when kind is None, otherwise a ChangeEvent
        kind: Input kind declared by the presentation layer

    Returns:
        checked-state for checkboxes, the file collection for file inputs,
        and the textual/numeric value for everything else
    """
    if kind is None:
        return payload
    if kind == CHECKBOX:
        return payload.checked
    if kind == FILE:
        return list(payload.files)
    return payload.value
