"""
form-validation-lib: Form state and validation engine

This library provides client-side form handling with:
- Per-field ordered validation rules (first failing rule wins)
- Touched/dirty tracking and neutral/error/success field states
- Async submit handling with full-form validation
- Declarative rule definitions (YAML or dicts)
- Validator predicates and display formatters
- Configurable message catalogue and password policy

Example:
    from form_validation import FormController, required_rule, min_length_rule

    form = FormController({"name": ""}, {"name": [required_rule(), min_length_rule(2)]})
    form.handle_change("name")("J")
    form.errors["name"]  # "Must be at least 2 characters"
"""

from .controller import FormController
from .events import ChangeEvent, SubmitEvent, FIELD_ERROR, FIELD_NEUTRAL, FIELD_SUCCESS
from .remote_check import RemoteFieldCheck
from .rule_executor import RuleExecutor
from .rule_loader import RuleLoader
from .rules import (
    Rule,
    age_rule,
    credit_card_rule,
    curp_rule,
    date_rule,
    email_rule,
    future_date_rule,
    match_rule,
    max_length_rule,
    min_length_rule,
    name_rule,
    numeric_rule,
    password_rule,
    past_date_rule,
    pattern_rule,
    phone_rule,
    postal_code_rule,
    range_rule,
    required_rule,
    rfc_rule,
    url_rule,
)

__version__ = "0.1.0"
__all__ = [
    "FormController",
    "ChangeEvent",
    "SubmitEvent",
    "FIELD_ERROR",
    "FIELD_NEUTRAL",
    "FIELD_SUCCESS",
    "RemoteFieldCheck",
    "RuleExecutor",
    "RuleLoader",
    "Rule",
    "age_rule",
    "credit_card_rule",
    "curp_rule",
    "date_rule",
    "email_rule",
    "future_date_rule",
    "match_rule",
    "max_length_rule",
    "min_length_rule",
    "name_rule",
    "numeric_rule",
    "password_rule",
    "past_date_rule",
    "pattern_rule",
    "phone_rule",
    "postal_code_rule",
    "range_rule",
    "required_rule",
    "rfc_rule",
    "url_rule",
]
