"""
FormController - form state and validation

This is the "front door" of the library: one controller per logical form.
It owns field values, per-field errors, touched flags, the submitting and
dirty flags, and derives the presentation state of each field.

Validation runs synchronously on every change and blur, and on every field
with registered rules before a submit. The rendering layer reads state
through the properties below, or subscribes to receive a snapshot after
every operation that changes it.
"""

import copy
import inspect
import logging
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Sequence, Union

from .events import (
    FIELD_ERROR,
    FIELD_NEUTRAL,
    FIELD_SUCCESS,
    SubmitEvent,
    check_kind,
    extract_value,
)
from .rule_executor import RuleExecutor, rule_description_of, rule_id_of
from .rule_loader import RuleLoader

logger = logging.getLogger(__name__)

RuleFn = Callable[[Any], str]
SubmitCallback = Callable[[Dict[str, Any]], Union[None, Awaitable[None]]]

_UNSET = object()


class FormController:
    """
    State and validation for a single form.

    Example:
        form = FormController(
            {"name": "", "email": ""},
            {
                "name": [required_rule(), min_length_rule(2)],
                "email": [required_rule(), email_rule()],
            },
            on_invalid=lambda field: focus(field),
        )

        form.handle_change("name")("Jo")
        form.get_field_state("name")   # "success"

        submit = form.handle_submit(save_profile)
        await submit(SubmitEvent())
    """

    def __init__(
        self,
        initial_values: Mapping[str, Any],
        validation_rules: Optional[Mapping[str, Sequence[RuleFn]]] = None,
        on_invalid: Optional[Callable[[str], None]] = None,
    ):
        """
        Initialize form controller.

        Args:
            initial_values: Field name -> initial value. Copied; reset()
                            restores this copy.
            validation_rules: Field name -> ordered rule callables. Fields
                              without rules are always valid.
            on_invalid: Called with the first errored field name when a submit
                        is blocked by validation, so the presentation layer
                        can scroll the field into view and focus it.
        """
        self._initial_values = copy.deepcopy(dict(initial_values))
        self.validation_rules = {
            name: tuple(rules) for name, rules in (validation_rules or {}).items()
        }
        self._executors = {
            name: RuleExecutor(rules) for name, rules in self.validation_rules.items()
        }
        self.on_invalid = on_invalid
        self._listeners: List[Callable[[Dict[str, Any]], None]] = []

        self._values = copy.deepcopy(self._initial_values)
        self._errors: Dict[str, str] = {}
        self._touched: Dict[str, bool] = {}
        self._is_submitting = False
        self._is_dirty = False

    @classmethod
    def from_definitions(
        cls,
        initial_values: Mapping[str, Any],
        definitions: Mapping[str, Sequence[Dict[str, Any]]],
        on_invalid: Optional[Callable[[str], None]] = None,
    ) -> "FormController":
        """
        Create a controller whose rules come from declarative definitions.

        "match" rules compare against the new controller's live values.
        See form_validation.rule_loader for the definition format.
        """
        holder: Dict[str, "FormController"] = {}
        loader = RuleLoader(lookup=lambda field: holder["form"]._values.get(field))
        controller = cls(initial_values, loader.load_rules(dict(definitions)), on_invalid)
        holder["form"] = controller
        return controller

    # State accessors

    @property
    def values(self) -> Dict[str, Any]:
        return copy.deepcopy(self._values)

    @property
    def errors(self) -> Dict[str, str]:
        return dict(self._errors)

    @property
    def touched(self) -> Dict[str, bool]:
        return dict(self._touched)

    @property
    def is_submitting(self) -> bool:
        return self._is_submitting

    @property
    def is_dirty(self) -> bool:
        return self._is_dirty

    @property
    def is_valid(self) -> bool:
        """True when no field with rules currently holds an error. Does not re-validate."""
        return not any(self._errors.get(name) for name in self.validation_rules)

    def get_error(self, name: str) -> str:
        return self._errors.get(name, "")

    def snapshot(self) -> Dict[str, Any]:
        """Copy of the full form state, as delivered to subscribers."""
        return {
            "values": copy.deepcopy(self._values),
            "errors": dict(self._errors),
            "touched": dict(self._touched),
            "is_submitting": self._is_submitting,
            "is_dirty": self._is_dirty,
        }

    def subscribe(self, listener: Callable[[Dict[str, Any]], None]) -> Callable[[], None]:
        """
        Register a listener called with snapshot() after each state change.

        Every operation notifies once, after all of its updates are applied.

        Returns:
            Function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        if not self._listeners:
            return
        state = self.snapshot()
        for listener in list(self._listeners):
            listener(state)

    # Validation

    def validate_field(self, name: str, value: Any) -> str:
        """
        Validate a value against a field's rules.

        Args:
            name: Field name
            value: Candidate value (not necessarily the stored one)

        Returns:
            The first non-empty message from the field's rules in declared
            order, or "" when the value is valid or the field has no rules
        """
        executor = self._executors.get(name)
        if executor is None:
            return ""
        return executor.first_error(value)

    def validate_all(self) -> bool:
        """
        Validate every field with registered rules.

        Marks each of those fields as touched and replaces the error mapping
        with the fresh results.

        Returns:
            True if every registered field is valid
        """
        errors = {}
        for name in self.validation_rules:
            self._touched[name] = True
            error = self.validate_field(name, self._values.get(name))
            if error:
                errors[name] = error
        self._errors = errors

        logger.debug(
            "Form validation pass complete",
            extra={"invalid_fields": list(errors)},
        )
        self._notify()
        return not errors

    def explain_field(self, name: str, value: Any = _UNSET) -> List[Dict[str, Any]]:
        """
        Per-rule diagnostics for a field, without changing form state.

        Args:
            name: Field name
            value: Optional candidate value; defaults to the stored value

        Returns:
            RuleExecutor.execute() results (empty for fields without rules)
        """
        executor = self._executors.get(name)
        if executor is None:
            return []
        candidate = self._values.get(name) if value is _UNSET else value
        return executor.execute(candidate)

    def discover_rules(self) -> Dict[str, List[Dict[str, str]]]:
        """
        Describe the registered rules.

        Returns:
            Field name -> [{"rule_id": str, "description": str}, ...] in
            evaluation order
        """
        return {
            name: [
                {"rule_id": rule_id_of(rule), "description": rule_description_of(rule)}
                for rule in rules
            ]
            for name, rules in self.validation_rules.items()
        }

    def get_field_state(self, name: str) -> str:
        """
        Presentation state of a field.

        Returns:
            "neutral" until the field is touched, then "error" while it holds
            an error message, otherwise "success". Fields without rules are
            always "neutral".
        """
        if name not in self.validation_rules or not self._touched.get(name):
            return FIELD_NEUTRAL
        if self._errors.get(name):
            return FIELD_ERROR
        return FIELD_SUCCESS

    # Event handlers

    def handle_change(self, name: str, kind: Optional[str] = None) -> Callable[[Any], None]:
        """
        Build the change handler for a field.

        Args:
            name: Field name
            kind: Input kind (see form_validation.events). When None the
                  handler receives the raw value; otherwise it receives a
                  ChangeEvent and reads checked/files/value according to kind.

        Returns:
            Handler that stores the value, touches the field, marks the form
            dirty and re-validates the field

        Raises:
            ValueError: If kind is not a known input kind
        """
        check_kind(kind)

        def on_change(payload: Any) -> None:
            value = extract_value(payload, kind)
            self._values[name] = value
            self._touched[name] = True
            self._is_dirty = True
            self._errors[name] = self.validate_field(name, value)
            self._notify()

        return on_change

    def handle_blur(self, name: str) -> Callable[[], None]:
        """Build the blur handler for a field: touch it and re-validate its stored value."""

        def on_blur(*_: Any) -> None:
            self._touched[name] = True
            self._errors[name] = self.validate_field(name, self._values.get(name))
            self._notify()

        return on_blur

    def handle_submit(self, on_submit: SubmitCallback) -> Callable[..., Awaitable[None]]:
        """
        Build the submit handler for the form.

        The handler validates every registered field. When the form is valid
        it calls on_submit with a snapshot of the values taken right after
        validation (edits made while on_submit runs do not reach it) and
        awaits it if it returns an awaitable. Exceptions from on_submit are
        logged and not re-raised. When the form is invalid, on_invalid is
        called with the first errored field instead.

        is_submitting is True for the whole attempt. Concurrent submits are
        not guarded against: each runs its own validation and may call
        on_submit.

        Args:
            on_submit: Callable receiving the values dict; may be async

        Returns:
            Async handler accepting an optional SubmitEvent
        """

        async def submit(event: Optional[SubmitEvent] = None) -> None:
            if event is not None:
                event.prevent_default()

            self._is_submitting = True
            self._notify()
            logger.debug("Form submit started")

            try:
                if self.validate_all():
                    submitted = copy.deepcopy(self._values)
                    try:
                        result = on_submit(submitted)
                        if inspect.isawaitable(result):
                            await result
                    except Exception:
                        logger.exception(
                            "Submit callback failed",
                            extra={"fields": list(submitted)},
                        )
                else:
                    first_invalid = self._first_error_field()
                    logger.debug(
                        "Form submit blocked by validation",
                        extra={"first_invalid_field": first_invalid},
                    )
                    if first_invalid is not None and self.on_invalid is not None:
                        self.on_invalid(first_invalid)
            finally:
                self._is_submitting = False
                self._notify()
                logger.debug("Form submit finished")

        return submit

    def _first_error_field(self) -> Optional[str]:
        """First field, in rule declaration order, holding an error."""
        for name in self.validation_rules:
            if self._errors.get(name):
                return name
        return None

    # Programmatic updates

    def reset(self) -> None:
        """Restore initial values and clear errors, touched, submitting and dirty state."""
        self._values = copy.deepcopy(self._initial_values)
        self._errors = {}
        self._touched = {}
        self._is_submitting = False
        self._is_dirty = False
        self._notify()

    def set_field_value(self, name: str, value: Any) -> None:
        """Set a value and mark the form dirty. Does not validate."""
        self._values[name] = value
        self._is_dirty = True
        self._notify()

    def set_field_error(self, name: str, message: str) -> None:
        """Set an error (e.g. from a server-side check) and touch the field."""
        self._errors[name] = message
        self._touched[name] = True
        self._notify()

    # Presentation contract

    def field_props(
        self,
        name: str,
        label: Optional[str] = None,
        kind: str = "text",
        required: bool = False,
        helper_text: Optional[str] = None,
        options: Optional[Sequence[Any]] = None,
        min: Optional[Any] = None,
        max: Optional[Any] = None,
        max_length: Optional[int] = None,
    ) -> Dict[str, Any]:
        """
        Everything an input component needs to render a field.

        on_change expects a ChangeEvent for the given kind; on_blur takes no
        arguments.
        """
        return {
            "name": name,
            "label": label,
            "type": kind,
            "value": self._values.get(name),
            "on_change": self.handle_change(name, kind),
            "on_blur": self.handle_blur(name),
            "error": self.get_error(name),
            "state": self.get_field_state(name),
            "required": required,
            "helper_text": helper_text,
            "options": list(options or []),
            "min": min,
            "max": max,
            "max_length": max_length,
        }
