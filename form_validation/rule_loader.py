"""
Rule Loader - Declarative Rule Definitions

Builds FormController rule lists from plain data, so forms can be described
in YAML next to the rest of an application's configuration.

## Definition Format

```yaml
name:
  - rule: required
    message: "Name is required"
  - rule: min_length
    min_length: 2
email:
  - rule: required
  - rule: email
confirm_password:
  - rule: required
  - rule: match
    field: password
```

Each field maps to an ordered list of entries. `rule` names a factory from
`form_validation.rules`; every other key is passed to the factory as a keyword
argument. Order is preserved, so the first entry is evaluated first.

The `match` rule is special: `field` names another field whose current value
is read through the loader's `lookup` callable at validation time.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

import jsonschema
import yaml

from . import rules

logger = logging.getLogger(__name__)

DEFINITIONS_SCHEMA = {
    "type": "object",
    "additionalProperties": {
        "type": "array",
        "items": {
            "type": "object",
            "required": ["rule"],
            "properties": {
                "rule": {"type": "string"},
                "message": {"type": "string"},
            },
        },
    },
}

RULE_FACTORIES: Dict[str, Callable[..., rules.Rule]] = {
    "required": rules.required_rule,
    "min_length": rules.min_length_rule,
    "max_length": rules.max_length_rule,
    "email": rules.email_rule,
    "pattern": rules.pattern_rule,
    "password": rules.password_rule,
    "phone": rules.phone_rule,
    "url": rules.url_rule,
    "numeric": rules.numeric_rule,
    "range": rules.range_rule,
    "age": rules.age_rule,
    "date": rules.date_rule,
    "future_date": rules.future_date_rule,
    "past_date": rules.past_date_rule,
    "postal_code": rules.postal_code_rule,
    "name": rules.name_rule,
    "credit_card": rules.credit_card_rule,
    "curp": rules.curp_rule,
    "rfc": rules.rfc_rule,
}


class RuleLoader:
    """Builds rule lists from declarative definitions"""

    def __init__(self, lookup: Optional[Callable[[str], Any]] = None):
        """
        Initialize rule loader.

        Args:
            lookup: Callable returning another field's current value by name.
                    Required only when definitions use the "match" rule.
        """
        self.lookup = lookup

    def load_rules(self, definitions: Dict[str, List[Dict[str, Any]]]) -> Dict[str, List[rules.Rule]]:
        """
        Build rules for every field in the definitions.

        Args:
            definitions: Mapping of field name to ordered rule entries

        Returns:
            Mapping of field name to ordered Rule objects

        Raises:
            ValueError: If the definitions are malformed, name an unknown rule,
                        or pass parameters a rule does not accept
        """
        try:
            jsonschema.validate(instance=definitions, schema=DEFINITIONS_SCHEMA)
        except jsonschema.ValidationError as e:
            error_path = " -> ".join(str(p) for p in e.path) if e.path else "root"
            raise ValueError(f"Invalid rule definitions at {error_path}: {e.message}") from e

        loaded = {}
        for field, entries in definitions.items():
            loaded[field] = [self._load_single_rule(field, entry) for entry in entries]

        logger.debug(
            "Loaded rule definitions",
            extra={"fields": list(loaded), "rule_count": sum(len(r) for r in loaded.values())},
        )
        return loaded

    def load_rules_file(self, path: str) -> Dict[str, List[rules.Rule]]:
        """Load definitions from a YAML file and build their rules."""
        with open(path) as f:
            definitions = yaml.safe_load(f) or {}
        return self.load_rules(definitions)

    def _load_single_rule(self, field: str, entry: Dict[str, Any]) -> rules.Rule:
        """Resolve one definition entry to a Rule."""
        params = dict(entry)
        rule_name = params.pop("rule")

        if rule_name == "match":
            return self._load_match_rule(field, params)

        factory = RULE_FACTORIES.get(rule_name)
        if factory is None:
            raise ValueError(
                f"Unknown rule '{rule_name}' for field '{field}'. "
                f"Available rules: {', '.join(sorted(RULE_FACTORIES) + ['match'])}"
            )

        try:
            return factory(**params)
        except TypeError as e:
            raise ValueError(f"Invalid parameters for rule '{rule_name}' on field '{field}': {e}") from e

    def _load_match_rule(self, field: str, params: Dict[str, Any]) -> rules.Rule:
        other = params.pop("field", None)
        if not other:
            raise ValueError(f"Rule 'match' on field '{field}' needs a 'field' parameter")
        if self.lookup is None:
            raise ValueError(f"Rule 'match' on field '{field}' needs a loader with a lookup")
        if params.keys() - {"message"}:
            raise ValueError(
                f"Invalid parameters for rule 'match' on field '{field}': "
                f"{', '.join(sorted(params.keys() - {'message'}))}"
            )

        lookup = self.lookup
        return rules.match_rule(lambda: lookup(other), params.get("message"))
