import time
from typing import Any, Callable, Dict, List, Sequence


def rule_id_of(rule: Callable) -> str:
    """Identifier for a rule: Rule.get_id() when available, else the callable's name."""
    if hasattr(rule, "get_id"):
        return rule.get_id()
    return getattr(rule, "__name__", type(rule).__name__)


def rule_description_of(rule: Callable) -> str:
    if hasattr(rule, "description"):
        return rule.description()
    return (getattr(rule, "__doc__", None) or "").strip()


class RuleExecutor:
    """Executes a field's validation rules in declared order"""

    def __init__(self, rules: Sequence[Callable[[Any], str]]):
        """
        Initialize rule executor.

        Args:
            rules: Ordered rule callables, each mapping a value to an error
                   message (empty string or None when the value is valid)
        """
        self.rules = list(rules)

    def first_error(self, value: Any) -> str:
        """
        Return the first non-empty message produced by the rules.

        Rules after the first failing one are not evaluated, so required-ness
        checks listed first keep empty values from reaching format checks.
        Exceptions raised by a rule propagate.
        """
        for rule in self.rules:
            message = rule(value)
            if message:
                return message
        return ""

    def execute(self, value: Any) -> List[Dict[str, Any]]:
        """
        Evaluate every rule and report its outcome.

        Args:
            value: Candidate field value

        Returns:
            One result dict per rule, in declared order:
            [{
                "rule_id": str,
                "description": str,
                "status": "PASS" | "FAIL" | "NORUN" | "ERROR",
                "message": str,
                "execution_time_ms": float,
            }, ...]
        """
        results = []
        stopped = False

        for rule in self.rules:
            if stopped:
                results.append(self._mark_skipped(rule))
                continue

            start = time.time()
            try:
                message = rule(value) or ""
                status = "FAIL" if message else "PASS"
            except Exception as e:
                status = "ERROR"
                message = f"{type(e).__name__}: {e}"
            elapsed_ms = round((time.time() - start) * 1000, 2)

            results.append(
                {
                    "rule_id": rule_id_of(rule),
                    "description": rule_description_of(rule),
                    "status": status,
                    "message": message,
                    "execution_time_ms": elapsed_ms,
                }
            )

            # FAIL or ERROR - remaining rules are NORUN
            if status != "PASS":
                stopped = True

        return results

    def _mark_skipped(self, rule: Callable) -> Dict[str, Any]:
        """Mark a rule as skipped after an earlier rule did not pass."""
        return {
            "rule_id": rule_id_of(rule),
            "description": rule_description_of(rule),
            "status": "NORUN",
            "message": "Earlier rule did not pass, rule skipped",
            "execution_time_ms": 0,
        }
