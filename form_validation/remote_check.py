"""
Remote Field Check

Asks a validation service whether a field value is acceptable - the typical
case being uniqueness checks (username, email) that only the server can
answer. Results are pushed into a FormController with set_field_error(), so
the controller itself never performs network calls.

The service is a JSON endpoint:

    POST {base_url}/check
    {"field": "username", "value": "jdoe"}

    200 {"message": ""}                       # valid
    200 {"message": "Username already taken"} # invalid

An unavailable service never blocks the user: the check logs a warning and
reports the value as valid.
"""

import logging
from typing import Any, Dict, Optional

import requests

from .config_loader import get_config

logger = logging.getLogger(__name__)


class RemoteFieldCheck:
    """
    Client for server-side field checks.

    Example:
        checker = RemoteFieldCheck()
        on_blur = form.handle_blur("username")

        def blur_username():
            on_blur()
            if not form.get_error("username"):
                checker.apply(form, "username")
    """

    def __init__(self, remote_check_config: Optional[Dict[str, Any]] = None,
                 session: Optional[requests.Session] = None):
        """
        Initialize remote field check.

        Args:
            remote_check_config: Remote check configuration dict (defaults to
                    the remote_check section of the loaded configuration):
                    - enabled: Whether remote checks are performed
                    - base_url: URL of the validation service
                    - timeout_ms: Request timeout in milliseconds
                    - retry_attempts: Extra attempts after a connection error
                      or timeout
            session: Optional requests.Session to reuse connections
        """
        if remote_check_config is None:
            remote_check_config = get_config().get_remote_check_config()
        self.config = remote_check_config
        self.enabled = self.config.get("enabled", False)
        self.base_url = self.config.get("base_url")
        self.timeout_ms = self.config.get("timeout_ms", 5000)
        self.retry_attempts = self.config.get("retry_attempts", 3)
        self.session = session or requests.Session()

        if self.enabled and not self.base_url:
            raise ValueError("Remote field check is enabled but base_url is not set")

        if self.enabled:
            logger.info(
                "Remote field check initialized",
                extra={
                    "base_url": self.base_url,
                    "timeout_ms": self.timeout_ms,
                    "retry_attempts": self.retry_attempts,
                },
            )
        else:
            logger.info("Remote field check disabled")

    @property
    def endpoint(self) -> str:
        return f"{self.base_url.rstrip('/')}/check"

    def check(self, field: str, value: Any) -> str:
        """
        Ask the validation service about a field value.

        Args:
            field: Field name
            value: Field value (must be JSON serializable)

        Returns:
            Error message from the service, or "" when the value is valid,
            the check is disabled, or the service is unavailable
        """
        if not self.enabled:
            logger.debug("Remote field check disabled - skipping", extra={"field": field})
            return ""

        payload = {"field": field, "value": value}
        attempts = self.retry_attempts + 1

        for attempt in range(1, attempts + 1):
            try:
                response = self.session.post(
                    self.endpoint,
                    json=payload,
                    timeout=self.timeout_ms / 1000.0,
                )
                response.raise_for_status()
                body = response.json()
            except (requests.exceptions.ConnectionError, requests.exceptions.Timeout) as e:
                logger.warning(
                    "Remote field check attempt failed",
                    extra={"field": field, "attempt": attempt, "error": str(e)},
                )
            except (requests.exceptions.RequestException, ValueError) as e:
                # HTTP error status or a body that is not JSON - retrying will not help
                logger.warning(
                    "Remote field check error",
                    extra={"field": field, "error": str(e)},
                )
                return ""
            else:
                return self._message_from(field, body)

        logger.warning(
            "Remote field check unavailable",
            extra={"field": field, "attempts": attempts, "endpoint": self.endpoint},
        )
        return ""

    def _message_from(self, field: str, body: Any) -> str:
        """Read the message from a response body; anything but a JSON object counts as valid."""
        if not isinstance(body, dict):
            logger.warning(
                "Remote field check returned an unexpected body",
                extra={"field": field, "body_type": type(body).__name__},
            )
            return ""
        message = body.get("message")
        return str(message) if message else ""

    def apply(self, controller, field: str) -> str:
        """
        Check a controller's current value and record any error on it.

        Args:
            controller: FormController holding the field
            field: Field name

        Returns:
            The message returned by check()
        """
        message = self.check(field, controller.values.get(field))
        if message:
            controller.set_field_error(field, message)
        return message
