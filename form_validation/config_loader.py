"""Bundled configuration loading with optional override documents."""

import copy
import json
import logging
import os
import urllib.parse
from importlib.resources import files
from typing import Any, Dict, Optional

import jsonschema
import requests
import yaml

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "FORM_VALIDATION_CONFIG"


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Return base with override merged in; nested dicts merge, everything else replaces."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


class ConfigLoader:
    """Handles bundled configuration plus an optional override document."""

    def __init__(self, config_uri: Optional[str] = None):
        """
        Initialize config loader with bundled form-config.yaml.

        Args:
            config_uri: Optional override document - a path, file:// URI or
                        http(s):// URI. Falls back to the FORM_VALIDATION_CONFIG
                        environment variable when not given.

        Raises:
            ValueError: If the merged configuration fails schema validation
            RuntimeError: If a remote override cannot be fetched
        """
        config_file = files("form_validation").joinpath("form-config.yaml")
        with config_file.open("r") as f:
            bundled = yaml.safe_load(f)

        self.override_uri = config_uri or os.environ.get(CONFIG_ENV_VAR)
        if self.override_uri:
            override = self._load_config_from_uri(self.override_uri)
            self.config = _deep_merge(bundled, override or {})
            logger.info(
                "Loaded configuration override",
                extra={"config_uri": self.override_uri},
            )
        else:
            self.config = bundled

        self._validate(self.config)

    def _validate(self, config: Dict[str, Any]) -> None:
        """Validate configuration against the bundled JSON schema."""
        schema_file = files("form_validation").joinpath("config.schema.json")
        with schema_file.open("r") as f:
            schema = json.load(f)

        try:
            jsonschema.validate(instance=config, schema=schema)
        except jsonschema.ValidationError as e:
            error_path = " -> ".join(str(p) for p in e.path) if e.path else "root"
            raise ValueError(
                f"Invalid form-validation configuration at {error_path}: {e.message}"
            ) from e

    def _load_yaml(self, path: str) -> Dict[str, Any]:
        """Load YAML file from disk."""
        with open(path) as f:
            return yaml.safe_load(f)

    def _load_config_from_uri(self, uri: str) -> Dict[str, Any]:
        """
        Load an override document.

        Supports:
        - Plain paths - ./form-config.local.yaml
        - file:// - Local filesystem (absolute paths)
        - https:// / http:// - Remote documents

        Args:
            uri: Config URI or path

        Returns:
            Parsed YAML config
        """
        parsed = urllib.parse.urlparse(uri)

        if not parsed.scheme:
            return self._load_yaml(os.path.abspath(uri))

        if parsed.scheme == "file":
            return self._load_yaml(urllib.parse.unquote(parsed.path))

        if parsed.scheme in ("http", "https"):
            return yaml.safe_load(self._fetch_uri(uri))

        raise ValueError(f"Unsupported URI scheme: {parsed.scheme} in {uri}")

    def _fetch_uri(self, uri: str) -> str:
        """Fetch content from HTTP/HTTPS URI."""
        try:
            response = requests.get(uri, timeout=10)
            response.raise_for_status()
            return response.text
        except requests.RequestException as e:
            raise RuntimeError(f"Failed to fetch config from {uri}: {e}") from e

    def get_config(self) -> Dict[str, Any]:
        """Get the merged configuration."""
        return self.config

    def get_messages(self) -> Dict[str, str]:
        """Get the field-error message catalogue."""
        return self.config["messages"]

    def get_message(self, key: str, **params: Any) -> str:
        """
        Get a catalogue message with {placeholder} parameters filled in.

        Example:
            loader.get_message("min_length", min=2)
            # "Must be at least 2 characters"

        Raises:
            KeyError: If the catalogue has no such message
        """
        template = self.config["messages"][key]
        return template.format(**params) if params else template

    def get_password_policy(self) -> Dict[str, Any]:
        """Get password policy (lengths, character class requirements, messages)."""
        return self.config["password"]

    def get_email_limits(self) -> Dict[str, Any]:
        """Get email limits (max_length enforced by is_valid_email)."""
        return self.config.get("email", {})

    def get_remote_check_config(self) -> Dict[str, Any]:
        """Get remote field check configuration."""
        return self.config["remote_check"]


_config: Optional[ConfigLoader] = None


def get_config(config_uri: Optional[str] = None) -> ConfigLoader:
    """
    Return the process-wide ConfigLoader, creating it on first use.

    Args:
        config_uri: Override document used only when the loader is created
    """
    global _config
    if _config is None:
        _config = ConfigLoader(config_uri)
    return _config


def reset_config() -> None:
    """Drop the process-wide ConfigLoader (the next get_config() reloads)."""
    global _config
    _config = None
