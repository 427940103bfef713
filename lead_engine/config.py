"""Configuration helpers for the lead engine."""
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from .errors import ConfigurationError

LOGGER = logging.getLogger(__name__)

_SUPPORTED_EXTENSIONS = {".json", ".yaml", ".yml"}

DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_SEARCH_BACKEND = "lead_engine.providers.gemini.GeminiSearchModel"
DEFAULT_CONTACTOUT_URL = "https://api.contactout.com/v1/people/search"

ENV_PREFIX = "LEAD_ENGINE_"
# Bare API_KEY is accepted for compatibility with existing deployments.
_API_KEY_VARIABLES = ("GEMINI_API_KEY", "API_KEY")


def load_configuration(path: str | Path) -> Dict[str, Any]:
    """Load configuration data from a JSON or YAML file."""

    file_path = Path(path)
    if not file_path.exists():
        raise ConfigurationError(f"Configuration file '{file_path}' was not found")

    if file_path.suffix.lower() not in _SUPPORTED_EXTENSIONS:
        raise ConfigurationError(
            f"Unsupported configuration format '{file_path.suffix}'. Supported extensions: {sorted(_SUPPORTED_EXTENSIONS)}"
        )

    text = file_path.read_text(encoding="utf-8")
    if file_path.suffix.lower() == ".json":
        data = json.loads(text)
    else:
        try:
            import yaml  # type: ignore
        except ImportError as exc:  # pragma: no cover - dependency optional
            raise ConfigurationError(
                "YAML configuration requires the 'pyyaml' package to be installed"
            ) from exc
        data = yaml.safe_load(text)

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration file '{file_path}' must contain a mapping at the top level")
    return data


@dataclass
class Settings:
    """Runtime settings injected into the orchestrators and dispatcher."""

    gemini_api_key: Optional[str] = None
    model: str = DEFAULT_MODEL
    search_backend: str = DEFAULT_SEARCH_BACKEND
    rate_limit_per_minute: Optional[float] = None
    request_timeout: float = 60.0
    prefer_fenced_json: bool = False
    crm_endpoint: Optional[str] = None
    tenant_subdomain: Optional[str] = None
    contactout_token: Optional[str] = None
    contactout_url: str = DEFAULT_CONTACTOUT_URL
    success_reset_seconds: float = 3.0

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Settings":
        known = {item.name for item in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            LOGGER.warning("Ignoring unknown configuration keys: %s", ", ".join(unknown))
        return cls(**{key: value for key, value in data.items() if key in known})

    def validate(self) -> "Settings":
        """Fail fast on missing credentials or nonsensical limits."""

        if self.search_backend == DEFAULT_SEARCH_BACKEND and not self.gemini_api_key:
            raise ConfigurationError("GEMINI_API_KEY (or API_KEY) environment variable not set")
        if not self.model:
            raise ConfigurationError("A model name is required")
        try:
            self.request_timeout = float(self.request_timeout)
            self.success_reset_seconds = float(self.success_reset_seconds)
            if self.rate_limit_per_minute is not None:
                self.rate_limit_per_minute = float(self.rate_limit_per_minute)
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"Invalid numeric setting: {exc}") from exc
        if self.request_timeout <= 0:
            raise ConfigurationError("request_timeout must be greater than zero")
        if self.success_reset_seconds < 0:
            raise ConfigurationError("success_reset_seconds must not be negative")
        if self.rate_limit_per_minute is not None and self.rate_limit_per_minute <= 0:
            raise ConfigurationError("rate_limit_per_minute must be greater than zero when set")
        return self

    @property
    def lookup_enabled(self) -> bool:
        return bool(self.contactout_token)


def _environment_overrides(environ: Mapping[str, str]) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    for variable in _API_KEY_VARIABLES:
        if environ.get(variable):
            overrides["gemini_api_key"] = environ[variable]
            break
    for item in fields(Settings):
        value = environ.get(f"{ENV_PREFIX}{item.name.upper()}")
        if value not in (None, ""):
            overrides[item.name] = value
    return overrides


def _coerce_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"1", "true", "yes", "on"}


def load_settings(
    path: Optional[str | Path] = None,
    *,
    environ: Optional[Mapping[str, str]] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> Settings:
    """Build validated :class:`Settings` from an optional file plus environment variables.

    Environment variables win over file values so that secrets can stay out of
    configuration files; explicit ``overrides`` win over both.
    """

    data: Dict[str, Any] = {}
    if path is not None:
        data.update(load_configuration(path))
    data.update(_environment_overrides(os.environ if environ is None else environ))
    data.update(overrides or {})
    if "prefer_fenced_json" in data:
        data["prefer_fenced_json"] = _coerce_bool(data["prefer_fenced_json"])
    return Settings.from_mapping(data).validate()


__all__ = ["ConfigurationError", "Settings", "load_configuration", "load_settings"]
