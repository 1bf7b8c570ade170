"""
Config system - layered configuration for the host framework and probe.

Merge precedence (later overrides earlier):
defaults < .env file < environment variables < manual overrides
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import dotenv_values


class ConfigError(Exception):
    """Raised when configuration validation fails."""
    pass


@dataclass
class ProbeConfig:
    """
    Caching configuration shared by the application and the test harness.

    ``perform_caching`` is the global switch: with it off every caching
    helper on a controller is a no-op. The harness turns it on.
    """
    perform_caching: bool = False
    host: str = "test.host"             # Host embedded in action/fragment keys
    relative_url_root: str = ""         # Mount point prefixed to generated URLs
    fragment_namespace: str = "views"   # First segment of every fragment key
    page_cache_directory: str = "public"
    page_cache_extension: str = ".html"
    log_level: str = "WARNING"

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


class ConfigLoader:
    """
    Loads and merges configuration from multiple sources.

    Keys in the environment and in ``.env`` files carry the prefix, e.g.
    ``CACHEPROBE_PERFORM_CACHING=true``.
    """

    def __init__(self, env_prefix: str = "CACHEPROBE_"):
        self.env_prefix = env_prefix
        self.config_data: Dict[str, Any] = {}

    @classmethod
    def load(
        cls,
        env_file: Optional[str] = None,
        env_prefix: str = "CACHEPROBE_",
        overrides: Optional[Dict[str, Any]] = None,
    ) -> "ConfigLoader":
        loader = cls(env_prefix=env_prefix)

        if env_file:
            loader._load_env_file(env_file)

        loader._load_from_env()

        if overrides:
            loader.config_data.update(overrides)

        return loader

    def _load_env_file(self, path: str):
        """Load config from .env file."""
        if not Path(path).exists():
            return
        for key, value in dotenv_values(path).items():
            if value is not None and key.startswith(self.env_prefix):
                self._set(key, value)

    def _load_from_env(self):
        for key, value in os.environ.items():
            if key.startswith(self.env_prefix):
                self._set(key, value)

    def _set(self, key: str, value: str):
        name = key[len(self.env_prefix):].lower()
        self.config_data[name] = self._parse_value(value)

    def _parse_value(self, value: str) -> Any:
        """Parse string value to appropriate type."""
        if value.lower() in ("true", "yes", "on"):
            return True
        if value.lower() in ("false", "no", "off"):
            return False

        try:
            if "." in value:
                return float(value)
            return int(value)
        except ValueError:
            pass

        if value.startswith(("{", "[")):
            try:
                return json.loads(value)
            except json.JSONDecodeError:
                pass

        return value

    def get(self, key: str, default: Any = None) -> Any:
        return self.config_data.get(key, default)

    def build_config(self) -> ProbeConfig:
        """
        Instantiate a :class:`ProbeConfig` from the merged data.

        Unknown keys are ignored; known keys must match the field type.
        """
        kwargs: Dict[str, Any] = {}
        for f in fields(ProbeConfig):
            if f.name not in self.config_data:
                continue
            value = self.config_data[f.name]
            expected = type(getattr(ProbeConfig(), f.name))
            if expected is str and not isinstance(value, str):
                # ".html" or "1.0" style values may have been parsed as numbers
                value = str(value)
            elif expected is bool and value in (0, 1):
                value = bool(value)
            if not isinstance(value, expected):
                raise ConfigError(
                    f"Config '{f.name}' expects {expected.__name__}, got {type(value).__name__}"
                )
            kwargs[f.name] = value
        return ProbeConfig(**kwargs)


def load_config(
    env_file: Optional[str] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> ProbeConfig:
    """Shortcut for ``ConfigLoader.load(...).build_config()``."""
    return ConfigLoader.load(env_file=env_file, overrides=overrides).build_config()
