#!/usr/bin/env python3
# ======================================================================
#  Config Service - Configuration loading and caching
#  - Loads config from YAML files and env vars
#  - Caches composed config for performance
#  - Provides reload() for runtime changes
# ======================================================================

from __future__ import annotations

import contextlib
import logging
import os
from dataclasses import dataclass
from typing import Any

import yaml

# ======================================================================
# Internal Constants (Not User-Configurable)
# ======================================================================
SYSTEM_CONFIG_PATH = "/etc/statekeeper/config.yaml"
ENV_PREFIX = "STATEKEEPER_"
ENV_CONFIG_PATH = "STATEKEEPER_CONFIG_PATH"

# Keys environment variables may override
ALLOWED_ENV_KEYS = {
    "state_dir",
    "ha_state_enabled",
    "periodic_pause_ms",
    "api_host",
    "api_port",
}


@dataclass
class StateConfig:
    """Typed view of the settings the state managers need."""

    state_dir: str
    ha_state_enabled: bool
    periodic_pause_ms: int
    api_host: str
    api_port: int

    @property
    def periodic_pause_s(self) -> float:
        return self.periodic_pause_ms / 1000.0


class ConfigService:
    """
    Service for loading and caching application configuration.

    Loads config from multiple sources (defaults → YAML → overrides → env),
    caches the result, and provides reload capability.
    """

    def __init__(self, overrides: dict[str, Any] | None = None) -> None:
        """
        Initialize ConfigService with empty cache.

        Args:
            overrides: Values applied after YAML but before environment variables
        """
        self._overrides = overrides or {}
        self._config: dict[str, Any] | None = None
        self._logger = logging.getLogger(__name__)

    def get_config(self, force_reload: bool = False) -> dict[str, Any]:
        """
        Get the composed configuration.

        Args:
            force_reload: If True, bypass cache and reload from sources

        Returns:
            Complete configuration dict
        """
        if self._config is None or force_reload:
            self._config = self._compose()
        return self._config

    def get(self, key_path: str, default: Any = None) -> Any:
        """
        Get a config value by dotted path.

        Args:
            key_path: Dotted path like "state_dir" or "api.port"
            default: Default value if key not found

        Returns:
            Config value or default

        Example:
            >>> service.get("periodic_pause_ms")
            2000
        """
        cfg = self.get_config()
        node: Any = cfg
        for part in key_path.split("."):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    def reload(self) -> dict[str, Any]:
        """
        Force reload configuration from all sources.

        Returns:
            Newly composed config
        """
        self._logger.info("Reloading configuration from all sources")
        return self.get_config(force_reload=True)

    def make_state_config(self) -> StateConfig:
        """
        Build a StateConfig from the current configuration.

        Returns:
            StateConfig ready for injection into the state managers
        """
        cfg = self.get_config()
        defaults = self._default_config()
        return StateConfig(
            state_dir=str(cfg["state_dir"]),
            ha_state_enabled=_as_bool(cfg.get("ha_state_enabled", False)),
            periodic_pause_ms=self._as_int(cfg, "periodic_pause_ms", defaults["periodic_pause_ms"]),
            api_host=str(cfg.get("api_host", "127.0.0.1")),
            api_port=self._as_int(cfg, "api_port", defaults["api_port"]),
        )

    def _as_int(self, cfg: dict[str, Any], key: str, default: int) -> int:
        """Read an integer setting, falling back to default when it does not parse."""
        value = cfg.get(key, default)
        try:
            return int(value)
        except (TypeError, ValueError):
            self._logger.warning(f"Ignoring invalid value {value!r} for {key}, using {default}")
            return default

    # ----------------------------------------------------------------------
    # Private composition logic
    # ----------------------------------------------------------------------

    def _compose(self) -> dict[str, Any]:
        """
        Load final configuration from:
          1) Built-in defaults
          2) /etc/statekeeper/config.yaml  (if present)
          3) ./config/config.yaml
          4) $STATEKEEPER_CONFIG_PATH (if set)
          5) overrides dict passed to the constructor
          6) Environment variables (STATEKEEPER_*)

        Returns merged config as dict.
        """
        cfg = self._default_config()

        # 1) System-wide YAML
        self._deep_merge(cfg, self._load_yaml(SYSTEM_CONFIG_PATH))

        # 2) Repo-local config
        repo_cfg = self._load_yaml(os.path.join(os.getcwd(), "config", "config.yaml"))
        if repo_cfg:
            self._deep_merge(cfg, repo_cfg)

        # 3) Optional path via env
        env_path = os.getenv(ENV_CONFIG_PATH)
        if env_path:
            self._deep_merge(cfg, self._load_yaml(env_path))

        # 4) Direct overrides
        if self._overrides:
            self._deep_merge(cfg, self._overrides)

        # 5) Environment variable overrides
        self._apply_env_overrides(cfg)

        with contextlib.suppress(Exception):
            self._logger.debug("compose() loaded config; keys: %s", list(cfg.keys()))

        return cfg

    def _default_config(self) -> dict[str, Any]:
        """Base defaults for user-configurable settings."""
        return {
            "state_dir": os.path.join(os.getcwd(), "data", "state"),
            "ha_state_enabled": False,  # Static HA: always MASTER
            "periodic_pause_ms": 2000,
            "api_host": "127.0.0.1",
            "api_port": 8357,
        }

    def _deep_merge(self, a: dict[str, Any], b: dict[str, Any]) -> dict[str, Any]:
        """
        Recursively merge dict b into dict a (mutates a, returns it).
        """
        for k, v in b.items():
            if isinstance(v, dict) and isinstance(a.get(k), dict):
                self._deep_merge(a[k], v)
            else:
                a[k] = v
        return a

    def _load_yaml(self, path: str) -> dict[str, Any]:
        """
        Load a YAML file; returns {} if not found or invalid.
        """
        if not path or not os.path.exists(path):
            return {}
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            self._logger.warning(f"Ignoring unreadable config file {path}: {e}")
            return {}
        if not isinstance(data, dict):
            self._logger.warning(f"Ignoring config file {path}: top level is not a mapping")
            return {}
        return data

    def _apply_env_overrides(self, cfg: dict[str, Any]) -> None:
        """
        Support environment overrides for the user-configurable keys only.

        Supported formats:
          STATEKEEPER_STATE_DIR=/var/lib/myapp/state
          STATEKEEPER_HA_STATE_ENABLED=true
          STATEKEEPER_PERIODIC_PAUSE_MS=5000
          STATEKEEPER_API_HOST=0.0.0.0
          STATEKEEPER_API_PORT=8357
        """
        for k, v in os.environ.items():
            if not k.startswith(ENV_PREFIX) or k == ENV_CONFIG_PATH:
                continue

            key = k[len(ENV_PREFIX) :].lower()
            if key not in ALLOWED_ENV_KEYS:
                self._logger.debug(f"Ignoring environment override for unknown key: {key}")
                continue

            cfg[key] = _parse_env_value(v)


def _parse_env_value(value: str) -> bool | int | float | str:
    """Parse typed values from environment strings. Anything that does not parse stays a string."""
    if value.lower() in ("true", "false"):
        return value.lower() == "true"
    if value.isdigit():
        return int(value)
    if value.replace(".", "", 1).replace("-", "", 1).isdigit():
        # "2024-01" passes the digit check but is no number
        try:
            return float(value)
        except ValueError:
            return value
    return value


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)
