"""
Configuration loader with deep merge.

Precedence order (lowest to highest):
1. Defaults (defined in the Pydantic schemas)
2. YAML file
3. Environment variables
4. CLI arguments

The merge is recursive so every key is preserved at every level.
"""

import os
from pathlib import Path
from typing import Any

import yaml

from .schema import AppConfig

_TRUE_VALUES = {"1", "true", "yes", "on"}


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge two dictionaries.

    Args:
        base: Base dictionary
        override: Dictionary whose values win over base

    Returns:
        New merged dictionary. Override wins on leaf conflicts.

    Example:
        >>> base = {"a": {"b": 1, "c": 2}, "d": 3}
        >>> override = {"a": {"b": 99}, "e": 4}
        >>> deep_merge(base, override)
        {"a": {"b": 99, "c": 2}, "d": 3, "e": 4}
    """
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_yaml_config(config_path: Path | None) -> dict[str, Any]:
    """Load configuration from a YAML file.

    Args:
        config_path: Path to the YAML file, or None to skip

    Returns:
        Configuration dict, or an empty dict if there is no file
    """
    if not config_path:
        return {}

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
        return data if data else {}


def load_env_overrides() -> dict[str, Any]:
    """Load overrides from environment variables.

    Supported variables:
        TRANSKIT_LANG: overrides i18n.lang
        TRANSKIT_FALLBACK_LANG: overrides i18n.fallback_lang
        TRANSKIT_LANG_PATH: overrides i18n.lang_path
        TRANSKIT_HAS_PHP: overrides i18n.has_php_translations ("1", "true", ...)
        TRANSKIT_LOG_LEVEL: overrides logging.level

    Returns:
        Dict with the overrides found in the environment
    """
    overrides: dict[str, Any] = {}

    if lang := os.environ.get("TRANSKIT_LANG"):
        overrides.setdefault("i18n", {})["lang"] = lang

    if fallback := os.environ.get("TRANSKIT_FALLBACK_LANG"):
        overrides.setdefault("i18n", {})["fallback_lang"] = fallback

    if lang_path := os.environ.get("TRANSKIT_LANG_PATH"):
        overrides.setdefault("i18n", {})["lang_path"] = lang_path

    if (has_php := os.environ.get("TRANSKIT_HAS_PHP")) is not None:
        overrides.setdefault("i18n", {})["has_php_translations"] = (
            has_php.strip().lower() in _TRUE_VALUES
        )

    if log_level := os.environ.get("TRANSKIT_LOG_LEVEL"):
        overrides.setdefault("logging", {})["level"] = log_level.lower()

    return overrides


def apply_cli_overrides(config_dict: dict[str, Any], cli_args: dict[str, Any]) -> dict[str, Any]:
    """Apply overrides from CLI arguments.

    Args:
        config_dict: Base configuration (already merged with YAML and env)
        cli_args: Dict with CLI arguments

    Returns:
        Configuration with the CLI overrides applied
    """
    overrides: dict[str, Any] = {}

    if cli_args.get("lang"):
        overrides.setdefault("i18n", {})["lang"] = cli_args["lang"]

    if cli_args.get("fallback_lang"):
        overrides.setdefault("i18n", {})["fallback_lang"] = cli_args["fallback_lang"]

    if cli_args.get("lang_path"):
        overrides.setdefault("i18n", {})["lang_path"] = cli_args["lang_path"]

    if cli_args.get("log_file"):
        overrides.setdefault("logging", {})["file"] = cli_args["log_file"]

    if cli_args.get("verbose") is not None:
        overrides.setdefault("logging", {})["verbose"] = cli_args["verbose"]

    return deep_merge(config_dict, overrides)


def load_config(
    config_path: Path | None = None,
    cli_args: dict[str, Any] | None = None,
) -> AppConfig:
    """Load and validate the complete application configuration.

    Args:
        config_path: Path to the YAML configuration file
        cli_args: Dict with CLI arguments

    Returns:
        Validated, complete AppConfig

    Raises:
        FileNotFoundError: If config_path does not exist
        ValidationError: If the final configuration is invalid
    """
    cli_args = cli_args or {}

    yaml_config = load_yaml_config(config_path)
    merged = deep_merge(yaml_config, load_env_overrides())
    merged = apply_cli_overrides(merged, cli_args)

    # Pydantic fills in the defaults
    return AppConfig(**merged)
