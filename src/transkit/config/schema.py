"""
Pydantic models for transkit configuration.

Defines the configuration read from YAML, environment variables and CLI
arguments. Runtime objects (providers, callbacks, document roots) live in
transkit.core.options.I18nOptions instead.
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field


class I18nConfig(BaseModel):
    """Language loading configuration."""

    lang: str | None = Field(
        default=None,
        description="Initial language tag. None = use fallback_lang.",
    )
    fallback_lang: str = Field(
        default="en",
        description="Language loaded when the requested one has no messages.",
    )
    lang_path: Path = Field(
        default=Path("lang"),
        description="Directory with one <tag>.json file per language.",
    )
    default_key_prefix: str | None = Field(
        default=None,
        description="Prefix stripped from untranslated keys before display.",
    )
    has_php_translations: bool | None = Field(
        default=None,
        description=(
            "If True, php_<tag>.json is merged over <tag>.json. "
            "None = detect from the files present in lang_path."
        ),
    )
    async_loading: bool = Field(
        default=False,
        description="If True, the JSON provider reads files in a worker thread.",
    )

    model_config = {"extra": "forbid"}


class LoggingConfig(BaseModel):
    """Logging system configuration."""

    level: Literal["debug", "info", "warn", "error"] = "warn"
    file: Path | None = None
    verbose: int = 0

    model_config = {"extra": "forbid"}


class AppConfig(BaseModel):
    """Complete application configuration.

    This is the root of the configuration tree. It combines all sections
    and is the entry point for validation.
    """

    i18n: I18nConfig = Field(default_factory=I18nConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {"extra": "forbid"}
