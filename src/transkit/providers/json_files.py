"""
JSON directory message provider.

Reads one file per language from a directory:

    lang/
      en.json        {"auth": {"failed": "These credentials do not match."}}
      es.json
      php_en.json    messages extracted from PHP language files (optional)

Nested objects and arrays are flattened to dot keys ("auth.failed",
"rules.0"), which is the shape the resolver expects.

A missing, unreadable or malformed file yields an empty message set; the
loader then walks its fallback chain.
"""

import asyncio
import json
from pathlib import Path
from typing import Any

import structlog

logger = structlog.get_logger()

__all__ = ["JsonDirectoryProvider", "flatten_messages", "detect_php_translations"]

PHP_PREFIX = "php_"


def flatten_messages(data: Any, prefix: str = "") -> dict[str, Any]:
    """Flatten nested dicts/lists into a single-level dot-keyed dict.

    Example:
        >>> flatten_messages({"a": {"b": "x"}, "c": ["y", "z"]})
        {"a.b": "x", "c.0": "y", "c.1": "z"}
    """
    if isinstance(data, dict):
        items = data.items()
    elif isinstance(data, list):
        items = enumerate(data)
    else:
        return {prefix: data} if prefix else {}

    result: dict[str, Any] = {}
    for key, value in items:
        path = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, (dict, list)):
            result.update(flatten_messages(value, path))
        else:
            result[path] = value
    return result


def detect_php_translations(lang_path: Path) -> bool:
    """True if lang_path holds messages extracted from PHP files."""
    lang_path = Path(lang_path)
    if not lang_path.is_dir():
        return False
    return any(lang_path.glob(f"{PHP_PREFIX}*.json"))


class JsonDirectoryProvider:
    """Message provider reading <lang_path>/<tag>.json.

    Usage:
        provider = JsonDirectoryProvider(Path("lang"))
        I18n({"lang": "es", "resolve": provider})

        # Async loading reads files in a worker thread
        provider = JsonDirectoryProvider(Path("lang"), use_async=True)
    """

    def __init__(self, lang_path: Path, use_async: bool = False) -> None:
        self.lang_path = Path(lang_path)
        self.use_async = use_async
        self._log = logger.bind(component="i18n.provider", lang_path=str(self.lang_path))

    def __call__(self, tag: str) -> Any:
        if self.use_async:
            return asyncio.to_thread(self.read, tag)
        return self.read(tag)

    def read(self, tag: str) -> dict[str, Any]:
        """Read and flatten the messages of one language.

        Returns:
            Flat message set, or an empty dict if the file is missing or invalid.
        """
        if not tag or "/" in tag or "\\" in tag or tag.startswith("."):
            self._log.warning("i18n.provider.invalid_tag", tag=tag)
            return {}

        path = self.lang_path / f"{tag}.json"
        if not path.is_file():
            self._log.debug("i18n.provider.file_missing", tag=tag, path=str(path))
            return {}

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            self._log.warning("i18n.provider.read_failed", path=str(path), error=str(e))
            return {}

        if not isinstance(data, dict):
            self._log.warning("i18n.provider.invalid_format", path=str(path), expected="object")
            return {}

        return flatten_messages(data)

    def available_languages(self) -> list[str]:
        """Tags with a JSON file in lang_path (supplemental files excluded)."""
        if not self.lang_path.is_dir():
            return []
        return sorted(
            path.stem
            for path in self.lang_path.glob("*.json")
            if not path.stem.startswith(PHP_PREFIX)
        )

    def __repr__(self) -> str:
        return f"<JsonDirectoryProvider('{self.lang_path}', async={self.use_async})>"
