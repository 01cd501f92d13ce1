"""
Factory functions turning an AppConfig into a ready I18n instance.
"""

from typing import Any, Callable

import structlog

from ..config.schema import I18nConfig
from ..core.document import DocumentRoot
from ..core.options import I18nOptions
from ..providers.json_files import JsonDirectoryProvider, detect_php_translations
from .registry import I18n

logger = structlog.get_logger()


def build_options(
    config: I18nConfig,
    document: DocumentRoot | None = None,
    on_load: Callable[[str], Any] | None = None,
) -> I18nOptions:
    """Build runtime options from the i18n configuration section.

    The supplemental-source flag is taken from the configuration; when it is
    unset, the lang directory is inspected for php_*.json files.
    """
    has_php = config.has_php_translations
    if has_php is None:
        has_php = detect_php_translations(config.lang_path)

    options: dict[str, Any] = {
        "lang": config.lang,
        "fallback_lang": config.fallback_lang,
        "resolve": JsonDirectoryProvider(config.lang_path, use_async=config.async_loading),
        "default_key_prefix": config.default_key_prefix,
        "has_php_translations": has_php,
        "document": document,
    }
    if on_load is not None:
        options["on_load"] = on_load
    return I18nOptions(**options)


def create_i18n(
    config: I18nConfig,
    document: DocumentRoot | None = None,
    on_load: Callable[[str], Any] | None = None,
    shared: bool = True,
) -> I18n:
    """Create (or update) an I18n instance from configuration.

    Args:
        config: The i18n configuration section.
        document: Optional UI root following the active language.
        on_load: Optional callback invoked after each language commit.
        shared: If True, configure the shared instance (reloading it when it
            already exists); otherwise build an independent one.

    Returns:
        The configured I18n instance.
    """
    options = build_options(config, document=document, on_load=on_load)
    logger.info(
        "i18n.created",
        lang_path=str(config.lang_path),
        shared=shared,
        has_php_translations=options.has_php_translations,
    )
    if shared:
        return I18n.get_shared_instance(options, force_load=True)
    return I18n.new_instance(options)
