"""
Command line interface for transkit using Click.

Commands:
    transkit trans KEY [-r name=value]... [--count N]   Translate a key
    transkit languages                                  List available languages
    transkit validate-config                            Validate a YAML config file
"""

import sys
from pathlib import Path
from typing import Any

import click
from pydantic import ValidationError

from .config.loader import load_config
from .config.schema import AppConfig
from .core.document import MemoryDocument
from .i18n import create_i18n
from .logging import configure_logging
from .providers import JsonDirectoryProvider, detect_php_translations

# Exit codes
EXIT_SUCCESS = 0
EXIT_FAILED = 1
EXIT_CONFIG_ERROR = 3

_VERSION = "0.4.0"


def _parse_replacements(values: tuple[str, ...]) -> dict[str, str]:
    """Parse repeated name=value options into a dict, keeping their order."""
    replacements: dict[str, str] = {}
    for item in values:
        name, sep, value = item.partition("=")
        if not sep or not name:
            raise click.BadParameter(
                f"Expected name=value, got '{item}'",
                param_hint="'-r' / '--replace'",
            )
        replacements[name] = value
    return replacements


def _load(config_path: Path | None, cli_args: dict[str, Any]) -> AppConfig:
    """Load configuration and set up logging, exiting on config errors."""
    try:
        app_config = load_config(config_path=config_path, cli_args=cli_args)
    except FileNotFoundError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_CONFIG_ERROR)
    except ValidationError as e:
        click.echo(f"Invalid configuration: {e}", err=True)
        sys.exit(EXIT_CONFIG_ERROR)

    configure_logging(app_config.logging, quiet=cli_args.get("quiet", False))
    return app_config


@click.group()
@click.version_option(version=_VERSION, prog_name="transkit")
def main() -> None:
    """transkit — translation keys to localized strings."""


@main.command()
@click.argument("key", required=True)
@click.option(
    "-r",
    "--replace",
    "replace",
    multiple=True,
    metavar="NAME=VALUE",
    help="Placeholder replacement (repeatable)",
)
@click.option(
    "-n",
    "--count",
    type=float,
    default=None,
    help="Count for pluralized messages (uses trans_choice)",
)
@click.option("-l", "--lang", help="Language tag to translate into")
@click.option("--fallback-lang", help="Fallback language tag")
@click.option(
    "--lang-path",
    type=click.Path(path_type=Path),
    help="Directory with <tag>.json message files",
)
@click.option(
    "-c",
    "--config",
    type=click.Path(path_type=Path),
    help="Path to the YAML configuration file",
)
@click.option("-v", "--verbose", count=True, help="Verbosity (-v info, -vv debug)")
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    help="File to save structured logs (JSON)",
)
@click.option("--quiet", is_flag=True, help="Silence log output")
def trans(
    key: str,
    replace: tuple[str, ...],
    count: float | None,
    config: Path | None,
    **kwargs: Any,
) -> None:
    """Translate KEY and print the result."""
    replacements = _parse_replacements(replace)
    app_config = _load(config, kwargs)

    # Files are read synchronously: there is no event loop in the CLI
    i18n_config = app_config.i18n.model_copy(update={"async_loading": False})
    document = MemoryDocument()
    i18n = create_i18n(i18n_config, document=document, shared=False)

    if count is None:
        result = i18n.trans(key, replacements)
    else:
        result = i18n.trans_choice(key, count, replacements)

    if isinstance(result, list):
        for line in result:
            click.echo(line)
    else:
        click.echo(result)


@main.command()
@click.option(
    "--lang-path",
    type=click.Path(path_type=Path),
    help="Directory with <tag>.json message files",
)
@click.option(
    "-c",
    "--config",
    type=click.Path(path_type=Path),
    help="Path to the YAML configuration file",
)
def languages(lang_path: Path | None, config: Path | None) -> None:
    """List the languages available in the lang directory."""
    app_config = _load(config, {"lang_path": lang_path, "quiet": True})
    path = app_config.i18n.lang_path

    provider = JsonDirectoryProvider(path)
    tags = provider.available_languages()
    if not tags:
        click.echo(f"No language files found in {path}", err=True)
        sys.exit(EXIT_FAILED)

    has_php = app_config.i18n.has_php_translations
    if has_php is None:
        has_php = detect_php_translations(path)

    click.echo(f"Languages in {path}:\n")
    for tag in tags:
        marker = " *" if tag == app_config.i18n.fallback_lang else ""
        click.echo(f"  {tag}{marker}")

    click.echo("\n  * fallback language")
    click.echo(f"  PHP supplemental messages: {'yes' if has_php else 'no'}")


@main.command("validate-config")
@click.option(
    "-c",
    "--config",
    type=click.Path(exists=True, path_type=Path),
    help="Path to the configuration file to validate",
)
def validate_config(config: Path | None) -> None:
    """Validate a YAML configuration file."""
    try:
        app_config = load_config(config_path=config)
        click.echo("Valid configuration")
        click.echo(f"  Language: {app_config.i18n.lang or '(fallback)'}")
        click.echo(f"  Fallback: {app_config.i18n.fallback_lang}")
        click.echo(f"  Lang path: {app_config.i18n.lang_path}")
    except FileNotFoundError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_CONFIG_ERROR)
    except Exception as e:
        click.echo(f"Invalid configuration: {e}", err=True)
        sys.exit(EXIT_FAILED)


if __name__ == "__main__":
    main()
