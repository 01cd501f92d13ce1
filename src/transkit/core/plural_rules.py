"""
Plural rules — language-specific plural index selection.

Maps a (language, number) pair to the zero-based index of the plural variant
to use. Families follow the CLDR-derived table used by the Symfony and
Laravel message selectors.

Tag normalization:
- "-" and "_" are interchangeable ("en-US" == "en_US")
- The region is dropped ("en_US" -> "en"), except for "pt_BR", whose rule
  differs from "pt"
"""

from typing import Callable

__all__ = ["get_plural_index", "normalize_plural_locale"]


def _always_first(n: float) -> int:
    return 0


def _one_other(n: float) -> int:
    return 0 if n == 1 else 1


def _zero_one_other(n: float) -> int:
    return 0 if n in (0, 1) else 1


def _east_slavic(n: float) -> int:
    if n % 10 == 1 and n % 100 != 11:
        return 0
    if 2 <= n % 10 <= 4 and (n % 100 < 10 or n % 100 >= 20):
        return 1
    return 2


def _czech(n: float) -> int:
    if n == 1:
        return 0
    return 1 if 2 <= n <= 4 else 2


def _irish(n: float) -> int:
    if n == 1:
        return 0
    return 1 if n == 2 else 2


def _lithuanian(n: float) -> int:
    if n % 10 == 1 and n % 100 != 11:
        return 0
    if n % 10 >= 2 and (n % 100 < 10 or n % 100 >= 20):
        return 1
    return 2


def _slovenian(n: float) -> int:
    if n % 100 == 1:
        return 0
    if n % 100 == 2:
        return 1
    if n % 100 in (3, 4):
        return 2
    return 3


def _macedonian(n: float) -> int:
    return 0 if n % 10 == 1 else 1


def _maltese(n: float) -> int:
    if n == 1:
        return 0
    if n == 0 or 1 < n % 100 < 11:
        return 1
    if 10 < n % 100 < 20:
        return 2
    return 3


def _latvian(n: float) -> int:
    if n == 0:
        return 0
    if n % 10 == 1 and n % 100 != 11:
        return 1
    return 2


def _polish(n: float) -> int:
    if n == 1:
        return 0
    if 2 <= n % 10 <= 4 and (n % 100 < 12 or n % 100 > 14):
        return 1
    return 2


def _welsh(n: float) -> int:
    if n == 1:
        return 0
    if n == 2:
        return 1
    return 2 if n in (8, 11) else 3


def _romanian(n: float) -> int:
    if n == 1:
        return 0
    if n == 0 or 0 < n % 100 < 20:
        return 1
    return 2


def _arabic(n: float) -> int:
    if n in (0, 1, 2):
        return int(n)
    if 3 <= n % 100 <= 10:
        return 3
    if 11 <= n % 100 <= 99:
        return 4
    return 5


_FAMILIES: dict[Callable[[float], int], tuple[str, ...]] = {
    _always_first: (
        "az", "bo", "dz", "id", "ja", "jv", "ka", "km", "kn", "ko", "ms",
        "th", "tr", "vi", "zh",
    ),
    _one_other: (
        "af", "bn", "bg", "ca", "da", "de", "el", "en", "eo", "es", "et",
        "eu", "fa", "fi", "fo", "fur", "fy", "gl", "gu", "ha", "he", "hu",
        "is", "it", "ku", "lb", "ml", "mn", "mr", "nah", "nb", "ne", "nl",
        "nn", "no", "oc", "om", "or", "pa", "pap", "ps", "pt", "so", "sq",
        "sv", "sw", "ta", "te", "tk", "ur", "zu",
    ),
    _zero_one_other: (
        "am", "bh", "fil", "fr", "gun", "hi", "hy", "ln", "mg", "nso",
        "pt_BR", "ti", "wa", "xbr",
    ),
    _east_slavic: ("be", "bs", "hr", "ru", "sh", "sr", "uk"),
    _czech: ("cs", "sk"),
    _irish: ("ga",),
    _lithuanian: ("lt",),
    _slovenian: ("sl",),
    _macedonian: ("mk",),
    _maltese: ("mt",),
    _latvian: ("lv",),
    _polish: ("pl",),
    _welsh: ("cy",),
    _romanian: ("ro",),
    _arabic: ("ar",),
}

_RULES: dict[str, Callable[[float], int]] = {
    lang: rule for rule, langs in _FAMILIES.items() for lang in langs
}


def normalize_plural_locale(lang: str) -> str:
    """Reduce a language tag to the key used in the rule table.

    Args:
        lang: Language tag (e.g. "en-US", "pt_BR", "fr").

    Returns:
        Normalized tag (e.g. "en", "pt_BR", "fr").
    """
    lang = lang.replace("-", "_")
    if lang != "pt_BR" and len(lang) > 3 and "_" in lang:
        lang = lang[: lang.rindex("_")]
    return lang


def get_plural_index(lang: str | None, number: float) -> int:
    """Return the plural variant index for a number in a language.

    Args:
        lang: Language tag. None or an unknown language selects index 0.
        number: The count; negative values use their absolute value.

    Returns:
        Zero-based index into the pipe-separated variants.
    """
    if not lang:
        return 0
    rule = _RULES.get(normalize_plural_locale(lang))
    if rule is None:
        return 0
    return rule(abs(number))
