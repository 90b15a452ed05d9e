"""Naming helpers for ability and uri key conventions."""

import re

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def camel_to_snake(name: str) -> str:
    """Convert ``showAny`` or ``ShowAny`` to ``show_any``."""
    return _CAMEL_BOUNDARY.sub("_", name).replace("-", "_").lower()


def kebab_case(name: str) -> str:
    """Convert ``BlogPost`` to ``blog-post``."""
    return camel_to_snake(name).replace("_", "-")


def pluralize(word: str) -> str:
    """Naive english plural, enough for uri keys."""
    if not word:
        return word

    if re.search(r"[^aeiou]y$", word):
        return word[:-1] + "ies"

    if re.search(r"(s|x|z|ch|sh)$", word):
        return word + "es"

    return word + "s"
