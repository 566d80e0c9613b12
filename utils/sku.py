"""SKU string formatting helpers."""

from __future__ import annotations

from collections.abc import Iterable
from urllib.parse import unquote

LEGACY_ATTRIBUTE_PREFIX = "attribute_"

_SPACE_REPLACEMENTS = {
    "keep": " ",
    "underscore": "_",
    "dash": "-",
    "remove": "",
}


def decode_slug(slug: str) -> str:
    """Percent-decode a product slug (``blue%20shirt`` -> ``blue shirt``).

    Case and punctuation are left as decoded.
    """
    return unquote(slug)


def replace_spaces(value: str, handling: str) -> str:
    """Rewrite literal space characters in *value* per *handling*.

    *handling* is one of ``keep``, ``underscore``, ``dash`` or ``remove``.
    Raises KeyError for anything else.
    """
    replacement = _SPACE_REPLACEMENTS[handling]
    if replacement == " ":
        return value
    return value.replace(" ", replacement)


def join_attribute_values(values: Iterable[str], separator: str) -> str:
    """Join attribute values and drop any legacy ``attribute_`` prefix tokens.

    The prefix is stripped from the joined string, not per value.
    """
    joined = separator.join(values)
    return joined.replace(LEGACY_ATTRIBUTE_PREFIX, "")


def compose_variant_sku(product_sku: str, separator: str, fragment: str) -> str:
    """Format: PRODUCTSKU<separator>FRAGMENT.

    An empty product SKU still yields a leading separator.
    """
    return f"{product_sku}{separator}{fragment}"
