"""Item name keys used to match records that name the same product."""

import re

_PACK_SIZE = re.compile(r"\(\s*[^)]*\)")
_MEASURE_TOKEN = re.compile(r"^\d+(?:\.\d+)?(?:g|kg|mg|ml|l|ltr|pcs|pc|pack)?$")
_TRAILING_FILLER = {"pack", "packet", "pouch", "bag", "bottle", "jar", "tin"}


def normalize_item_name(item_name: str) -> str:
    """Lower-case key with pack sizes and trailing measures removed.

    'Moong Dal (2kg)' and 'moong dal 2 kg' both map to 'moong dal'.
    """
    cleaned = _PACK_SIZE.sub(" ", item_name.lower())
    cleaned = re.sub(r"[^a-z0-9. ]+", " ", cleaned)
    tokens = [token for token in cleaned.split() if token]

    while tokens and (
        tokens[-1] in _TRAILING_FILLER
        or tokens[-1] in {"g", "kg", "mg", "ml", "l", "ltr"}
        or _MEASURE_TOKEN.match(tokens[-1])
    ):
        tokens.pop()

    if not tokens:
        return re.sub(r"\s+", " ", item_name.strip().lower())
    return " ".join(tokens)


def same_item(first: str, second: str) -> bool:
    """Whether two names refer to the same product."""
    return normalize_item_name(first) == normalize_item_name(second)
