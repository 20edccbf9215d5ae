"""URL slugs for categories."""

import re
import unicodedata
from collections.abc import Iterable

MAX_SLUG_LENGTH = 120


def slugify(name: str) -> str:
    """Lowercase ASCII slug of name; "category" when nothing is left.

    "Men's Shoes & Boots" -> "men-s-shoes-boots"
    """
    ascii_name = (
        unicodedata.normalize("NFKD", name.strip().lower())
        .encode("ascii", "ignore")
        .decode("ascii")
    )
    slug = re.sub(r"[^a-z0-9]+", "-", ascii_name).strip("-")
    return slug[:MAX_SLUG_LENGTH].rstrip("-") or "category"


def unique_slug(name: str, taken: Iterable[str]) -> str:
    """slugify(name), suffixed with -2, -3, ... until it is not in taken."""
    taken = set(taken)
    base = slugify(name)
    slug = base
    suffix = 2
    while slug in taken:
        slug = f"{base}-{suffix}"
        suffix += 1
    return slug
