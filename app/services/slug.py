from __future__ import annotations

import re
import unicodedata

_DISALLOWED = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE = re.compile(r"\s+")
_HYPHENS = re.compile(r"-+")


def slugify(text: str) -> str:
    """Turn a title into a URL slug.

    "Ruta al Pico Tres Mares" -> "ruta-al-pico-tres-mares"
    """

    decomposed = unicodedata.normalize("NFD", str(text))
    ascii_text = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    slug = _DISALLOWED.sub("", ascii_text.lower().strip())
    slug = _WHITESPACE.sub("-", slug)
    slug = _HYPHENS.sub("-", slug)
    return slug.strip("-")
