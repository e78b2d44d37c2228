"""Text normalization for search and display.

Contact names in this domain are Portuguese and are typed inconsistently
("São Paulo", "sao paulo", "S. Paulo,"), so every search projection compares
normalized strings: lower-cased, accents stripped, common punctuation
treated as whitespace, and whitespace runs collapsed.

Also holds the amount parser used by promotion saves, which accepts the
pt-BR notation operators type into the value field ("1.234,56").
"""

from __future__ import annotations

import re
import unicodedata
from decimal import Decimal, InvalidOperation

# Characters treated as word separators by the search normalizer.
_PUNCTUATION = re.compile(r"[.,/#!$%^&*;:{}=\-_`~()|\[\]]")
_WHITESPACE = re.compile(r"\s+")
_THOUSANDS_ONLY = re.compile(r"^-?\d{1,3}(\.\d{3})+$")


def strip_diacritics(text: str) -> str:
    """Remove combining marks after NFD decomposition ("Forró" -> "Forro")."""
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def normalize_search_text(value: object) -> str:
    """Normalize a value for case-, accent- and punctuation-insensitive matching.

    ``None`` and empty values normalize to ``""``.  Non-string values are
    converted with ``str()`` first.

    Examples:
        >>> normalize_search_text("  São-Paulo, SP ")
        'sao paulo sp'
    """
    if value is None or value == "":
        return ""
    text = strip_diacritics(str(value).lower())
    text = _PUNCTUATION.sub(" ", text)
    return _WHITESPACE.sub(" ", text).strip()


def matches_search(term: str, *fields: object) -> bool:
    """Return ``True`` if the normalized *term* is a substring of any field.

    An empty (or punctuation-only) term matches everything.
    """
    needle = normalize_search_text(term)
    if not needle:
        return True
    return any(needle in normalize_search_text(field) for field in fields)


def collation_key(value: str) -> tuple[str, str]:
    """Sort key approximating a locale-aware compare for names.

    Primary ordering ignores case and accents; ties fall back to the
    case-folded original so "Ana" and "Aná" sort deterministically.
    """
    return (strip_diacritics(value).casefold(), value.casefold())


def parse_amount(value: str | float | int | None) -> float | None:
    """Parse a monetary amount typed in pt-BR notation.

    Thousands separators (".") are dropped and the decimal comma becomes a
    point, so ``"1.234,56"`` parses to ``1234.56``.  Without a comma, dots
    that split the digits into groups of three are thousands separators
    too (``"1.500"`` is ``1500.0``); any other single dot is a decimal
    point (``"1.5"`` is ``1.5``).  Numbers pass through.  Empty input
    yields ``None``.

    Raises:
        ValueError: If the text is not a number.
    """
    if value is None:
        return None
    if isinstance(value, (int, float)):
        return float(value)

    text = value.strip().replace("R$", "").strip()
    if not text:
        return None
    if "," in text:
        text = text.replace(".", "").replace(",", ".")
    elif _THOUSANDS_ONLY.match(text):
        text = text.replace(".", "")
    try:
        return float(Decimal(text))
    except InvalidOperation as exc:
        msg = f"Not a valid amount: {value!r}"
        raise ValueError(msg) from exc


def format_brl(value: float | None) -> str:
    """Format an amount as Brazilian reais, e.g. ``R$ 1.234,56``."""
    if value is None:
        return ""
    formatted = f"{value:,.2f}"  # 1,234.56
    formatted = formatted.replace(",", "\x00").replace(".", ",").replace("\x00", ".")
    return f"R$ {formatted}"
