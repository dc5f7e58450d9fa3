"""Text normalization for free-text place references.

Everything that happens to a string before it reaches the catalog
lives here: canonical whitespace and separator spacing, alias
normalization, splitting of compound references such as
``"Antwerp/Rotterdam"`` and the shape checks that decide which
cascade stages apply.

Example
-------
    >>> normalize('  "Antwerp /  Rotterdam" ')
    'Antwerp/Rotterdam'
    >>> split_compound("CAS/TFN and Lagos")
    ['CAS', 'TFN', 'Lagos']
"""

from __future__ import annotations

import re
import unicodedata
from typing import List, Optional

# Opening quote -> accepted closing quotes
_QUOTE_PAIRS = {
    '"': '"',
    "'": "'",
    "“": "”“",
    "”": "”",
    "‘": "’‘",
    "’": "’",
    "«": "»",
    "„": "“”",
}

_WHITESPACE_RE = re.compile(r"\s+")
_SLASH_RE = re.compile(r"\s*/\s*")
_AMP_PLUS_RE = re.compile(r"\s*([&+])\s*")
_COMMA_RE = re.compile(r"\s*,\s*")

# Separators between independent place references
_COMPOUND_SPLIT_RE = re.compile(r"\s*[/&+,]\s*|\s+and\s+", re.IGNORECASE)

_PARENTHETICAL_CODE_RE = re.compile(r"\(\s*([A-Za-z0-9]{2,6})\s*\)")


def _strip_quotes(text: str) -> str:
    if len(text) < 2:
        return text
    closers = _QUOTE_PAIRS.get(text[0])
    if closers and text[-1] in closers:
        return text[1:-1]
    return text


def normalize(raw: Optional[str]) -> str:
    """Canonicalize a raw place reference before any lookup.

    Trims, strips one layer of matching straight or curly quotes,
    collapses whitespace runs and standardizes spacing around the
    separators ``/``, ``&``, ``+`` and ``,`` without splitting.

    Non-string input normalizes to an empty string.
    """
    if not isinstance(raw, str):
        return ""

    text = _strip_quotes(raw.strip()).strip()
    text = _WHITESPACE_RE.sub(" ", text)
    text = _SLASH_RE.sub("/", text)
    text = _AMP_PLUS_RE.sub(r" \1 ", text)
    text = _COMMA_RE.sub(", ", text)
    return text.strip()


def normalize_alias(text: Optional[str]) -> str:
    """Normalize text the way ``Alias.alias_normalized`` is stored.

    Diacritics are removed, case is folded and whitespace collapsed,
    so ``"Düsseldorf "`` and ``"dusseldorf"`` share one alias key.
    """
    if not isinstance(text, str):
        return ""
    text = unicodedata.normalize("NFKD", text)
    text = "".join(ch for ch in text if not unicodedata.combining(ch))
    text = _WHITESPACE_RE.sub(" ", text.lower())
    return text.strip()


def split_compound(text: Optional[str]) -> List[str]:
    """Split a compound reference into normalized, unique tokens.

    Splits on ``/``, ``&``, ``,``, ``+`` and the word ``and`` (any case),
    drops empty tokens and keeps the first occurrence of duplicates.
    Quotes around the whole reference are removed before splitting.
    """
    if not isinstance(text, str):
        return []

    tokens: List[str] = []
    seen = set()
    for piece in _COMPOUND_SPLIT_RE.split(_strip_quotes(text.strip())):
        token = normalize(piece)
        if not token or token in seen:
            continue
        seen.add(token)
        tokens.append(token)
    return tokens


# ----------------------------------------------------------------------------
# Shape checks
# ----------------------------------------------------------------------------


def looks_like_unlocode(text: str) -> bool:
    """5 ASCII alphanumeric characters, e.g. ``BEANR``."""
    return len(text) == 5 and text.isascii() and text.isalnum()


def looks_like_iata(text: str) -> bool:
    """Exactly 3 ASCII letters."""
    return len(text) == 3 and text.isascii() and text.isalpha()


def looks_like_icao(text: str) -> bool:
    """Exactly 4 ASCII letters."""
    return len(text) == 4 and text.isascii() and text.isalpha()


def looks_like_code(text: str) -> bool:
    """2 to 6 ASCII alphanumeric characters."""
    return 2 <= len(text) <= 6 and text.isascii() and text.isalnum()


def extract_parenthetical_codes(text: str) -> List[str]:
    """Return the upper-cased codes inside ``(...)`` groups, last group first.

    Only groups of 2 to 6 alphanumeric characters qualify, so
    ``"Antwerp (ANR), Belgium"`` yields ``["ANR"]`` while
    ``"Port (main terminal)"`` yields nothing. In the canonical format
    the code group comes after the name, so ``"Lagos (Apapa) (APP)"``
    yields ``["APP", "APAPA"]``.
    """
    codes = [match.group(1).upper() for match in _PARENTHETICAL_CODE_RE.finditer(text)]
    return codes[::-1]
