"""
Label normalization (free text -> derived fields).

The portal only gives us human-readable dropdown labels such as

    "2025/2026 Rudens semestris (25/26-R)"
    "Datorsistēmas (RDBD0)"

The helpers below derive a period code, academic year, season and a short
program name from them.

Rules for every function in this module:
- never raise, whatever the input
- return "" (or "unknown" for seasons) when nothing can be derived
- idempotent: f(f(x)) == f(x)
"""

from __future__ import annotations

import re

from rtuschedule.model import Season


# ---------------------------------------------------------------------------
# Patterns & lookup tables
# ---------------------------------------------------------------------------

# "25/26-R": two-digit years and a season letter
_CODE_RE = re.compile(r"(?<!\d)(\d{2})/(\d{2})-([A-Z])(?![A-Za-z])")

_YEAR_RE = re.compile(r"(?<!\d)(\d{4})\s*/\s*(\d{4})(?!\d)")

_PAREN_RE = re.compile(r"\([^()]*\)")

# Order matters: "pavasara" contains "vasara", so spring is checked first.
_SEASON_KEYWORDS: tuple[tuple[Season, tuple[str, ...]], ...] = (
    ("spring", ("pavasara", "pavasaris", "spring")),
    ("summer", ("vasaras", "vasara", "summer")),
    ("autumn", ("rudens", "autumn", "fall")),
)

_SEASON_LETTERS: dict[str, Season] = {"R": "autumn", "P": "spring", "V": "summer"}
_LETTER_BY_SEASON: dict[str, str] = {v: k for k, v in _SEASON_LETTERS.items()}

_TRAILING_SEPARATORS = " ,;:-–/"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _as_text(label: object) -> str:
    return label if isinstance(label, str) else ""


def _season_from_keywords(text: str) -> Season:
    lowered = text.casefold()
    for season, words in _SEASON_KEYWORDS:
        if any(w in lowered for w in words):
            return season
    return "unknown"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def parse_academic_year(label: str) -> str:
    """
    Extract "YYYY/YYYY" from a label, or "" if there is none.
    """
    m = _YEAR_RE.search(_as_text(label))
    if not m:
        return ""
    return f"{m.group(1)}/{m.group(2)}"


def parse_season(label: str) -> Season:
    """
    Classify a label as autumn, spring, summer or unknown.

    Keywords (Latvian and English) win; the letter of a "25/26-R" style code
    is the fallback.
    """
    text = _as_text(label)
    season = _season_from_keywords(text)
    if season != "unknown":
        return season

    m = _CODE_RE.search(text)
    if m:
        return _SEASON_LETTERS.get(m.group(3), "unknown")
    return "unknown"


def parse_period_code(label: str) -> str:
    """
    Extract a short period code like "25/26-R".

    If the label carries no explicit code but both the academic year and the
    season are known, the code is built from them.
    """
    text = _as_text(label)
    m = _CODE_RE.search(text)
    if m:
        return f"{m.group(1)}/{m.group(2)}-{m.group(3)}"

    year = parse_academic_year(text)
    letter = _LETTER_BY_SEASON.get(_season_from_keywords(text))
    if year and letter:
        return f"{year[2:4]}/{year[7:9]}-{letter}"
    return ""


def parse_program_name(label: str) -> str:
    """
    Derive a display name from a program's full name.

    Parenthesised qualifiers are removed (nested ones too), whitespace is
    collapsed and trailing separators are trimmed. If that leaves nothing,
    the whitespace-normalized original is returned.
    """
    original = " ".join(_as_text(label).split())

    name = original
    while True:
        stripped = _PAREN_RE.sub(" ", name)
        if stripped == name:
            break
        name = stripped

    name = " ".join(name.split()).rstrip(_TRAILING_SEPARATORS)
    return name or original
