"""
Date range resolution for study periods.

Only the period the portal has selected by default comes with real start/end
dates. Every other period gets a best-effort range computed from its season
and academic year:

    autumn   startYear-09-01 .. endYear-01-31
    spring   endYear-02-01   .. endYear-06-30
    summer   endYear-07-01   .. endYear-08-31
    unknown  today           .. today

Resolution never raises; period boundaries are advisory metadata.
"""

from __future__ import annotations

import logging
import re
from datetime import MAXYEAR, MINYEAR, date
from typing import Optional, Tuple

log = logging.getLogger(__name__)

DateRange = Tuple[date, date]

_YEAR_RANGE_RE = re.compile(r"^(\d{4})/(\d{4})$")


# ---------------------------------------------------------------------------
# Fallback policies
# ---------------------------------------------------------------------------


def academic_year_bounds(academic_year: str, today: date) -> Tuple[int, int]:
    """
    Split "YYYY/YYYY" into (startYear, endYear).

    Falls back to (today.year, today.year + 1) when the string does not
    parse. An end year not after the start year is replaced by startYear + 1.
    """
    m = _YEAR_RANGE_RE.match(academic_year or "")
    if not m:
        return today.year, today.year + 1

    start_year, end_year = int(m.group(1)), int(m.group(2))
    if end_year <= start_year:
        end_year = start_year + 1
    if start_year < MINYEAR or end_year > MAXYEAR:
        return today.year, today.year + 1
    return start_year, end_year


def unknown_season_range(today: date) -> DateRange:
    # zero-length range
    return today, today


def season_date_range(season: str, start_year: int, end_year: int, today: date) -> DateRange:
    if season == "autumn":
        return date(start_year, 9, 1), date(end_year, 1, 31)
    if season == "spring":
        return date(end_year, 2, 1), date(end_year, 6, 30)
    if season == "summer":
        return date(end_year, 7, 1), date(end_year, 8, 31)
    return unknown_season_range(today)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def resolve_date_range(
    season: str,
    academic_year: str,
    start: Optional[date] = None,
    end: Optional[date] = None,
    is_selected: bool = False,
    today: Optional[date] = None,
) -> DateRange:
    """
    Return the canonical (start, end) dates of a period.

    Authoritative dates are used verbatim, but only for the selected period
    and only when both are present and ordered.
    """
    if today is None:
        today = date.today()

    if is_selected and start is not None and end is not None:
        if start <= end:
            return start, end
        log.warning("Ignoring reversed semester dates %s > %s", start, end)

    start_year, end_year = academic_year_bounds(academic_year, today)
    return season_date_range(season, start_year, end_year, today)
