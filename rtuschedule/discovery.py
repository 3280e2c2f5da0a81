"""
Discovery of study periods and programs from the portal landing page.

The landing page is the only place that lists which semesters and programs
exist. It is fetched with requests, parsed by RTUHtmlParser and normalized
into StudyPeriod / StudyProgram objects. Results are cached per slot:

    "periods"          the full period list
    "programs:<id>"    programs of one period

A failed fetch or parse raises DiscoveryError and leaves the cache as it was.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Callable, List, Optional

import requests

from rtuschedule import config
from rtuschedule.cache import ExpiringCache, cache_key
from rtuschedule.dates import resolve_date_range
from rtuschedule.errors import DiscoveryError
from rtuschedule.html_parser import RTUHtmlParser
from rtuschedule.labels import parse_academic_year, parse_period_code, parse_program_name, parse_season
from rtuschedule.model import (
    Faculty,
    RawFaculty,
    RawSemester,
    RawSemesterMetadata,
    StudyPeriod,
    StudyProgram,
)

log = logging.getLogger(__name__)

PERIODS_SLOT = "periods"
PROGRAMS_OPERATION = "programs"


# ---------------------------------------------------------------------------
# Normalization (raw records -> entities)
# ---------------------------------------------------------------------------


def to_study_period(semester: RawSemester, metadata: RawSemesterMetadata, today: date) -> StudyPeriod:
    academic_year = parse_academic_year(semester.name)
    season = parse_season(semester.name)

    start_date, end_date = resolve_date_range(
        season,
        academic_year,
        start=metadata.start_date,
        end=metadata.end_date,
        is_selected=semester.is_selected,
        today=today,
    )

    return StudyPeriod(
        id=semester.id,
        name=semester.name,
        code=parse_period_code(semester.name),
        academic_year=academic_year,
        season=season,
        start_date=start_date,
        end_date=end_date,
        is_selected=semester.is_selected,
    )


def to_study_programs(faculties: List[RawFaculty]) -> List[StudyProgram]:
    """
    Flatten faculties into one program list, keeping page order.
    """
    programs: List[StudyProgram] = []
    for faculty in faculties:
        for program in faculty.programs:
            programs.append(
                StudyProgram(
                    id=program.id,
                    name=parse_program_name(program.name),
                    code=program.code,
                    full_name=program.name,
                    faculty=Faculty(name=faculty.faculty_name, code=faculty.faculty_code),
                    tokens=list(program.tokens),
                )
            )
    return programs


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class DiscoveryService:
    """
    Auto-discovers periods and programs from the portal main page.
    """

    def __init__(
        self,
        parser: Optional[RTUHtmlParser] = None,
        session: Optional[requests.Session] = None,
        base_url: str = config.DEFAULT_BASE_URL,
        timeout: float = config.DISCOVERY_TIMEOUT,
        cache_ttl: float = config.DISCOVERY_CACHE_TTL,
        locale: str = config.DEFAULT_LOCALE,
        user_agent: str = config.DEFAULT_USER_AGENT,
        cache: Optional[ExpiringCache] = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.parser = parser or RTUHtmlParser()
        self.session = session or requests.Session()
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.locale = locale
        self.cache = cache if cache is not None else ExpiringCache(cache_ttl)
        self._today = today

        self.session.headers.update(
            {
                "User-Agent": user_agent,
                "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
                "Accept-Language": f"{locale},en;q=0.9",
            }
        )

    @classmethod
    def from_settings(cls, settings: config.Settings, **kwargs) -> "DiscoveryService":
        return cls(
            base_url=settings.base_url,
            timeout=settings.discovery_timeout,
            cache_ttl=settings.discovery_cache_ttl,
            locale=settings.locale,
            user_agent=settings.user_agent,
            **kwargs,
        )

    # -- public ----------------------------------------------------------------

    def discover_periods(self) -> List[StudyPeriod]:
        """
        All study periods listed on the landing page.
        """
        cached = self.cache.get(PERIODS_SLOT)
        if cached is not None:
            log.debug("periods: cache hit")
            return list(cached)

        try:
            html = self._fetch_main_page()
            semesters = self.parser.parse_semesters(html)
            metadata = self.parser.parse_semester_metadata(html)
            today = self._today()
            periods = [to_study_period(s, metadata, today) for s in semesters]
        except DiscoveryError:
            raise
        except Exception as exc:
            raise DiscoveryError("Failed to fetch periods", exc) from exc

        log.info("Discovered %d periods", len(periods))
        self.cache.set(PERIODS_SLOT, periods)
        return list(periods)

    def discover_programs(self, period_id: int) -> List[StudyProgram]:
        """
        All programs offered in one period.
        """
        key = cache_key(PROGRAMS_OPERATION, period_id)
        cached = self.cache.get(key)
        if cached is not None:
            log.debug("%s: cache hit", key)
            return list(cached)

        try:
            html = self._fetch_main_page(period_id)
            programs = to_study_programs(self.parser.parse_programs(html))
        except DiscoveryError:
            raise
        except Exception as exc:
            raise DiscoveryError(f"Failed to fetch programs for period {period_id}", exc) from exc

        log.info("Discovered %d programs for period %s", len(programs), period_id)
        self.cache.set(key, programs)
        return list(programs)

    def discover_current_period(self) -> Optional[StudyPeriod]:
        """
        The period the portal selects by default, else the first one listed.
        Returns None when the portal lists no periods at all.
        """
        periods = self.discover_periods()
        for period in periods:
            if period.is_selected:
                return period
        return periods[0] if periods else None

    def clear_cache(self) -> None:
        self.cache.clear()

    # -- internals -------------------------------------------------------------

    def _fetch_main_page(self, semester_id: Optional[int] = None) -> str:
        params = {"lang": self.locale}
        if semester_id is not None:
            params["semester"] = str(semester_id)

        log.info("GET %s/ %s", self.base_url, params)
        try:
            resp = self.session.get(f"{self.base_url}/", params=params, timeout=self.timeout)
            resp.raise_for_status()
        except requests.RequestException as exc:
            raise DiscoveryError("HTTP request failed", exc) from exc
        return resp.text
