"""
Live data client for the portal's form-encoded POST endpoints.

Every public method follows the same steps:

1. validate parameters (ValidationError, no network access)
2. return the cached result if the same call was made within the TTL
3. POST the form, reject an empty/null body (InvalidResponseError)
4. coerce the body (non-list -> [], publication flag -> bool), cache, return

Records are the JSON objects the portal sends, typed with the TypedDicts
in rtuschedule.model.
"""

from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional

import requests

from rtuschedule import config
from rtuschedule.cache import MISSING, ExpiringCache, cache_key
from rtuschedule.errors import InvalidResponseError, TransportError, ValidationError
from rtuschedule.model import Course, Group, SemesterEvent, Subject

log = logging.getLogger(__name__)

MIN_YEAR = 2000
MAX_YEAR = 3000


# ---------------------------------------------------------------------------
# Validation & coercion policies
# ---------------------------------------------------------------------------


def _require_positive(operation: str, name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValidationError(operation, name, value)


def _require_range(operation: str, name: str, value: Any, low: int, high: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or not (low <= value <= high):
        raise ValidationError(operation, name, value)


def coerce_list(body: Any) -> List[Any]:
    """
    A present but non-list body means "no data yet", not a protocol error.
    """
    return body if isinstance(body, list) else []


def coerce_published(body: Any) -> bool:
    return bool(body)


def _decode_body(resp: requests.Response) -> Any:
    """
    JSON body, raw text if it is not JSON, None if empty or literally null.
    """
    if not resp.content or not resp.content.strip():
        return None
    try:
        return resp.json()
    except ValueError:
        return resp.text


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


class ScheduleApiClient:
    """
    Fetches live schedule data (events, subjects, groups, courses).
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        base_url: str = config.DEFAULT_BASE_URL,
        timeout: float = config.API_TIMEOUT,
        cache_ttl: float = config.API_CACHE_TTL,
        locale: str = config.DEFAULT_LOCALE,
        user_agent: str = config.DEFAULT_USER_AGENT,
        cache: Optional[ExpiringCache] = None,
    ) -> None:
        self.session = session or requests.Session()
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.cache = cache if cache is not None else ExpiringCache(cache_ttl)

        self.session.headers.update(
            {
                "Content-Type": "application/x-www-form-urlencoded; charset=UTF-8",
                "X-Requested-With": "XMLHttpRequest",
                "User-Agent": user_agent,
                "Accept": "application/json, text/javascript, */*; q=0.01",
                "Origin": self.base_url,
                "Referer": f"{self.base_url}/?lang={locale}",
            }
        )

    @classmethod
    def from_settings(cls, settings: config.Settings, **kwargs) -> "ScheduleApiClient":
        return cls(
            base_url=settings.base_url,
            timeout=settings.api_timeout,
            cache_ttl=settings.api_cache_ttl,
            locale=settings.locale,
            user_agent=settings.user_agent,
            **kwargs,
        )

    # -- endpoints -------------------------------------------------------------

    def fetch_semester_program_events(self, semester_program_id: int, year: int, month: int) -> List[SemesterEvent]:
        """
        Calendar events of a semester program for one month.
        """
        op = "events"
        _require_positive(op, "semester_program_id", semester_program_id)
        _require_range(op, "year", year, MIN_YEAR, MAX_YEAR)
        _require_range(op, "month", month, 1, 12)

        form = {"semesterProgramId": semester_program_id, "year": year, "month": month}
        return self._cached_list(op, "/getSemesterProgEventList", form)

    def fetch_semester_program_subjects(self, semester_program_id: int) -> List[Subject]:
        op = "subjects"
        _require_positive(op, "semester_program_id", semester_program_id)

        return self._cached_list(op, "/getSemProgSubjects", {"semesterProgramId": semester_program_id})

    def check_semester_program_published(self, semester_program_id: int) -> bool:
        """
        Whether the schedule of a semester program is published. A cached
        False counts as a cache hit.
        """
        op = "published"
        _require_positive(op, "semester_program_id", semester_program_id)

        form = {"semesterProgramId": semester_program_id}
        key = cache_key(op, *form.values())
        cached = self.cache.get(key, MISSING)
        if cached is not MISSING:
            log.debug("%s: cache hit", key)
            return cached

        published = coerce_published(self._post(op, "/isSemesterProgramPublished", form))
        self.cache.set(key, published)
        return published

    def find_groups_by_course(self, course_id: int, semester_id: int, program_id: int) -> List[Group]:
        op = "groups"
        _require_positive(op, "course_id", course_id)
        _require_positive(op, "semester_id", semester_id)
        _require_positive(op, "program_id", program_id)

        form = {"courseId": course_id, "semesterId": semester_id, "programId": program_id}
        return self._cached_list(op, "/findGroupByCourseId", form)

    def find_courses_by_program(self, semester_id: int, program_id: int) -> List[Course]:
        op = "courses"
        _require_positive(op, "semester_id", semester_id)
        _require_positive(op, "program_id", program_id)

        form = {"semesterId": semester_id, "programId": program_id}
        return self._cached_list(op, "/findCourseByProgramId", form)

    # -- cache management ------------------------------------------------------

    def clear_cache(self) -> None:
        self.cache.clear()

    def clear_expired_cache(self) -> int:
        return self.cache.clear_expired()

    # -- internals -------------------------------------------------------------

    def _cached_list(self, operation: str, endpoint: str, form: Mapping[str, Any]) -> List[Any]:
        key = cache_key(operation, *form.values())
        cached = self.cache.get(key, MISSING)
        if cached is not MISSING:
            log.debug("%s: cache hit", key)
            return list(cached)

        records = coerce_list(self._post(operation, endpoint, form))
        self.cache.set(key, records)
        return list(records)

    def _post(self, operation: str, endpoint: str, form: Mapping[str, Any]) -> Any:
        """
        POST a form and return the decoded body. Never returns None.
        """
        data = {k: str(v) for k, v in form.items()}
        log.info("POST %s %s", endpoint, data)
        try:
            resp = self.session.post(f"{self.base_url}{endpoint}", data=data, timeout=self.timeout)
            resp.raise_for_status()
        except requests.RequestException as exc:
            raise TransportError(operation, form, exc) from exc

        body = _decode_body(resp)
        if body is None:
            raise InvalidResponseError(operation, form)
        return body
