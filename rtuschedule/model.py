"""
Central data model definitions used across the project.

This module defines the canonical structure of periods, programs and the raw
records handed over by the HTML parser, so that:
- discovery, the API client and the CLI share the same field names
- raw parser output stays separate from the normalized entities built from it
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, List, Literal, Optional, TypedDict

Season = Literal["autumn", "spring", "summer", "unknown"]


# ---------------------------------------------------------------------------
# Raw parser output (read-only)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RawSemester:
    """
    One entry of the semester dropdown, exactly as shown on the landing page.
    """

    id: int
    name: str
    is_selected: bool = False


@dataclass(frozen=True)
class RawSemesterMetadata:
    """
    Start/end dates the landing page publishes for the selected semester only.
    """

    start_date: Optional[date] = None
    end_date: Optional[date] = None


@dataclass(frozen=True)
class RawProgram:
    id: int
    name: str
    code: str
    tokens: tuple[str, ...] = ()


@dataclass(frozen=True)
class RawFaculty:
    faculty_name: str
    faculty_code: str
    programs: tuple[RawProgram, ...] = ()


# ---------------------------------------------------------------------------
# Normalized entities
# ---------------------------------------------------------------------------


@dataclass
class StudyPeriod:
    """
    One academic term (autumn/spring/summer) as offered by the portal.

    start_date <= end_date always holds; academic_year is either empty or
    "YYYY/YYYY".
    """

    id: int
    name: str
    code: str
    academic_year: str
    season: Season
    start_date: date
    end_date: date
    is_selected: bool


@dataclass
class Faculty:
    name: str
    code: str


@dataclass
class StudyProgram:
    """
    A degree program of one faculty. tokens are passed through untouched;
    consumers use them to build further queries.
    """

    id: int
    name: str
    code: str
    full_name: str
    faculty: Faculty
    tokens: List[str] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Cache
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CacheEntry:
    payload: Any
    created_at: float


# ---------------------------------------------------------------------------
# Live data records (JSON objects as sent by the portal)
# ---------------------------------------------------------------------------
# total=False: the portal omits fields freely, so every key is optional.


class ClockTime(TypedDict, total=False):
    hour: int
    minute: int
    second: int


class SemesterEvent(TypedDict, total=False):
    eventDateId: int
    eventId: int
    eventTempName: str
    eventTempNameEn: str
    eventDate: int  # epoch milliseconds, local midnight
    customStart: ClockTime
    customEnd: ClockTime
    roomInfoText: str
    lecturerInfoText: str


class Subject(TypedDict, total=False):
    subjectId: int
    code: str
    titleLV: str
    titleEN: str
    part: int


class Group(TypedDict, total=False):
    semesterProgramId: int
    group: int
    course: int
    program: str


class Course(TypedDict, total=False):
    id: int
    code: str
    titleLV: str
    titleEN: str
