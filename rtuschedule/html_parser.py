"""
Parsing of the portal landing page (HTML -> raw records).

The landing page carries two dropdowns we care about:

    <select id="semester-id">
        <option value="27" selected data-start-date="2025-09-01" data-end-date="2026-01-31">
            2025/2026 Rudens semestris (25/26-R)
        </option>
        ...
    </select>

    <select id="program-id">
        <optgroup label="Datorzinātnes un informācijas tehnoloģijas fakultāte (DITF)">
            <option value="1234" data-tokens="RDBD0 datorsistemas">Datorsistēmas (RDBD0)</option>
        </optgroup>
        ...
    </select>

Output is raw: labels are kept verbatim, normalization happens in
rtuschedule.labels.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import List, Optional, Tuple

from bs4 import BeautifulSoup, Tag

from rtuschedule.model import RawFaculty, RawProgram, RawSemester, RawSemesterMetadata


SEMESTER_SELECT = "select#semester-id"
PROGRAM_SELECT = "select#program-id"

_DATE_FORMATS = ("%Y-%m-%d", "%d.%m.%Y")

# trailing "(CODE)" of faculty and program labels
_TRAILING_CODE_RE = re.compile(r"^(.*?)\s*\(([^()]+)\)\s*$")

# semesterStartDate = "2025-09-01";  /  var semesterEndDate='31.01.2026'
_SCRIPT_DATE_RE = re.compile(r"semester(Start|End)Date\s*[=:]\s*['\"]([^'\"]+)['\"]")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def parse_date(text: Optional[str]) -> Optional[date]:
    """
    Parse "YYYY-MM-DD" or "DD.MM.YYYY". Returns None for anything else.
    """
    if not text:
        return None
    raw = text.strip()
    # ISO timestamps: keep the date part
    if "T" in raw:
        raw = raw.split("T", 1)[0]
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(raw, fmt).date()
        except ValueError:
            continue
    return None


def _option_id(option: Tag) -> Optional[int]:
    value = str(option.get("value") or "").strip()
    if not value.isdigit():
        return None
    return int(value)


def _split_trailing_code(label: str) -> Tuple[str, str]:
    """
    "Some Faculty (DITF)" -> ("Some Faculty", "DITF")
    """
    m = _TRAILING_CODE_RE.match(label)
    if not m:
        return label, ""
    return m.group(1).strip(), m.group(2).strip()


def _selected_option(soup: BeautifulSoup) -> Optional[Tag]:
    return soup.select_one(f"{SEMESTER_SELECT} option[selected]")


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


class RTUHtmlParser:
    """
    Turns the landing page HTML into RawSemester / RawFaculty records.

    Stateless; every method takes the full HTML document.
    """

    def parse_semesters(self, html: str) -> List[RawSemester]:
        soup = BeautifulSoup(html, "html.parser")

        semesters: List[RawSemester] = []
        for option in soup.select(f"{SEMESTER_SELECT} option"):
            semester_id = _option_id(option)
            if semester_id is None:
                continue
            semesters.append(
                RawSemester(
                    id=semester_id,
                    name=option.get_text(" ", strip=True),
                    is_selected=option.has_attr("selected"),
                )
            )
        return semesters

    def parse_semester_metadata(self, html: str) -> RawSemesterMetadata:
        """
        Dates of the selected semester: option data attributes first,
        inline script variables second.
        """
        soup = BeautifulSoup(html, "html.parser")

        start: Optional[date] = None
        end: Optional[date] = None

        option = _selected_option(soup)
        if option is not None:
            start = parse_date(option.get("data-start-date"))
            end = parse_date(option.get("data-end-date"))

        if start is None or end is None:
            for script in soup.find_all("script"):
                for which, value in _SCRIPT_DATE_RE.findall(script.get_text()):
                    if which == "Start" and start is None:
                        start = parse_date(value)
                    elif which == "End" and end is None:
                        end = parse_date(value)

        return RawSemesterMetadata(start_date=start, end_date=end)

    def parse_programs(self, html: str) -> List[RawFaculty]:
        soup = BeautifulSoup(html, "html.parser")

        faculties: List[RawFaculty] = []
        for group in soup.select(f"{PROGRAM_SELECT} optgroup"):
            faculty_name, faculty_code = _split_trailing_code(str(group.get("label") or "").strip())

            programs: List[RawProgram] = []
            for option in group.find_all("option"):
                program_id = _option_id(option)
                if program_id is None:
                    continue
                name = option.get_text(" ", strip=True)
                _, code = _split_trailing_code(name)
                programs.append(
                    RawProgram(
                        id=program_id,
                        name=name,
                        code=code or str(option.get("data-code") or "").strip(),
                        tokens=tuple(str(option.get("data-tokens") or "").split()),
                    )
                )

            faculties.append(
                RawFaculty(
                    faculty_name=faculty_name,
                    faculty_code=faculty_code,
                    programs=tuple(programs),
                )
            )
        return faculties
