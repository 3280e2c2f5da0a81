"""
Tests for period/program discovery.

The landing page fetch goes through a fake session; parsing either uses the
real BeautifulSoup parser or a stub returning prepared raw records.
"""

from __future__ import annotations

import unittest
from datetime import date

import requests

from rtuschedule.cache import ExpiringCache
from rtuschedule.discovery import DiscoveryService
from rtuschedule.errors import DiscoveryError
from rtuschedule.model import RawFaculty, RawProgram, RawSemester, RawSemesterMetadata

TODAY = date(2026, 10, 18)


def make_response(text: str = "<html></html>", status: int = 200) -> requests.Response:
    resp = requests.Response()
    resp.status_code = status
    resp.encoding = "utf-8"
    resp.url = "https://nodarbibas.rtu.lv/"
    resp._content = text.encode("utf-8")
    return resp


class FakeSession:
    def __init__(self, response: object = None) -> None:
        self.headers: dict[str, str] = {}
        self.response = response if response is not None else make_response()
        self.calls: list[tuple[str, dict]] = []

    def get(self, url: str, params: dict | None = None, timeout: float | None = None) -> requests.Response:
        self.calls.append((url, dict(params or {})))
        if isinstance(self.response, Exception):
            raise self.response
        return self.response


class StubParser:
    def __init__(
        self,
        semesters: list[RawSemester] | None = None,
        metadata: RawSemesterMetadata | None = None,
        faculties: list[RawFaculty] | None = None,
    ) -> None:
        self.semesters = semesters or []
        self.metadata = metadata or RawSemesterMetadata()
        self.faculties = faculties or []

    def parse_semesters(self, html: str) -> list[RawSemester]:
        return self.semesters

    def parse_semester_metadata(self, html: str) -> RawSemesterMetadata:
        return self.metadata

    def parse_programs(self, html: str) -> list[RawFaculty]:
        return self.faculties


class BrokenParser(StubParser):
    def parse_semesters(self, html: str) -> list[RawSemester]:
        raise AttributeError("unexpected markup")


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


SEMESTERS = [
    RawSemester(id=27, name="2025/2026 Rudens semestris (25/26-R)", is_selected=True),
    RawSemester(id=28, name="2025/2026 Pavasara semestris (25/26-P)", is_selected=False),
    RawSemester(id=29, name="Papildu semestris", is_selected=False),
]
METADATA = RawSemesterMetadata(start_date=date(2025, 9, 1), end_date=date(2026, 1, 30))

FACULTIES = [
    RawFaculty(
        faculty_name="Datorzinātnes un informācijas tehnoloģijas fakultāte",
        faculty_code="DITF",
        programs=(
            RawProgram(id=1234, name="Datorsistēmas (RDBD0)", code="RDBD0", tokens=("RDBD0", "datorsistemas")),
            RawProgram(id=1235, name="Informācijas tehnoloģija (RDBI0)", code="RDBI0"),
        ),
    ),
    RawFaculty(
        faculty_name="Būvniecības fakultāte",
        faculty_code="BF",
        programs=(RawProgram(id=2001, name="Būvniecība (RBCB0)", code="RBCB0"),),
    ),
]


def make_service(session: FakeSession, parser: StubParser, clock: FakeClock | None = None) -> DiscoveryService:
    cache = ExpiringCache(3600, clock=clock or FakeClock())
    return DiscoveryService(parser=parser, session=session, cache=cache, today=lambda: TODAY)


class TestDiscoverPeriods(unittest.TestCase):
    def setUp(self) -> None:
        self.clock = FakeClock()
        self.session = FakeSession()
        self.service = make_service(self.session, StubParser(SEMESTERS, METADATA), self.clock)

    def test_periods_are_normalized(self) -> None:
        autumn, spring, other = self.service.discover_periods()

        self.assertEqual(autumn.id, 27)
        self.assertEqual(autumn.code, "25/26-R")
        self.assertEqual(autumn.academic_year, "2025/2026")
        self.assertEqual(autumn.season, "autumn")
        # selected period keeps the portal's own dates
        self.assertEqual((autumn.start_date, autumn.end_date), (date(2025, 9, 1), date(2026, 1, 30)))
        self.assertTrue(autumn.is_selected)

        self.assertEqual(spring.season, "spring")
        self.assertEqual((spring.start_date, spring.end_date), (date(2026, 2, 1), date(2026, 6, 30)))

        self.assertEqual(other.season, "unknown")
        self.assertEqual(other.code, "")
        self.assertEqual((other.start_date, other.end_date), (TODAY, TODAY))

    def test_request_uses_locale_without_semester(self) -> None:
        self.service.discover_periods()
        self.assertEqual(self.session.calls, [("https://nodarbibas.rtu.lv/", {"lang": "lv"})])

    def test_second_call_is_served_from_cache(self) -> None:
        first = self.service.discover_periods()
        second = self.service.discover_periods()
        self.assertEqual(first, second)
        self.assertEqual(len(self.session.calls), 1)

    def test_expired_cache_refetches(self) -> None:
        self.service.discover_periods()
        self.clock.now = 3600
        self.service.discover_periods()
        self.assertEqual(len(self.session.calls), 2)

    def test_clear_cache(self) -> None:
        self.service.discover_periods()
        self.service.discover_programs(27)
        self.service.clear_cache()
        self.assertEqual(len(self.service.cache), 0)
        self.service.discover_periods()
        self.assertEqual(len(self.session.calls), 3)


class TestDiscoverPrograms(unittest.TestCase):
    def setUp(self) -> None:
        self.session = FakeSession()
        self.service = make_service(self.session, StubParser(faculties=FACULTIES))

    def test_faculties_are_flattened(self) -> None:
        programs = self.service.discover_programs(27)

        self.assertEqual([p.id for p in programs], [1234, 1235, 2001])
        first = programs[0]
        self.assertEqual(first.name, "Datorsistēmas")
        self.assertEqual(first.full_name, "Datorsistēmas (RDBD0)")
        self.assertEqual(first.code, "RDBD0")
        self.assertEqual(first.faculty.code, "DITF")
        self.assertEqual(first.tokens, ["RDBD0", "datorsistemas"])
        self.assertEqual(programs[2].faculty.name, "Būvniecības fakultāte")

    def test_request_filters_by_period(self) -> None:
        self.service.discover_programs(27)
        self.assertEqual(self.session.calls, [("https://nodarbibas.rtu.lv/", {"lang": "lv", "semester": "27"})])

    def test_cached_per_period(self) -> None:
        self.service.discover_programs(27)
        self.service.discover_programs(27)
        self.service.discover_programs(28)
        self.assertEqual(len(self.session.calls), 2)

    def test_ids_and_codes_stable_across_calls(self) -> None:
        first = self.service.discover_programs(27)
        self.service.clear_cache()
        second = self.service.discover_programs(27)
        self.assertEqual([(p.id, p.code) for p in first], [(p.id, p.code) for p in second])


    def test_mutating_result_does_not_change_cache(self) -> None:
        programs = self.service.discover_programs(27)
        programs.clear()
        self.assertEqual(len(self.service.discover_programs(27)), 3)
        self.assertEqual(len(self.session.calls), 1)


class TestInjectedCache(unittest.TestCase):
    def test_injected_cache_is_used(self) -> None:
        cache = ExpiringCache(10)
        service = DiscoveryService(parser=StubParser(SEMESTERS, METADATA), session=FakeSession(), cache=cache)
        self.assertIs(service.cache, cache)

        service.discover_periods()
        self.assertEqual(len(cache), 1)

    def test_periods_list_is_a_copy(self) -> None:
        session = FakeSession()
        service = make_service(session, StubParser(SEMESTERS, METADATA))
        service.discover_periods().pop()
        self.assertEqual(len(service.discover_periods()), 3)
        self.assertEqual(len(session.calls), 1)


class TestDiscoverCurrentPeriod(unittest.TestCase):
    def test_selected_period(self) -> None:
        service = make_service(FakeSession(), StubParser(SEMESTERS, METADATA))
        self.assertEqual(service.discover_current_period().id, 27)

    def test_first_period_when_none_selected(self) -> None:
        semesters = [RawSemester(id=5, name="2024/2025 Vasaras semestris"), RawSemester(id=6, name="x")]
        service = make_service(FakeSession(), StubParser(semesters))
        self.assertEqual(service.discover_current_period().id, 5)

    def test_no_periods_returns_none(self) -> None:
        service = make_service(FakeSession(), StubParser())
        self.assertIsNone(service.discover_current_period())


class TestDiscoveryErrors(unittest.TestCase):
    def test_network_error_is_wrapped(self) -> None:
        service = make_service(FakeSession(requests.ConnectionError("down")), StubParser(SEMESTERS))
        with self.assertRaises(DiscoveryError) as ctx:
            service.discover_periods()
        self.assertIsInstance(ctx.exception.cause, requests.ConnectionError)
        self.assertEqual(len(service.cache), 0)

    def test_http_status_is_wrapped(self) -> None:
        service = make_service(FakeSession(make_response(status=503)), StubParser(faculties=FACULTIES))
        with self.assertRaises(DiscoveryError) as ctx:
            service.discover_programs(27)
        self.assertIsInstance(ctx.exception.cause, requests.HTTPError)
        self.assertEqual(len(service.cache), 0)

    def test_parse_error_is_wrapped(self) -> None:
        service = make_service(FakeSession(), BrokenParser())
        with self.assertRaises(DiscoveryError) as ctx:
            service.discover_periods()
        self.assertIsInstance(ctx.exception.__cause__, AttributeError)

    def test_failure_keeps_existing_entries(self) -> None:
        session = FakeSession()
        service = make_service(session, StubParser(SEMESTERS, METADATA, FACULTIES))
        periods = service.discover_periods()

        session.response = requests.Timeout("slow")
        with self.assertRaises(DiscoveryError):
            service.discover_programs(27)
        self.assertEqual(service.discover_periods(), periods)


class TestWithRealParser(unittest.TestCase):
    def test_end_to_end_from_html(self) -> None:
        html = """
        <select id="semester-id">
          <option value="27" selected data-start-date="2025-09-01" data-end-date="2026-01-31">
            2025/2026 Rudens semestris (25/26-R)
          </option>
        </select>
        """
        service = DiscoveryService(session=FakeSession(make_response(html)), today=lambda: TODAY)
        period = service.discover_current_period()
        self.assertEqual(period.code, "25/26-R")
        self.assertEqual((period.start_date, period.end_date), (date(2025, 9, 1), date(2026, 1, 31)))


if __name__ == "__main__":
    unittest.main()
