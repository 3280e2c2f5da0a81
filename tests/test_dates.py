"""
Unit tests for period date range resolution.

Rules:
- the selected period uses the dates published by the portal
- all other periods get season defaults derived from the academic year
- unknown season -> (today, today)
"""

import unittest
from datetime import date

from rtuschedule.dates import academic_year_bounds, resolve_date_range, season_date_range

TODAY = date(2026, 10, 18)


class TestResolveDateRange(unittest.TestCase):
    def test_selected_period_uses_authoritative_dates(self) -> None:
        start, end = date(2024, 9, 1), date(2025, 1, 31)
        for season, year in (("spring", "2030/2031"), ("unknown", "garbage"), ("summer", "")):
            with self.subTest(season=season, year=year):
                result = resolve_date_range(season, year, start, end, is_selected=True, today=TODAY)
                self.assertEqual(result, (start, end))

    def test_authoritative_dates_ignored_when_not_selected(self) -> None:
        result = resolve_date_range(
            "spring", "2024/2025", date(2024, 9, 1), date(2025, 1, 31), is_selected=False, today=TODAY
        )
        self.assertEqual(result, (date(2025, 2, 1), date(2025, 6, 30)))

    def test_selected_without_both_dates_falls_back(self) -> None:
        result = resolve_date_range("autumn", "2024/2025", date(2024, 9, 2), None, is_selected=True, today=TODAY)
        self.assertEqual(result, (date(2024, 9, 1), date(2025, 1, 31)))

    def test_reversed_authoritative_dates_fall_back(self) -> None:
        result = resolve_date_range(
            "autumn", "2024/2025", date(2025, 1, 31), date(2024, 9, 1), is_selected=True, today=TODAY
        )
        self.assertEqual(result, (date(2024, 9, 1), date(2025, 1, 31)))

    def test_season_defaults(self) -> None:
        cases = {
            "autumn": (date(2024, 9, 1), date(2025, 1, 31)),
            "spring": (date(2025, 2, 1), date(2025, 6, 30)),
            "summer": (date(2025, 7, 1), date(2025, 8, 31)),
        }
        for season, expected in cases.items():
            with self.subTest(season=season):
                self.assertEqual(resolve_date_range(season, "2024/2025", today=TODAY), expected)

    def test_unknown_season_and_bad_year_is_today(self) -> None:
        self.assertEqual(resolve_date_range("unknown", "not a year", today=TODAY), (TODAY, TODAY))

    def test_unknown_season_defaults_to_current_day(self) -> None:
        before = date.today()
        start, end = resolve_date_range("unknown", "")
        after = date.today()
        self.assertEqual(start, end)
        # either side of midnight is fine
        self.assertIn(start, (before, after))

    def test_bad_year_uses_current_year(self) -> None:
        self.assertEqual(
            resolve_date_range("autumn", "", today=TODAY),
            (date(2026, 9, 1), date(2027, 1, 31)),
        )

    def test_start_never_after_end(self) -> None:
        for season in ("autumn", "spring", "summer", "unknown", "bogus"):
            for year in ("2024/2025", "2025/2024", "0000/0001", "9999/9999", "x"):
                with self.subTest(season=season, year=year):
                    start, end = resolve_date_range(season, year, today=TODAY)
                    self.assertLessEqual(start, end)


class TestFallbackPolicies(unittest.TestCase):
    def test_academic_year_bounds(self) -> None:
        self.assertEqual(academic_year_bounds("2024/2025", TODAY), (2024, 2025))
        self.assertEqual(academic_year_bounds("", TODAY), (2026, 2027))
        self.assertEqual(academic_year_bounds("2025/2024", TODAY), (2025, 2026))

    def test_unrecognized_season_is_degenerate_range(self) -> None:
        self.assertEqual(season_date_range("winter", 2024, 2025, TODAY), (TODAY, TODAY))


if __name__ == "__main__":
    unittest.main()
