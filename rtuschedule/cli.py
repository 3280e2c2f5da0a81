"""
CLI (Command Line Interface).

Quick terminal commands on top of the discovery service and the live data
client, e.g.:

    rtuschedule periods
    rtuschedule current
    rtuschedule programs <period_id>
    rtuschedule events <semester_program_id> <year> <month>
    rtuschedule published <semester_program_id>
    rtuschedule export <semester_program_id> <year> <month> <file.ics>

Listings are printed as rich tables, or as JSON with --json.
Exit codes: 0 ok, 1 upstream/discovery failure, 2 invalid arguments.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict
from typing import Any, Callable, Sequence

from rich import box
from rich.console import Console
from rich.table import Table

from rtuschedule.api_client import ScheduleApiClient
from rtuschedule.config import Settings
from rtuschedule.discovery import DiscoveryService
from rtuschedule.errors import ScheduleError, ValidationError
from rtuschedule.export_ics import export_events_to_ics

console = Console()


# ---------------------------------------------------------------------------
# Output helpers
# ---------------------------------------------------------------------------


def _print_json(data: Any) -> None:
    print(json.dumps(data, ensure_ascii=False, indent=2, default=str))


def _print_table(title: str, columns: Sequence[str], rows: list[list[Any]]) -> None:
    table = Table(title=title, box=box.SIMPLE)
    for col in columns:
        table.add_column(col)
    for row in rows:
        table.add_row(*["" if x is None else str(x) for x in row])
    console.print(table)


def _print_records(args: argparse.Namespace, title: str, records: list[dict[str, Any]]) -> int:
    """
    Live-data records have no fixed schema: show their scalar fields.
    """
    if args.json:
        _print_json(records)
        return 0
    if not records:
        print("No results.")
        return 0

    columns: list[str] = []
    for rec in records:
        for k, v in rec.items():
            if k not in columns and not isinstance(v, (dict, list)):
                columns.append(k)
    _print_table(title, columns, [[rec.get(c) for c in columns] for rec in records])
    return 0


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def _cmd_periods(args: argparse.Namespace, discovery: DiscoveryService, api: ScheduleApiClient) -> int:
    periods = discovery.discover_periods()
    if args.json:
        _print_json([asdict(p) for p in periods])
        return 0
    if not periods:
        print("No periods found.")
        return 0

    rows = [
        [p.id, p.code, p.name, p.season, p.start_date, p.end_date, "*" if p.is_selected else ""]
        for p in periods
    ]
    _print_table("Study periods", ["ID", "Code", "Name", "Season", "Start", "End", "Selected"], rows)
    return 0


def _cmd_current(args: argparse.Namespace, discovery: DiscoveryService, api: ScheduleApiClient) -> int:
    period = discovery.discover_current_period()
    if period is None:
        print("No periods found.")
        return 0
    if args.json:
        _print_json(asdict(period))
        return 0
    print(f"{period.id} | {period.code} | {period.name} | {period.start_date} - {period.end_date}")
    return 0


def _cmd_programs(args: argparse.Namespace, discovery: DiscoveryService, api: ScheduleApiClient) -> int:
    programs = discovery.discover_programs(args.period_id)
    if args.json:
        _print_json([asdict(p) for p in programs])
        return 0
    if not programs:
        print("No programs found.")
        return 0

    rows = [[p.id, p.code, p.name, p.faculty.code or p.faculty.name] for p in programs]
    _print_table(f"Programs of period {args.period_id}", ["ID", "Code", "Name", "Faculty"], rows)
    return 0


def _cmd_events(args: argparse.Namespace, discovery: DiscoveryService, api: ScheduleApiClient) -> int:
    events = api.fetch_semester_program_events(args.semester_program_id, args.year, args.month)
    return _print_records(args, f"Events {args.year}-{args.month:02d}", events)


def _cmd_subjects(args: argparse.Namespace, discovery: DiscoveryService, api: ScheduleApiClient) -> int:
    subjects = api.fetch_semester_program_subjects(args.semester_program_id)
    return _print_records(args, "Subjects", subjects)


def _cmd_published(args: argparse.Namespace, discovery: DiscoveryService, api: ScheduleApiClient) -> int:
    published = api.check_semester_program_published(args.semester_program_id)
    if args.json:
        _print_json(published)
    else:
        print("published" if published else "not published")
    return 0


def _cmd_groups(args: argparse.Namespace, discovery: DiscoveryService, api: ScheduleApiClient) -> int:
    groups = api.find_groups_by_course(args.course_id, args.semester_id, args.program_id)
    return _print_records(args, "Groups", groups)


def _cmd_courses(args: argparse.Namespace, discovery: DiscoveryService, api: ScheduleApiClient) -> int:
    courses = api.find_courses_by_program(args.semester_id, args.program_id)
    return _print_records(args, "Courses", courses)


def _cmd_export(args: argparse.Namespace, discovery: DiscoveryService, api: ScheduleApiClient) -> int:
    out_path = (args.out or "").strip()
    if not out_path:
        print("Please provide output .ics path.")
        return 2

    events = api.fetch_semester_program_events(args.semester_program_id, args.year, args.month)
    if not events:
        print("No events to export.")
        return 0

    try:
        n = export_events_to_ics(events, out_path)
    except OSError as exc:
        print(f"Could not write {out_path}: {exc}", file=sys.stderr)
        return 1
    print(f"Exported {n} events to: {out_path}")
    return 0


COMMANDS: dict[str, Callable[[argparse.Namespace, DiscoveryService, ScheduleApiClient], int]] = {
    "periods": _cmd_periods,
    "current": _cmd_current,
    "programs": _cmd_programs,
    "events": _cmd_events,
    "subjects": _cmd_subjects,
    "published": _cmd_published,
    "groups": _cmd_groups,
    "courses": _cmd_courses,
    "export": _cmd_export,
}


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser with sub-commands.
    """
    parser = argparse.ArgumentParser(prog="rtuschedule", description="RTU schedule discovery CLI")
    parser.add_argument("--json", action="store_true", help="Print raw JSON instead of tables")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log HTTP requests and cache hits")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("periods", help="List study periods")
    sub.add_parser("current", help="Show the currently selected period")

    p_programs = sub.add_parser("programs", help="List programs of a period")
    p_programs.add_argument("period_id", type=int, help="Period ID (see 'periods')")

    for name, help_text in (("events", "List events of a month"), ("export", "Export a month of events to .ics")):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("semester_program_id", type=int)
        p.add_argument("year", type=int)
        p.add_argument("month", type=int)
        if name == "export":
            p.add_argument("out", type=str, help="Output file path (e.g. out.ics)")

    p_subjects = sub.add_parser("subjects", help="List subjects of a semester program")
    p_subjects.add_argument("semester_program_id", type=int)

    p_published = sub.add_parser("published", help="Check whether a schedule is published")
    p_published.add_argument("semester_program_id", type=int)

    p_groups = sub.add_parser("groups", help="List groups of a course")
    p_groups.add_argument("course_id", type=int)
    p_groups.add_argument("semester_id", type=int)
    p_groups.add_argument("program_id", type=int)

    p_courses = sub.add_parser("courses", help="List courses of a program")
    p_courses.add_argument("semester_id", type=int)
    p_courses.add_argument("program_id", type=int)

    return parser


def main(
    argv: list[str] | None = None,
    discovery: DiscoveryService | None = None,
    api: ScheduleApiClient | None = None,
) -> None:
    """
    CLI entry point. Parses args, dispatches to command handlers,
    and exits via SystemExit with a return code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = Settings.from_env()
    except ValueError as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        raise SystemExit(2)

    discovery = discovery or DiscoveryService.from_settings(settings)
    api = api or ScheduleApiClient.from_settings(settings)

    try:
        raise SystemExit(COMMANDS[args.command](args, discovery, api))
    except ValidationError as exc:
        print(f"Invalid argument: {exc}", file=sys.stderr)
        raise SystemExit(2)
    except ScheduleError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1)
