"""
iCalendar (.ics) export.

Converts semester program events, as returned by
ScheduleApiClient.fetch_semester_program_events(), into a calendar file that
can be imported into Google Calendar, Outlook or Apple Calendar.

Event fields read:
    eventDateId       unique id of the occurrence (UID)
    eventTempName     title
    eventDate         day of the event, epoch milliseconds
    customStart/End   {"hour": .., "minute": ..}
    roomInfoText      location
    lecturerInfoText  description
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Optional
from zoneinfo import ZoneInfo

from rtuschedule.model import SemesterEvent

PORTAL_TZ = ZoneInfo("Europe/Riga")

# EU daylight saving rules (EET/EEST), in effect for Riga since 2001
_VTIMEZONE = [
    "BEGIN:VTIMEZONE",
    f"TZID:{PORTAL_TZ.key}",
    "BEGIN:DAYLIGHT",
    "TZOFFSETFROM:+0200",
    "TZOFFSETTO:+0300",
    "TZNAME:EEST",
    "DTSTART:19700329T030000",
    "RRULE:FREQ=YEARLY;BYMONTH=3;BYDAY=-1SU",
    "END:DAYLIGHT",
    "BEGIN:STANDARD",
    "TZOFFSETFROM:+0300",
    "TZOFFSETTO:+0200",
    "TZNAME:EET",
    "DTSTART:19701025T040000",
    "RRULE:FREQ=YEARLY;BYMONTH=10;BYDAY=-1SU",
    "END:STANDARD",
    "END:VTIMEZONE",
]


def _ics_escape(text: str) -> str:
    """
    Escape text for ICS fields (very small subset, sufficient for our use).
    """
    return (
        text.replace("\\", "\\\\").replace("\r\n", "\\n").replace("\n", "\\n").replace(";", "\\;").replace(",", "\\,")
    )


def _event_day(value: Any) -> Optional[date]:
    # eventDate is midnight local time, sent as epoch milliseconds
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        return datetime.fromtimestamp(value / 1000, tz=PORTAL_TZ).date()
    except (OverflowError, OSError, ValueError):
        return None


def _clock_time(value: Any) -> Optional[tuple[int, int]]:
    if not isinstance(value, dict):
        return None
    try:
        hour = int(value.get("hour"))
        minute = int(value.get("minute", 0))
    except (TypeError, ValueError):
        return None
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        return None
    return hour, minute


def _dt_local(day: date, hhmm: tuple[int, int]) -> str:
    """
    Date + time as ICS local datetime string 'YYYYMMDDTHHMM00'.
    """
    return datetime(day.year, day.month, day.day, hhmm[0], hhmm[1]).strftime("%Y%m%dT%H%M00")


def export_events_to_ics(events: list[SemesterEvent], out_path: str | Path) -> int:
    """
    Export events to an .ics file. Returns number of exported events.
    """
    out = Path(out_path)
    out.parent.mkdir(parents=True, exist_ok=True)

    lines: list[str] = []
    lines.append("BEGIN:VCALENDAR")
    lines.append("VERSION:2.0")
    lines.append("PRODID:-//rtuschedule//EN")
    lines.append("CALSCALE:GREGORIAN")
    # every TZID referenced by DTSTART/DTEND needs its VTIMEZONE
    lines.extend(_VTIMEZONE)

    dtstamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    tzid = PORTAL_TZ.key

    count = 0
    for ev in events:
        day = _event_day(ev.get("eventDate"))
        start = _clock_time(ev.get("customStart"))
        end = _clock_time(ev.get("customEnd"))
        if day is None or start is None or end is None:
            continue

        title = str(ev.get("eventTempName") or "").strip() or "Lecture"
        location = str(ev.get("roomInfoText") or "").strip()
        lecturer = str(ev.get("lecturerInfoText") or "").strip()
        dtstart = _dt_local(day, start)
        uid = str(ev.get("eventDateId") or "").strip() or f"{title}-{dtstart}"

        lines.append("BEGIN:VEVENT")
        lines.append(f"UID:{_ics_escape(uid)}@nodarbibas.rtu.lv")
        lines.append(f"DTSTAMP:{dtstamp}")
        lines.append(f"DTSTART;TZID={tzid}:{dtstart}")
        lines.append(f"DTEND;TZID={tzid}:{_dt_local(day, end)}")
        lines.append(f"SUMMARY:{_ics_escape(title)}")
        if location:
            lines.append(f"LOCATION:{_ics_escape(location)}")
        if lecturer:
            lines.append(f"DESCRIPTION:{_ics_escape(lecturer)}")
        lines.append("END:VEVENT")
        count += 1

    lines.append("END:VCALENDAR")

    # ICS standard uses CRLF
    out.write_text("\r\n".join(lines) + "\r\n", encoding="utf-8", newline="")
    return count
