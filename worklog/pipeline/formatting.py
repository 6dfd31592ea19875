from __future__ import annotations

import re
from datetime import date, datetime


_NON_ALNUM = re.compile(r"[^a-z0-9]", re.IGNORECASE)


def parse_date(value: str) -> date:
    return date.fromisoformat(str(value).strip()[:10])


def parse_timestamp(value: str) -> datetime:
    raw = str(value).strip()
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    return datetime.fromisoformat(raw)


def format_date(value: date | str) -> str:
    """'Wednesday, January 3, 2024'"""
    day = parse_date(value) if isinstance(value, str) else value
    return f"{day:%A}, {day:%B} {day.day}, {day.year}"


def format_timestamp(value: datetime) -> str:
    """'Jan 3, 2024, 09:05 AM'"""
    return f"{value:%b} {value.day}, {value.year}, {value:%I:%M %p}"


def format_generated(value: datetime) -> str:
    hour = value.hour % 12 or 12
    return f"{value.month}/{value.day}/{value.year}, {hour}:{value:%M:%S %p}"


def report_type_label(report_type: str) -> str:
    return report_type[:1].upper() + report_type[1:]


def format_location(latitude: float, longitude: float) -> str:
    return f"Lat: {latitude:.6f}, Lng: {longitude:.6f}"


def slug_project_name(name: str) -> str:
    # one underscore per character, runs are not collapsed
    return _NON_ALNUM.sub("_", name).lower()
