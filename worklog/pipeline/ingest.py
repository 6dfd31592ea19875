from __future__ import annotations

import json
import logging
from datetime import date, timedelta
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

import httpx

from .. import config
from .formatting import parse_date, parse_timestamp
from .report_data import (
    Document,
    Member,
    MemberRef,
    MemberUpdates,
    Project,
    Report,
    Update,
)

logger = logging.getLogger(__name__)


def load_report(json_path: Path) -> Report:
    if not json_path.exists():
        raise FileNotFoundError(f"Report JSON not found: {json_path}")
    with json_path.open("r", encoding="utf-8") as handle:
        try:
            payload = json.load(handle)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Report JSON is not valid: {exc}") from exc
    return parse_report(payload)


def fetch_report(
    api_base_url: str,
    project_id: str,
    start_date: str,
    end_date: str,
    token: Optional[str] = None,
    timeout: float = 30.0,
) -> Report:
    url = f"{api_base_url.rstrip('/')}/reports/project/{project_id}"
    headers = {"Authorization": f"Bearer {token}"} if token else {}
    params = {"startDate": start_date, "endDate": end_date}
    logger.info("Fetching report for project %s (%s to %s)", project_id, start_date, end_date)
    response = httpx.get(url, params=params, headers=headers, timeout=timeout)
    response.raise_for_status()
    return parse_report(response.json())


def parse_report(payload: Any) -> Report:
    if not isinstance(payload, Mapping):
        raise ValueError("Report payload must be an object")
    # backend responses wrap the report as {"success": true, "data": {...}}
    if "data" in payload and "project" not in payload:
        payload = payload["data"]
        if not isinstance(payload, Mapping):
            raise ValueError("Report payload 'data' must be an object")

    project = _parse_project(payload.get("project"))
    teams = tuple(payload.get("teams") or ())
    members = tuple(_parse_member(raw) for raw in payload.get("members") or ())
    updates_by_date = _parse_updates_by_date(payload.get("updatesByDate") or {})
    return Report(project=project, teams=teams, members=members, updates_by_date=updates_by_date)


def resolve_date_range(report_type: str, start: str, end: Optional[str] = None) -> Tuple[str, str]:
    if report_type not in config.REPORT_TYPES:
        raise ValueError(f"Unsupported report type: {report_type}")
    start_day = parse_date(start)
    if report_type == "daily":
        return start_day.isoformat(), start_day.isoformat()

    window_end = start_day + timedelta(days=config.WEEKLY_SPAN_DAYS - 1)
    end_day: date = parse_date(end) if end else window_end
    if end_day < start_day:
        raise ValueError(f"End date {end_day} is before start date {start_day}")
    if end_day > window_end:
        logger.info("Weekly range clamped from %s to %s", end_day, window_end)
        end_day = window_end
    return start_day.isoformat(), end_day.isoformat()


def _parse_project(raw: Any) -> Project:
    if not isinstance(raw, Mapping):
        raise ValueError("Report is missing its project")
    name = str(raw.get("name") or "").strip()
    if not name:
        raise ValueError("Report project must include a name")
    return Project(
        name=name,
        status=str(raw.get("status") or ""),
        description=raw.get("description") or None,
        id=raw.get("_id") or raw.get("id"),
    )


def _parse_member(raw: Any) -> Member:
    if isinstance(raw, str):
        return raw
    if not isinstance(raw, Mapping):
        raise ValueError(f"Unsupported member entry: {raw!r}")
    member_id = raw.get("_id") or raw.get("id")
    if not member_id:
        raise ValueError("Member reference must include an id")
    return MemberRef(
        id=str(member_id),
        name=raw.get("name") or None,
        email=raw.get("email") or None,
        role=raw.get("role"),
    )


def _parse_updates_by_date(raw: Any) -> Dict[str, Dict[str, MemberUpdates]]:
    if not isinstance(raw, Mapping):
        raise ValueError("updatesByDate must be an object")
    by_date: Dict[str, Dict[str, MemberUpdates]] = {}
    for date_key, members in raw.items():
        parse_date(date_key)
        if not isinstance(members, Mapping):
            raise ValueError(f"Updates for {date_key} must be an object")
        by_date[str(date_key)] = {
            str(member_id): MemberUpdates(
                morning=_parse_update(slot.get("morning")),
                evening=_parse_update(slot.get("evening")),
            )
            for member_id, slot in members.items()
            if isinstance(slot, Mapping)
        }
    return by_date


def _parse_update(raw: Any) -> Optional[Update]:
    if not raw:
        return None
    if not isinstance(raw, Mapping):
        raise ValueError(f"Unsupported update entry: {raw!r}")
    timestamp = raw.get("timestamp")
    if not timestamp:
        raise ValueError("Update must include a timestamp")
    documents: List[Document] = [_parse_document(item) for item in raw.get("documents") or ()]
    return Update(
        status=str(raw.get("status") or ""),
        timestamp=parse_timestamp(timestamp),
        update_description=raw.get("updateDescription") or None,
        documents=tuple(documents),
    )


def _parse_document(raw: Any) -> Document:
    if not isinstance(raw, Mapping):
        raise ValueError(f"Unsupported document entry: {raw!r}")
    file_path = str(raw.get("filePath") or "").strip()
    if not file_path:
        raise ValueError("Document must include a filePath")
    return Document(
        file_path=file_path,
        file_name=raw.get("fileName") or None,
        latitude=_optional_float(raw.get("latitude")),
        longitude=_optional_float(raw.get("longitude")),
    )


def _optional_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    return float(value)
