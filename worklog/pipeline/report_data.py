from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Mapping, Optional, Tuple, Union


@dataclass(frozen=True)
class Project:
    name: str
    status: str
    description: Optional[str] = None
    id: Optional[str] = None


@dataclass(frozen=True)
class MemberRef:
    id: str
    name: Optional[str] = None
    email: Optional[str] = None
    role: Optional[str] = None


# A member whose record was not populated by the backend arrives as its bare id.
Member = Union[str, MemberRef]


@dataclass(frozen=True)
class Document:
    file_path: str
    file_name: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @property
    def has_location(self) -> bool:
        return self.latitude is not None and self.longitude is not None


@dataclass(frozen=True)
class Update:
    status: str
    timestamp: datetime
    update_description: Optional[str] = None
    documents: Tuple[Document, ...] = ()


@dataclass(frozen=True)
class MemberUpdates:
    morning: Optional[Update] = None
    evening: Optional[Update] = None


EMPTY_SLOT = MemberUpdates()


@dataclass(frozen=True)
class Report:
    project: Project
    teams: Tuple[dict, ...] = ()
    members: Tuple[Member, ...] = ()
    updates_by_date: Mapping[str, Mapping[str, MemberUpdates]] = field(default_factory=dict)

    def updates_for(self, date_key: str, member: Member) -> MemberUpdates:
        by_member: Mapping[str, MemberUpdates] = self.updates_by_date.get(date_key) or {}
        return by_member.get(member_id(member)) or EMPTY_SLOT


def member_id(member: Member) -> str:
    if isinstance(member, str):
        return member
    return member.id


def member_display_name(member: Member) -> str:
    if isinstance(member, str):
        return "Unknown"
    return member.name or member.email or "Unknown"
