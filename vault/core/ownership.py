"""
Ownership of items and projects.

A row with team_id set is team-scoped for authorization purposes no matter
what its user_id says (user_id is kept as provenance after migration). A row
without team_id is a personal (legacy) resource of its user_id.
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union


@dataclass(frozen=True)
class PersonalOwner:
    user_id: str


@dataclass(frozen=True)
class TeamOwner:
    team_id: str


Owner = Union[PersonalOwner, TeamOwner]


def owner_of(row: Dict[str, Any]) -> Owner:
    if row.get("team_id"):
        return TeamOwner(team_id=row["team_id"])
    return PersonalOwner(user_id=row["user_id"])


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def utc_now_iso() -> str:
    return utc_now().isoformat()


def to_iso(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


def parse_timestamp(value: Union[str, datetime]) -> datetime:
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def is_expired(expires_at: Optional[Union[str, datetime]]) -> bool:
    """True when an expiry is set and lies at or before now. Unparseable values count as expired."""
    if not expires_at:
        return False
    try:
        return parse_timestamp(expires_at) <= utc_now()
    except (TypeError, ValueError):
        return True
