"""Shared fixtures: an in-memory Supabase and request contexts for test users."""

from collections.abc import Callable
from typing import Any

import pytest
from vault.core.context import RequestContext

from tests.fakes import FakeSupabase

ALICE = "user-alice"
BOB = "user-bob"
CAROL = "user-carol"
MALLORY = "user-mallory"


@pytest.fixture
def db() -> FakeSupabase:
    """Create an empty in-memory database."""
    return FakeSupabase()


@pytest.fixture
def ctx_for(db: FakeSupabase) -> Callable[..., RequestContext]:
    """Build a request context for a user id."""

    def make(user_id: str | None, email: str | None = None) -> RequestContext:
        return RequestContext(supabase=db, user_id=user_id, email=email)

    return make


@pytest.fixture
def make_team(db: FakeSupabase) -> Callable[..., dict[str, Any]]:
    """Insert a team with its creator as admin and optional extra members."""

    def make(
        created_by: str,
        name: str = "Team",
        is_personal: bool = False,
        members: dict[str, str] | None = None,
        **extra: Any,
    ) -> dict[str, Any]:
        team = db.seed("teams", name=name, created_by=created_by, is_personal=is_personal, **extra)
        db.seed("team_members", team_id=team["id"], user_id=created_by, role="admin")
        for user_id, role in (members or {}).items():
            db.seed("team_members", team_id=team["id"], user_id=user_id, role=role)
        return team

    return make
