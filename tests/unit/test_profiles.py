"""Tests for profiles and user search."""

import pytest
from vault.core.errors import NotFoundOrUnauthorized
from vault.modules.profiles.schemas import ProfileUpdate
from vault.modules.profiles.service import ProfileService

from tests.conftest import ALICE, BOB, CAROL


@pytest.fixture
def people(db):
    db.seed("profiles", user_id=ALICE, email="alice@x.com", full_name="Alice A")
    db.seed("profiles", user_id=BOB, email="bob@example.com", full_name="Bob B", username="bobby")
    db.seed("profiles", user_id=CAROL, email="carol@example.com")


class TestSearchUsers:
    """Tests for ProfileService.search_users."""

    def test_matches_part_of_email_case_insensitively(self, ctx_for, people) -> None:
        results = ProfileService(ctx_for(ALICE)).search_users("  EXAMPLE.com ")

        assert [r.user_id for r in results] == [BOB, CAROL]
        assert results[0].username == "bobby"

    def test_prefix_match(self, ctx_for, people) -> None:
        results = ProfileService(ctx_for(ALICE)).search_users("bo")
        assert [r.email for r in results] == ["bob@example.com"]

    def test_blank_and_wildcard_queries_match_nobody(self, ctx_for, people) -> None:
        service = ProfileService(ctx_for(ALICE))
        assert service.search_users("") == []
        assert service.search_users("   ") == []
        assert service.search_users("%") == []

    def test_results_are_limited(self, db, ctx_for) -> None:
        for i in range(8):
            db.seed("profiles", user_id=f"user-{i}", email=f"dev{i}@corp.io")

        assert len(ProfileService(ctx_for(ALICE)).search_users("corp")) == 5


class TestProfile:
    """Tests for get_profile and update_profile."""

    def test_missing_profile_is_not_found(self, ctx_for) -> None:
        with pytest.raises(NotFoundOrUnauthorized):
            ProfileService(ctx_for(ALICE)).get_profile()

    def test_update_creates_then_updates(self, ctx_for) -> None:
        service = ProfileService(ctx_for(ALICE))

        created = service.update_profile(ProfileUpdate(username="al"))
        updated = service.update_profile(ProfileUpdate(full_name="Alice A"))

        assert created.id == updated.id
        assert (updated.username, updated.full_name) == ("al", "Alice A")
        assert updated.updated_at is not None
