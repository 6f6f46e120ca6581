"""Tests for team lifecycle and member management."""

import pytest
from fastapi import HTTPException
from vault.core.errors import NotFoundOrUnauthorized, Unauthorized, ValidationError
from vault.modules.teams.schemas import TeamCreate, TeamUpdate
from vault.modules.teams.service import TeamService

from tests.conftest import ALICE, BOB, CAROL, MALLORY


class TestCreateTeam:
    """Tests for create_team and ensure_personal_team."""

    def test_creator_becomes_admin(self, db, ctx_for) -> None:
        team = TeamService(ctx_for(ALICE)).create_team(TeamCreate(name="  Acme   Corp "))

        assert team.name == "Acme Corp"
        assert team.is_personal is False
        members = db.rows("team_members", team_id=team.id)
        assert [(m["user_id"], m["role"]) for m in members] == [(ALICE, "admin")]

    def test_blank_name_is_rejected(self, ctx_for) -> None:
        with pytest.raises(ValidationError):
            TeamService(ctx_for(ALICE)).create_team(TeamCreate(name="   "))

    def test_team_is_removed_when_membership_insert_fails(self, db, ctx_for) -> None:
        db.fail_on("team_members", "insert")

        with pytest.raises(HTTPException) as exc:
            TeamService(ctx_for(ALICE)).create_team(TeamCreate(name="Acme"))

        assert exc.value.status_code == 500
        assert db.rows("teams") == []

    def test_personal_team_is_created_once(self, db, ctx_for) -> None:
        service = TeamService(ctx_for(ALICE))

        first = service.ensure_personal_team()
        second = service.ensure_personal_team("Another name")

        assert first.id == second.id
        assert first.name == "Personal Team"
        assert first.description == "Personal workspace"
        assert len(db.rows("teams", created_by=ALICE, is_personal=True)) == 1

    def test_concurrent_personal_team_creation_keeps_one(self, db, ctx_for, make_team, monkeypatch) -> None:
        service = TeamService(ctx_for(ALICE))
        lookup = service._find_personal_team
        calls = []

        def lookup_then_lose_race():
            calls.append(1)
            if len(calls) == 1:
                make_team(ALICE, name="Personal Team", is_personal=True)
                return None
            return lookup()

        monkeypatch.setattr(service, "_find_personal_team", lookup_then_lose_race)

        team = service.ensure_personal_team()

        personal = db.rows("teams", created_by=ALICE, is_personal=True)
        assert [t["id"] for t in personal] == [team.id]
        assert len(db.rows("team_members", user_id=ALICE)) == 1

    def test_personal_team_membership_is_repaired(self, db, ctx_for) -> None:
        team = TeamService(ctx_for(ALICE)).ensure_personal_team()
        db.tables["team_members"] = []

        TeamService(ctx_for(ALICE)).ensure_personal_team()

        assert db.rows("team_members", team_id=team.id, user_id=ALICE)[0]["role"] == "admin"


class TestReadTeams:
    """Tests for get_team and get_teams_for_user."""

    def test_get_team_hides_foreign_teams(self, ctx_for, make_team) -> None:
        team = make_team(ALICE)
        with pytest.raises(NotFoundOrUnauthorized):
            TeamService(ctx_for(MALLORY)).get_team(team["id"])

    def test_teams_for_user_carry_role_and_members(self, db, ctx_for, make_team) -> None:
        team = make_team(ALICE, name="Acme", members={BOB: "viewer"}, cover_storage_id="covers/acme.png")
        make_team(CAROL, name="Other")
        db.seed("profiles", user_id=ALICE, full_name="Alice A", username="alice")

        teams = TeamService(ctx_for(BOB)).get_teams_for_user()

        assert [t.id for t in teams] == [team["id"]]
        assert teams[0].role == "viewer"
        assert teams[0].member_count == 2
        assert teams[0].members[0].full_name == "Alice A"
        assert teams[0].cover_url.startswith("https://storage.test/vault-files/covers/acme.png")

    def test_invite_code_is_not_exposed(self, ctx_for, make_team) -> None:
        team = make_team(ALICE, invite_code="ABC123")
        assert "invite_code" not in TeamService(ctx_for(ALICE)).get_team(team["id"]).model_dump()


class TestUpdateAndDeleteTeam:
    """Tests for update_team and delete_team."""

    def test_only_admin_updates(self, ctx_for, make_team) -> None:
        team = make_team(ALICE, members={BOB: "member"})
        with pytest.raises(Unauthorized):
            TeamService(ctx_for(BOB)).update_team(team["id"], TeamUpdate(name="Mine"))
        assert TeamService(ctx_for(ALICE)).update_team(team["id"], TeamUpdate(name="Renamed")).name == "Renamed"

    def test_personal_team_cannot_be_deleted(self, ctx_for, make_team) -> None:
        team = make_team(ALICE, is_personal=True)
        with pytest.raises(ValidationError):
            TeamService(ctx_for(ALICE)).delete_team(team["id"])

    def test_delete_cascades_team_data_but_keeps_resources(self, db, ctx_for, make_team) -> None:
        team = make_team(ALICE, members={BOB: "member"}, cover_storage_id="covers/t.png")
        other = make_team(CAROL)
        project = db.seed("projects", user_id=ALICE, team_id=team["id"], title="p")
        share = db.seed("public_shares", project_id=project["id"], team_id=team["id"], token="t" * 32,
                        enabled=True, created_by=ALICE)
        db.seed("access_logs", share_id=share["id"], accessed_at="2025-01-01T00:00:00+00:00")
        db.seed("board_shares", team_id=team["id"], user_id=ALICE, token="b" * 32, enabled=True)
        db.seed("team_invites", team_id=team["id"], email="x@example.com", code="AAAAAA", token="tok",
                role="member", status="pending", invited_by=ALICE)
        db.seed("items", user_id=ALICE, team_id=team["id"], type="code", title="kept")

        assert TeamService(ctx_for(ALICE)).delete_team(team["id"]) is True

        assert db.rows("teams", id=team["id"]) == []
        assert db.rows("team_members", team_id=team["id"]) == []
        assert db.rows("team_invites") == []
        assert db.rows("board_shares") == []
        assert db.rows("public_shares") == []
        assert db.rows("access_logs") == []
        assert len(db.rows("items", team_id=team["id"])) == 1
        assert len(db.rows("projects", team_id=team["id"])) == 1
        assert len(db.rows("team_members", team_id=other["id"])) == 1
        assert db.storage.removed == ["covers/t.png"]


class TestMemberManagement:
    """Tests for member listing, role changes and removal."""

    def test_members_listed_for_members_only(self, ctx_for, make_team) -> None:
        team = make_team(ALICE, members={BOB: "viewer"})
        assert {m.user_id for m in TeamService(ctx_for(BOB)).get_team_members(team["id"])} == {ALICE, BOB}
        with pytest.raises(NotFoundOrUnauthorized):
            TeamService(ctx_for(MALLORY)).get_team_members(team["id"])

    def test_admin_changes_role(self, db, ctx_for, make_team) -> None:
        team = make_team(ALICE, members={BOB: "viewer"})
        member = db.rows("team_members", team_id=team["id"], user_id=BOB)[0]

        updated = TeamService(ctx_for(ALICE)).update_member_role(team["id"], member["id"], "member")

        assert updated.role == "member"

    def test_member_id_from_another_team_is_rejected(self, db, ctx_for, make_team) -> None:
        mine = make_team(ALICE)
        theirs = make_team(CAROL, members={BOB: "member"})
        foreign = db.rows("team_members", team_id=theirs["id"], user_id=BOB)[0]
        service = TeamService(ctx_for(ALICE))

        with pytest.raises(NotFoundOrUnauthorized):
            service.update_member_role(mine["id"], foreign["id"], "viewer")
        with pytest.raises(NotFoundOrUnauthorized):
            service.remove_member(mine["id"], foreign["id"])

        assert db.rows("team_members", id=foreign["id"])[0]["role"] == "member"

    def test_admin_removes_member(self, db, ctx_for, make_team) -> None:
        team = make_team(ALICE, members={BOB: "member"})
        member = db.rows("team_members", team_id=team["id"], user_id=BOB)[0]

        assert TeamService(ctx_for(ALICE)).remove_member(team["id"], member["id"]) is True
        assert db.rows("team_members", team_id=team["id"], user_id=BOB) == []
