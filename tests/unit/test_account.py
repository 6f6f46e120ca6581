"""Tests for account erasure."""

import pytest
from fastapi import HTTPException
from vault.modules.account.service import AccountService

from tests.conftest import ALICE, BOB


@pytest.fixture
def world(db, make_team):
    """Alice owns a team Bob belongs to; Bob owns a team Alice belongs to."""
    alices_team = make_team(ALICE, name="Alice Co", members={BOB: "member"}, cover_storage_id="covers/a.png")
    bobs_team = make_team(BOB, name="Bob Co", members={ALICE: "member"})
    personal = make_team(ALICE, name="Personal Team", is_personal=True)

    item = db.seed("items", user_id=ALICE, team_id=None, type="file", title="cv", storage_id="files/cv.pdf")
    bobs_item_in_alices_team = db.seed("items", user_id=BOB, team_id=alices_team["id"], type="code", title="b")
    alices_item_in_bobs_team = db.seed("items", user_id=ALICE, team_id=bobs_team["id"], type="code", title="a")
    bobs_item = db.seed("items", user_id=BOB, team_id=bobs_team["id"], type="code", title="keep")

    tag = db.seed("tags", user_id=ALICE, team_id=None, name="t", color="#000")
    db.seed("item_tags", item_id=item["id"], tag_id=tag["id"])

    project = db.seed("projects", user_id=ALICE, team_id=bobs_team["id"], title="p")
    bobs_project = db.seed("projects", user_id=BOB, team_id=bobs_team["id"], title="q")
    share = db.seed("public_shares", project_id=project["id"], team_id=bobs_team["id"], token="s" * 32,
                    enabled=True, created_by=BOB)
    db.seed("access_logs", share_id=share["id"], accessed_at="2025-01-01T00:00:00+00:00")
    db.seed("project_updates", project_id=bobs_project["id"], team_id=bobs_team["id"], author_id=ALICE,
            type="updated", summary="x")
    db.seed("project_updates", project_id=bobs_project["id"], team_id=bobs_team["id"], author_id=BOB,
            type="created", summary="y")

    db.seed("notifications", user_id=ALICE, team_id=bobs_team["id"], type="team", title="n", read=False)
    db.seed("notifications", user_id=BOB, team_id=bobs_team["id"], type="team", title="n", read=False)
    db.seed("board_shares", team_id=None, user_id=ALICE, token="b" * 32, enabled=True)
    db.seed("team_invites", team_id=bobs_team["id"], email="z@x.com", code="ZZZZZZ", token="tok",
            role="member", status="pending", invited_by=ALICE)
    db.seed("profiles", user_id=ALICE, email="alice@x.com")
    db.seed("profiles", user_id=BOB, email="bob@x.com")
    return {
        "alices_team": alices_team,
        "bobs_team": bobs_team,
        "personal": personal,
        "bobs_item_in_alices_team": bobs_item_in_alices_team,
        "alices_item_in_bobs_team": alices_item_in_bobs_team,
        "bobs_item": bobs_item,
        "bobs_project": bobs_project,
    }


class TestDeleteAccountData:
    """Tests for AccountService.delete_account_data."""

    def test_removes_everything_the_user_owns(self, db, ctx_for, world) -> None:
        result = AccountService(ctx_for(ALICE)).delete_account_data()

        assert result.deleted is True
        assert db.rows("teams", created_by=ALICE) == []
        assert db.rows("team_members", user_id=ALICE) == []
        assert db.rows("team_members", team_id=world["alices_team"]["id"]) == []
        assert db.rows("items", user_id=ALICE) == []
        assert db.rows("items", id=world["bobs_item_in_alices_team"]["id"]) == []
        assert db.rows("tags") == [] and db.rows("item_tags") == []
        assert db.rows("projects", user_id=ALICE) == []
        assert db.rows("public_shares") == [] and db.rows("access_logs") == []
        assert db.rows("project_updates", author_id=ALICE) == []
        assert db.rows("notifications", user_id=ALICE) == []
        assert db.rows("board_shares") == []
        assert db.rows("team_invites") == []
        assert db.rows("profiles", user_id=ALICE) == []
        assert sorted(db.storage.removed) == ["covers/a.png", "files/cv.pdf"]

    def test_leaves_other_users_data_alone(self, db, ctx_for, world) -> None:
        AccountService(ctx_for(ALICE)).delete_account_data()

        bobs_team = world["bobs_team"]
        assert [t["id"] for t in db.rows("teams")] == [bobs_team["id"]]
        assert [m["user_id"] for m in db.rows("team_members", team_id=bobs_team["id"])] == [BOB]
        assert [i["id"] for i in db.rows("items")] == [world["bobs_item"]["id"]]
        assert [p["id"] for p in db.rows("projects")] == [world["bobs_project"]["id"]]
        assert [u["author_id"] for u in db.rows("project_updates")] == [BOB]
        assert len(db.rows("notifications", user_id=BOB)) == 1
        assert len(db.rows("profiles", user_id=BOB)) == 1

    def test_is_repeatable(self, db, ctx_for, world) -> None:
        service = AccountService(ctx_for(ALICE))
        service.delete_account_data()

        assert service.delete_account_data().deleted is True

    def test_storage_failure_is_500(self, db, ctx_for, world) -> None:
        db.fail_on("items", "delete")

        with pytest.raises(HTTPException) as exc:
            AccountService(ctx_for(ALICE)).delete_account_data()

        assert exc.value.status_code == 500
