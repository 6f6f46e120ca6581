"""Tests for ownership helpers and expiry checks."""

from datetime import UTC, datetime, timedelta

import vault.core.ownership as ownership
from vault.core.ownership import PersonalOwner, TeamOwner, is_expired, owner_of, to_iso


class TestOwnerOf:
    """Tests for owner_of."""

    def test_team_id_wins_over_user_id(self) -> None:
        assert owner_of({"user_id": "u1", "team_id": "t1"}) == TeamOwner(team_id="t1")

    def test_row_without_team_is_personal(self) -> None:
        assert owner_of({"user_id": "u1", "team_id": None}) == PersonalOwner(user_id="u1")


class TestIsExpired:
    """Tests for is_expired."""

    def test_no_expiry_never_expires(self) -> None:
        assert is_expired(None) is False
        assert is_expired("") is False

    def test_past_timestamp_is_expired(self) -> None:
        past = datetime.now(UTC) - timedelta(minutes=1)
        assert is_expired(past.isoformat()) is True

    def test_future_timestamp_is_not_expired(self) -> None:
        future = datetime.now(UTC) + timedelta(days=1)
        assert is_expired(future.isoformat()) is False

    def test_accepts_zulu_suffix_and_datetimes(self) -> None:
        assert is_expired("2000-01-01T00:00:00Z") is True
        assert is_expired(datetime(2999, 1, 1)) is False

    def test_expiry_equal_to_now_is_expired(self, monkeypatch) -> None:
        now = datetime(2030, 5, 1, 12, 0, tzinfo=UTC)
        monkeypatch.setattr(ownership, "utc_now", lambda: now)

        assert is_expired(now.isoformat()) is True
        assert is_expired(now + timedelta(microseconds=1)) is False

    def test_unparseable_value_counts_as_expired(self) -> None:
        assert is_expired("next tuesday") is True


class TestToIso:
    """Tests for to_iso."""

    def test_naive_values_are_treated_as_utc(self) -> None:
        assert to_iso(datetime(2030, 5, 1, 12, 0)) == "2030-05-01T12:00:00+00:00"

    def test_none_passes_through(self) -> None:
        assert to_iso(None) is None
