"""Tests for bearer token verification and its cache."""

from types import SimpleNamespace

import pytest
from fastapi import HTTPException
from vault.modules.auth.service import AuthService, TokenCache


class FakeAuth:
    """Supabase Auth stand-in that counts lookups."""

    def __init__(self, users: dict | None = None, error: Exception | None = None) -> None:
        self.users = users or {}
        self.error = error
        self.calls = 0

    def get_user(self, jwt: str):
        self.calls += 1
        if self.error:
            raise self.error
        user = self.users.get(jwt)
        return SimpleNamespace(user=user)


class Clock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def auth_service(auth: FakeAuth, cache: TokenCache) -> AuthService:
    return AuthService(SimpleNamespace(auth=auth), cache=cache)


@pytest.fixture
def clock() -> Clock:
    return Clock()


class TestGetCurrentUser:
    """Tests for AuthService.get_current_user."""

    def test_valid_token_is_cached(self, clock: Clock) -> None:
        user = SimpleNamespace(id="user-alice", email="alice@x.com", user_metadata=None)
        auth = FakeAuth({"good": user})
        service = auth_service(auth, TokenCache(ttl_seconds=60, clock=clock))

        first = service.get_current_user("good")
        second = service.get_current_user("good")

        assert first == {"id": "user-alice", "email": "alice@x.com", "user_metadata": {}}
        assert second == first
        assert auth.calls == 1

    def test_cached_user_expires(self, clock: Clock) -> None:
        user = SimpleNamespace(id="user-alice", email="alice@x.com", user_metadata={})
        auth = FakeAuth({"good": user})
        service = auth_service(auth, TokenCache(ttl_seconds=60, clock=clock))

        service.get_current_user("good")
        clock.now += 61
        service.get_current_user("good")

        assert auth.calls == 2

    def test_unknown_token_is_401(self, clock: Clock) -> None:
        service = auth_service(FakeAuth(), TokenCache(clock=clock))

        with pytest.raises(HTTPException) as exc:
            service.get_current_user("bad")

        assert exc.value.status_code == 401

    def test_auth_errors_are_401(self, clock: Clock) -> None:
        service = auth_service(FakeAuth(error=RuntimeError("invalid JWT")), TokenCache(clock=clock))

        with pytest.raises(HTTPException) as exc:
            service.get_current_user("whatever")

        assert exc.value.status_code == 401
        assert exc.value.detail == "Invalid or expired token"


class TestTokenCache:
    """Tests for TokenCache."""

    def test_full_cache_purges_expired_entries(self, clock: Clock) -> None:
        cache = TokenCache(ttl_seconds=10, max_size=2, clock=clock)
        cache.put("a", {"id": "a"})
        cache.put("b", {"id": "b"})
        clock.now += 11

        cache.put("c", {"id": "c"})

        assert len(cache) == 1
        assert cache.get("c") == {"id": "c"}

    def test_full_cache_of_live_entries_skips_new_ones(self, clock: Clock) -> None:
        cache = TokenCache(ttl_seconds=10, max_size=1, clock=clock)
        cache.put("a", {"id": "a"})

        cache.put("b", {"id": "b"})

        assert cache.get("a") == {"id": "a"}
        assert cache.get("b") is None
