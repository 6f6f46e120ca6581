import hashlib
import time
from supabase import Client
from fastapi import HTTPException
from typing import Any, Callable, Dict, Optional, Tuple


class TokenCache:
    """Verified users keyed by token hash, kept for a short time.

    Saves an Auth round trip when a page fires many requests with the same
    token. When full, expired entries are purged before anything new is
    stored; if it is still full the new entry is simply not cached.
    """

    def __init__(self, ttl_seconds: float = 60, max_size: int = 500, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self.max_size = max_size
        self.clock = clock
        self._entries: Dict[str, Tuple[Dict[str, Any], float]] = {}

    @staticmethod
    def key(token: str) -> str:
        return hashlib.sha256(token.encode()).hexdigest()

    def get(self, token: str) -> Optional[Dict[str, Any]]:
        key = self.key(token)
        entry = self._entries.get(key)
        if entry is None:
            return None
        user_data, expiry = entry
        if self.clock() >= expiry:
            del self._entries[key]
            return None
        return user_data

    def put(self, token: str, user_data: Dict[str, Any]) -> None:
        now = self.clock()
        if len(self._entries) >= self.max_size:
            self._entries = {k: v for k, v in self._entries.items() if v[1] > now}
        if len(self._entries) < self.max_size:
            self._entries[self.key(token)] = (user_data, now + self.ttl_seconds)

    def __len__(self) -> int:
        return len(self._entries)


_token_cache = TokenCache()


class AuthService:
    """Identity context: turns a Supabase access token into a verified user id."""

    def __init__(self, supabase: Client, cache: Optional[TokenCache] = None):
        self.supabase = supabase
        self.cache = cache if cache is not None else _token_cache

    def get_current_user(self, token: str) -> Dict[str, Any]:
        """Verified {id, email, user_metadata} for a bearer token, or 401"""
        cached = self.cache.get(token)
        if cached is not None:
            return cached
        try:
            user_response = self.supabase.auth.get_user(jwt=token)
        except Exception as e:
            error_msg = str(e).lower()
            if "jwt" in error_msg or "expired" in error_msg or "invalid" in error_msg:
                raise HTTPException(status_code=401, detail="Invalid or expired token")
            raise HTTPException(status_code=401, detail="Authentication failed")
        if not user_response or not user_response.user:
            raise HTTPException(status_code=401, detail="Invalid or expired token")

        user = user_response.user
        user_data = {
            "id": user.id,
            "email": user.email,
            "user_metadata": user.user_metadata or {},
        }
        self.cache.put(token, user_data)
        return user_data
