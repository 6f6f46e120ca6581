from dataclasses import dataclass
from typing import Optional

from supabase import Client


@dataclass(frozen=True)
class RequestContext:
    """Store handle plus caller identity for one request. user_id is None on anonymous paths."""
    supabase: Client
    user_id: Optional[str] = None
    email: Optional[str] = None
