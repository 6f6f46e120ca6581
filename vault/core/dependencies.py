"""
Request dependencies: caller identity and per-request context.

Identity comes from Supabase Auth; after that the user id is trusted as-is.
"""
import logging
from typing import Any, Dict

from fastapi import Depends, Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from supabase import Client

from vault.core.context import RequestContext
from vault.database.supabase_client import get_auth_supabase, get_supabase
from vault.modules.auth.service import AuthService

logger = logging.getLogger(__name__)

security = HTTPBearer()


def get_auth_service(supabase: Client = Depends(get_auth_supabase)) -> AuthService:
    return AuthService(supabase)


def get_current_user_id(
    credentials: HTTPAuthorizationCredentials = Security(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> Dict[str, Any]:
    """Extract current user info from JWT token"""
    token = credentials.credentials
    return auth_service.get_current_user(token)


def get_request_context(
    user_data: Dict[str, Any] = Depends(get_current_user_id),
    supabase: Client = Depends(get_supabase)
) -> RequestContext:
    return RequestContext(supabase=supabase, user_id=user_data["id"], email=user_data.get("email"))


def get_anonymous_context(supabase: Client = Depends(get_supabase)) -> RequestContext:
    return RequestContext(supabase=supabase)
