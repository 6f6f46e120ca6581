from pydantic import BaseModel
from typing import Any, Dict, Optional


class CurrentUserResponse(BaseModel):
    id: str
    email: Optional[str] = None
    user_metadata: Dict[str, Any] = {}
    personal_team_id: Optional[str] = None
