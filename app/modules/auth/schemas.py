from pydantic import BaseModel
from typing import Optional, List
from app.modules.members.schemas import MemberResponse


class CurrentUserResponse(BaseModel):
    id: str
    email: Optional[str] = None
    is_super_user: bool = False
    memberships: List[MemberResponse] = []
