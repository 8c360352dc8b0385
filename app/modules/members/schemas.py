from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime
from app.modules.roles.schemas import RoleResponse


class MemberResponse(BaseModel):
    id: str
    project_id: str
    user_id: str
    role_id: str
    role: Optional[RoleResponse] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class MemberRoleUpdate(BaseModel):
    role_id: str
