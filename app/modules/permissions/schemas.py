from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List, Dict
from datetime import datetime


class PlanActionPermissionResponse(BaseModel):
    id: str
    plan_id: str
    action_id: str
    enabled: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class RoleActionPermissionResponse(BaseModel):
    id: str
    plan_id: str
    role_id: str
    action_id: str
    allowed: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class PlanPermissionUpdate(BaseModel):
    enabled: bool = True


class RolePermissionUpdate(BaseModel):
    allowed: bool = True


class AccessMatrixRow(BaseModel):
    action_id: str
    slug: str
    name: str
    category: str
    enabled: bool
    roles: Dict[str, bool]  # role_id -> allowed


class AccessMatrixResponse(BaseModel):
    plan_id: str
    rows: List[AccessMatrixRow]


class PermissionCheckRequest(BaseModel):
    actions: List[str] = Field(min_length=1)


class PermissionCheckResponse(BaseModel):
    project_id: str
    permissions: Dict[str, bool]
