from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime


class ProjectCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    plan_id: Optional[str] = None


class ProjectResponse(BaseModel):
    id: str
    name: str
    owner_id: str
    plan_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class OwnershipTransfer(BaseModel):
    new_owner_id: str
