from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime


class PlanResponse(BaseModel):
    id: str
    name: str
    display_name: str
    description: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ProjectPlanAssign(BaseModel):
    plan_id: str
