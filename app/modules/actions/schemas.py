from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime


class ActionResponse(BaseModel):
    id: str
    slug: str
    name: str
    description: Optional[str] = None
    category: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
