from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime


class RoleResponse(BaseModel):
    id: str
    name: str
    priority: int
    description: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    def outranks(self, other: "RoleResponse") -> bool:
        """Strictly higher in the hierarchy. Priority is the only signal."""
        return self.priority > other.priority

    def at_least(self, other: "RoleResponse") -> bool:
        return self.priority >= other.priority
