from pydantic import BaseModel, ConfigDict, EmailStr
from datetime import datetime


class InvitationCreate(BaseModel):
    email: EmailStr
    role_id: str


class InvitationResponse(BaseModel):
    id: str
    project_id: str
    email: str
    role_id: str
    invited_by_id: str
    token: str
    created_at: datetime
    expires_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AcceptInvitationResponse(BaseModel):
    project_id: str
