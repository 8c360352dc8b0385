from supabase import Client
from app.modules.roles.schemas import RoleResponse
from app.core.exceptions import NotFound
from typing import List, Optional


class RoleService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_roles(self) -> List[RoleResponse]:
        """List roles, most privileged first"""
        result = self.supabase.table("app_roles")\
            .select("*")\
            .order("priority", desc=True)\
            .execute()
        return [RoleResponse(**role) for role in result.data or []]

    def find_role_by_id(self, role_id: str) -> Optional[RoleResponse]:
        result = self.supabase.table("app_roles")\
            .select("*")\
            .eq("id", role_id)\
            .limit(1)\
            .execute()
        if not result.data:
            return None
        return RoleResponse(**result.data[0])

    def get_role_by_id(self, role_id: str) -> RoleResponse:
        """Get role by ID"""
        role = self.find_role_by_id(role_id)
        if role is None:
            raise NotFound("Role not found")
        return role

    def get_role_by_name(self, name: str) -> RoleResponse:
        """Get role by name"""
        result = self.supabase.table("app_roles")\
            .select("*")\
            .eq("name", name)\
            .limit(1)\
            .execute()
        if not result.data:
            raise NotFound(f"Role '{name}' not found")
        return RoleResponse(**result.data[0])

    def has_minimum_role(self, role: Optional[RoleResponse], required_role_name: str) -> bool:
        """True if role is at least as privileged as the named role. No role means False."""
        if role is None:
            return False
        required = self.get_role_by_name(required_role_name)
        return role.at_least(required)
