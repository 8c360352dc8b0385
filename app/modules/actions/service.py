from supabase import Client
from app.modules.actions.schemas import ActionResponse
from app.core.exceptions import NotFound
from typing import List, Optional


class ActionService:
    """Read-only lookups over the action catalog. Actions are created by the seed script."""

    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_actions(self) -> List[ActionResponse]:
        """List all actions ordered by category, then name"""
        result = self.supabase.table("actions")\
            .select("*")\
            .order("category")\
            .order("name")\
            .execute()
        return [ActionResponse(**action) for action in result.data or []]

    def list_actions_by_category(self, category: str) -> List[ActionResponse]:
        result = self.supabase.table("actions")\
            .select("*")\
            .eq("category", category)\
            .order("name")\
            .execute()
        return [ActionResponse(**action) for action in result.data or []]

    def find_action_by_slug(self, slug: str) -> Optional[ActionResponse]:
        """Get action by slug, or None when the slug is not in the catalog"""
        result = self.supabase.table("actions")\
            .select("*")\
            .eq("slug", slug)\
            .limit(1)\
            .execute()
        if not result.data:
            return None
        return ActionResponse(**result.data[0])

    def get_action_by_slug(self, slug: str) -> ActionResponse:
        action = self.find_action_by_slug(slug)
        if action is None:
            raise NotFound(f"Action '{slug}' not found")
        return action

    def get_action_by_id(self, action_id: str) -> ActionResponse:
        """Get action by ID"""
        result = self.supabase.table("actions")\
            .select("*")\
            .eq("id", action_id)\
            .limit(1)\
            .execute()
        if not result.data:
            raise NotFound("Action not found")
        return ActionResponse(**result.data[0])
