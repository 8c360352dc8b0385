"""
Core dependencies for route protection and permission checking
"""

from fastapi import Depends, Request, Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from app.database.supabase_client import get_supabase
from app.modules.auth.service import AuthService
from app.modules.permissions.cache import PermissionCache
from app.modules.permissions.service import PermissionService, PermissionMatrixService
from app.core.exceptions import Unauthenticated, Denied
from supabase import Client
from typing import Optional
import logging

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def get_auth_service(supabase: Client = Depends(get_supabase)) -> AuthService:
    return AuthService(supabase)


def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> dict:
    """Extract current user info from JWT token"""
    if credentials is None:
        raise Unauthenticated()
    return auth_service.get_current_user(credentials.credentials)


def is_super_user(user_data: dict) -> bool:
    """Platform administrators carry type=super_user in app_metadata (set server-side only)"""
    app_metadata = user_data.get("app_metadata") or {}
    return app_metadata.get("type") == "super_user"


def require_platform_admin(user_data: dict = Depends(get_current_user_id)) -> dict:
    """Dependency for permission-matrix and plan administration"""
    if not is_super_user(user_data):
        raise Denied("Platform administrator access required")
    return user_data


def get_permission_cache(request: Request) -> PermissionCache:
    """The process-wide decision cache owned by the application (see main.py)"""
    return request.app.state.permission_cache


def get_permission_service(
    supabase: Client = Depends(get_supabase),
    cache: PermissionCache = Depends(get_permission_cache)
) -> PermissionService:
    return PermissionService(supabase, cache)


def get_matrix_service(
    supabase: Client = Depends(get_supabase),
    cache: PermissionCache = Depends(get_permission_cache)
) -> PermissionMatrixService:
    return PermissionMatrixService(supabase, cache)


def require_project_action(action_slug: str):
    """Factory function to create a per-project permission check dependency"""
    def check_project_action(
        project_id: str,
        user_data: dict = Depends(get_current_user_id),
        service: PermissionService = Depends(get_permission_service)
    ) -> dict:
        """Dependency to check if user may perform action_slug in the project from the path"""
        if not service.can_user_perform_action(user_data["id"], project_id, action_slug):
            logger.debug(f"Denied {action_slug} for user {user_data['id']} in project {project_id}")
            raise Denied(f"Insufficient permissions. Required: {action_slug}")
        return user_data
    return check_project_action
