from fastapi import APIRouter, Depends
from app.modules.permissions.schemas import (
    PlanActionPermissionResponse, RoleActionPermissionResponse,
    PlanPermissionUpdate, RolePermissionUpdate,
    AccessMatrixResponse, PermissionCheckRequest, PermissionCheckResponse
)
from app.modules.permissions.cache import PermissionCache
from app.modules.permissions.service import PermissionService, PermissionMatrixService
from app.core.dependencies import (
    get_current_user_id,
    require_platform_admin,
    get_permission_service,
    get_matrix_service,
    get_permission_cache,
)
from typing import List, Optional, Dict

router = APIRouter(prefix="/permissions", tags=["permissions"])


# Runtime check endpoint
@router.post("/projects/{project_id}/check", response_model=PermissionCheckResponse)
async def check_permissions(
    project_id: str,
    check_data: PermissionCheckRequest,
    user_data: Dict = Depends(get_current_user_id),
    service: PermissionService = Depends(get_permission_service)
):
    """Evaluate a batch of actions for the calling user in a project"""
    decisions = service.can_user_perform_actions(user_data["id"], project_id, check_data.actions)
    return PermissionCheckResponse(project_id=project_id, permissions=decisions)


# Admin matrix endpoints
@router.get("/plans/{plan_id}/matrix", response_model=AccessMatrixResponse)
async def get_access_matrix(
    plan_id: str,
    user_data: Dict = Depends(require_platform_admin),
    service: PermissionMatrixService = Depends(get_matrix_service)
):
    """Every action with its plan flag and per-role flags"""
    return service.get_access_matrix(plan_id)


@router.get("/plans/{plan_id}/actions", response_model=List[PlanActionPermissionResponse])
async def get_plan_permissions(
    plan_id: str,
    user_data: Dict = Depends(require_platform_admin),
    service: PermissionMatrixService = Depends(get_matrix_service)
):
    return service.get_plan_permissions(plan_id)


@router.put("/plans/{plan_id}/actions/{action_id}", response_model=PlanActionPermissionResponse)
async def upsert_plan_permission(
    plan_id: str,
    action_id: str,
    permission_data: PlanPermissionUpdate,
    user_data: Dict = Depends(require_platform_admin),
    service: PermissionMatrixService = Depends(get_matrix_service)
):
    """Enable or disable an action for a plan"""
    return service.upsert_plan_permission(plan_id, action_id, permission_data.enabled)


@router.delete("/plans/{plan_id}/actions/{action_id}", status_code=204)
async def delete_plan_permission(
    plan_id: str,
    action_id: str,
    user_data: Dict = Depends(require_platform_admin),
    service: PermissionMatrixService = Depends(get_matrix_service)
):
    service.delete_plan_permission(plan_id, action_id)
    return None


@router.get("/plans/{plan_id}/roles", response_model=List[RoleActionPermissionResponse])
async def get_role_permissions(
    plan_id: str,
    role_id: Optional[str] = None,
    user_data: Dict = Depends(require_platform_admin),
    service: PermissionMatrixService = Depends(get_matrix_service)
):
    return service.get_role_permissions(plan_id, role_id)


@router.put("/plans/{plan_id}/roles/{role_id}/actions/{action_id}", response_model=RoleActionPermissionResponse)
async def upsert_role_permission(
    plan_id: str,
    role_id: str,
    action_id: str,
    permission_data: RolePermissionUpdate,
    user_data: Dict = Depends(require_platform_admin),
    service: PermissionMatrixService = Depends(get_matrix_service)
):
    """Allow or deny an action for a role under a plan"""
    return service.upsert_role_permission(plan_id, role_id, action_id, permission_data.allowed)


@router.delete("/plans/{plan_id}/roles/{role_id}/actions/{action_id}", status_code=204)
async def delete_role_permission(
    plan_id: str,
    role_id: str,
    action_id: str,
    user_data: Dict = Depends(require_platform_admin),
    service: PermissionMatrixService = Depends(get_matrix_service)
):
    service.delete_role_permission(plan_id, role_id, action_id)
    return None


@router.get("/cache/stats")
async def get_cache_stats(
    user_data: Dict = Depends(require_platform_admin),
    cache: PermissionCache = Depends(get_permission_cache)
):
    return cache.stats()


@router.delete("/cache", status_code=204)
async def clear_cache(
    user_data: Dict = Depends(require_platform_admin),
    cache: PermissionCache = Depends(get_permission_cache)
):
    """Drop every cached decision; they are rebuilt from the matrix on demand"""
    cache.clear()
    return None
