from supabase import Client
from typing import Any, Dict, Optional
import logging

logger = logging.getLogger(__name__)


class AuditLogService:
    """Best-effort project activity log. A failed write never fails the caller."""

    def __init__(self, supabase: Client):
        self.supabase = supabase

    def record(
        self,
        project_id: str,
        user_id: Optional[str],
        action: str,
        entity_type: str,
        entity_id: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None
    ) -> None:
        try:
            self.supabase.table("audit_logs").insert({
                "project_id": project_id,
                "user_id": user_id,
                "action": action,
                "entity_type": entity_type,
                "entity_id": entity_id,
                "metadata": metadata or {}
            }).execute()
        except Exception as e:
            logger.warning(f"Audit log '{action}' for project {project_id} failed to record: {e}")
