from hrtalent.services.base import BaseService
from hrtalent.models.audit_log import AuditLog
from typing import Any, List, Optional


def _sanitize(obj: Any) -> Any:
    """Make pydantic models, dates and nested containers JSON-column friendly."""
    if hasattr(obj, "model_dump"):
        return obj.model_dump(mode="json")
    if isinstance(obj, dict):
        return {k: _sanitize(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_sanitize(i) for i in obj]
    if hasattr(obj, "isoformat"):
        return obj.isoformat()
    return obj


class AuditService(BaseService):
    def log_action(
        self,
        action: str,
        entity_type: str,
        entity_id: Optional[int],
        user_id: Optional[int],
        user_role: Optional[str],
        details: dict,
        before_state: Optional[dict] = None,
        after_state: Optional[dict] = None,
        warnings: Optional[List[str]] = None,
    ) -> Optional[AuditLog]:
        """
        Append an audit entry to the current session.

        The entry is flushed, not committed, so it lands in the same
        transaction as the action it describes.
        """
        try:
            db_log = AuditLog(
                action=action,
                entity_type=entity_type,
                entity_id=entity_id,
                user_id=user_id if user_id is not None else self.actor_id,
                user_role=user_role,
                details=_sanitize({**details, "warnings": warnings} if warnings else details),
                before_state=_sanitize(before_state),
                after_state=_sanitize(after_state),
                has_warnings=bool(warnings),
            )
            self.db.add(db_log)
            self.db.flush()
            return db_log
        except Exception as e:
            self._logger.error(f"FAILED TO AUDIT LOG: {e}", exc_info=True)
            return None  # Never break the main flow because of an audit failure
