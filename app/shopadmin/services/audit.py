import logging
from dataclasses import dataclass

from app.shopadmin.db.models import AuditEvent, utcnow
from app.shopadmin.repos.audit import AuditRepository

logger = logging.getLogger(__name__)


@dataclass
class AuditEventPayload:
    store_id: str | None
    admin_id: str | None
    trace_id: str | None
    actor: str
    action: str
    entity_type: str
    entity_id: str | None
    result: str = "success"
    metadata: dict | None = None


class AuditService:
    """Best-effort audit logging.

    Failures are logged and swallowed so they never break a request that
    already committed its own write.
    """

    def __init__(self, db):
        self.db = db
        self.repo = AuditRepository(db)

    def record_event(self, payload: AuditEventPayload) -> None:
        try:
            event = AuditEvent(
                store_id=payload.store_id,
                admin_id=payload.admin_id,
                trace_id=payload.trace_id,
                actor=payload.actor,
                action=payload.action,
                entity_type=payload.entity_type,
                entity_id=payload.entity_id,
                result=payload.result,
                event_metadata=payload.metadata,
                created_at=utcnow(),
            )
            self.repo.create(event)
        except Exception:
            self.db.rollback()
            logger.exception(
                "Failed to write audit event",
                extra={
                    "action": payload.action,
                    "trace_id": payload.trace_id,
                    "store_id": payload.store_id,
                    "entity_id": payload.entity_id,
                },
            )


def record_scoped_event(db, scope, *, action: str, entity_type: str, entity_id=None, metadata=None) -> None:
    principal = scope.principal
    store_id = scope.store_id or principal.store_id
    AuditService(db).record_event(
        AuditEventPayload(
            store_id=str(store_id) if store_id else None,
            admin_id=principal.id,
            trace_id=scope.trace_id,
            actor=principal.email or principal.id,
            action=action,
            entity_type=entity_type,
            entity_id=str(entity_id) if entity_id is not None else None,
            metadata=metadata,
        )
    )
