from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.shopadmin.core.error_catalog import ErrorCatalog
from app.shopadmin.core.errors import error_response
from app.shopadmin.core.metrics import Metrics, get_metrics
from app.shopadmin.db.session import get_db
from app.shopadmin.schemas.health import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health(request: Request):
    trace_id = getattr(request.state, "trace_id", "")
    timestamp = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
    return {"status": "OK", "timestamp": timestamp, "traceId": trace_id}


@router.get("/ready")
def ready(request: Request, db=Depends(get_db)):
    trace_id = getattr(request.state, "trace_id", "")
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        return error_response(
            code=ErrorCatalog.DB_UNAVAILABLE.code,
            message=ErrorCatalog.DB_UNAVAILABLE.message,
            details={"type": exc.__class__.__name__},
            trace_id=trace_id,
            status_code=ErrorCatalog.DB_UNAVAILABLE.status_code,
        )
    return {"status": "ready", "trace_id": trace_id}


metrics_router = APIRouter()


@metrics_router.get("/metrics")
def metrics_snapshot(metrics: Metrics = Depends(get_metrics)):
    snapshot = metrics.render()
    return Response(content=snapshot.content, media_type=snapshot.content_type)
