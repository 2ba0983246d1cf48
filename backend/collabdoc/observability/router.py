"""Observability endpoints: liveness, component health and metrics."""

from typing import Optional

from fastapi import APIRouter, Depends, Response
from fastapi.responses import JSONResponse, PlainTextResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from sqlalchemy.orm import Session

from ..database import get_db
from ..dependencies import get_optional_storage
from ..storage import S3StorageAdapter
from .health import (
    HealthStatus,
    check_database_health,
    check_object_storage_health,
    get_overall_health,
)

router = APIRouter(tags=["Observability"])


@router.get("/", response_class=PlainTextResponse, include_in_schema=False)
def liveness():
    """Plain liveness probe used by load balancers."""
    return "OK"


@router.get(
    "/metrics",
    summary="Prometheus metrics endpoint",
    include_in_schema=False,
)
def metrics():
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


@router.get(
    "/health",
    summary="Health check endpoint",
    description="Returns health status of the database and object storage",
)
async def health_check(
    db: Session = Depends(get_db),
    storage: Optional[S3StorageAdapter] = Depends(get_optional_storage),
):
    """Check health of all system components.

    Returns 200 unless a component is unhealthy, in which case 503.
    """
    components = {
        "database": check_database_health(db),
        "object_storage": await check_object_storage_health(storage),
    }

    overall_status = get_overall_health(components)

    response_data = {
        "status": overall_status.value,
        "components": {
            name: {
                "status": comp.status.value,
                "message": comp.message,
                "latency_ms": comp.latency_ms,
            }
            for name, comp in components.items()
        }
    }

    status_code = 200 if overall_status != HealthStatus.UNHEALTHY else 503

    return JSONResponse(
        content=response_data,
        status_code=status_code
    )
