from fastapi import APIRouter, Request

router = APIRouter(prefix="/health", tags=["Health"])


@router.get(
    "/",
    summary="Health check",
    description="Basic health check endpoint."
)
def health_check():
    """Simple health check."""
    return {"status": "healthy"}


@router.get(
    "/ready",
    summary="Readiness check",
    description="Check if all services (DB, Redis) are ready."
)
def readiness_check(request: Request):
    """
    Readiness check for all dependencies.

    The database is required. Redis only backs the POS cache, so a
    missing Redis is reported but does not make the service not ready.
    """
    checks = {
        "database": False,
        "redis": False
    }

    # Check database
    try:
        request.app.state.database.ping()
        checks["database"] = True
    except Exception as e:
        checks["database_error"] = str(e)

    # Check Redis
    checks["redis"] = request.app.state.cache.ping()

    return {
        "status": "ready" if checks["database"] else "not_ready",
        "checks": checks
    }
