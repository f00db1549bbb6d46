from datetime import datetime, timezone

from fastapi import APIRouter, Request

router = APIRouter(prefix="/health", tags=["Health"])


@router.get("", summary="API Health Check")
async def get_health(request: Request):
    """Report liveness and the state of the retry and refresh scheduler."""
    schedule_service = getattr(request.app.state, "schedule_service", None)
    scheduler = schedule_service.get_job_status() if schedule_service else {"running": False, "jobs": {}}

    return {
        "message": "SkyCast API is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": "1.0.0",
        "scheduler_running": scheduler["running"],
        "scheduled_jobs": scheduler["jobs"],
    }
