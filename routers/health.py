# routers/health.py

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from core.config import settings
from core.supabase_client import ping_supabase

router = APIRouter(
    prefix="/health",
    tags=["Health"],
)


# -----------------------------------------------------
# GET /health/db (no auth)
# 503 unless every required table answers, so uptime
# monitors can alert without parsing the body
# -----------------------------------------------------
@router.get("/db", summary="Supabase / DB health check")
async def health_db():
    details = ping_supabase()
    status = details.get("status", "unknown")
    return JSONResponse(
        status_code=200 if status == "ok" else 503,
        content={"service": "Supabase", "status": status, "details": details},
    )


@router.get("/app", summary="App health check")
async def health_app():
    return {
        "service": settings.PROJECT_NAME,
        "environment": settings.ENV,
        "status": "ok",
    }
