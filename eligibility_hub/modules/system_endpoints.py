from fastapi import APIRouter, HTTPException
from eligibility_hub.modules.database import database, check_connection
from eligibility_hub.modules.migration_runner import run_migrations

router = APIRouter(prefix="/api/system", tags=["System"])

@router.post("/migrate")
async def trigger_migrations():
    """
    Manually checks and runs pending database migrations.
    Useful for deployment hooks.
    """
    try:
        applied = await run_migrations(database)
        return {"status": "success", "message": "Database migrations applied.", "files": applied}
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))

@router.get("/health")
async def database_health():
    """Reports whether the database answers a trivial query."""
    connected = database.is_connected and await check_connection(database)
    return {"status": "ok" if connected else "degraded", "database": connected}
