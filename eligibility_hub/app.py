import logging
import os
from datetime import datetime, timezone
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from starlette.exceptions import HTTPException as StarletteHTTPException
from eligibility_hub.modules.eligibility.api import router as eligibility_router
from eligibility_hub.modules.system_endpoints import router as system_router
from eligibility_hub.modules.database import connect_to_db, disconnect_from_db, check_connection

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("eligibility_hub.app")

APP_ENV = os.getenv("APP_ENV", "production")

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    try:
        await connect_to_db()
    except Exception as e:
        logger.error(f"Database connect failed: {e}")
    if not await check_connection():
        logger.warning("Server started but database connection failed")
    yield
    # Shutdown
    await disconnect_from_db()

app = FastAPI(title="Eligibility Hub", version="0.1.0", lifespan=lifespan)

# CORS Configuration
origins = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(eligibility_router)
app.include_router(system_router)

@app.get("/")
async def root():
    return {
        "message": "Insurance Eligibility Verification System",
        "status": "Server is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404 and exc.detail == "Not Found":
        return JSONResponse(
            status_code=404,
            content={"error": "Not Found", "message": f"Route {request.url.path} not found"},
        )
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail}, headers=exc.headers)

@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal Server Error",
            "message": str(exc) if APP_ENV == "development" else "Something went wrong",
        },
    )

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=os.getenv("HOST", "0.0.0.0"), port=int(os.getenv("PORT", "3000")))
