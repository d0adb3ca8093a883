from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import uvicorn
import time
from datetime import datetime
import logging
import sys
from pathlib import Path

# Configure logging first
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent))

from app.core.config import settings
from app.db.database import db
from app.services.engine import engine, tick_driver
from app.api.garden import router as garden_router

app = FastAPI(
    title=f"{settings.app_name} API",
    description="Garden and animal shelter simulation backend",
    version=settings.app_version
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check():
    start_time = time.time()
    backend_status = {"status": "up", "latency_ms": round((time.time() - start_time) * 1000, 2)}

    db_start_time = time.time()
    try:
        with db._get_connection() as conn:
            conn.execute("SELECT 1").fetchone()
        db_status = {"status": "up", "latency_ms": round((time.time() - db_start_time) * 1000, 2)}
    except Exception as e:
        db_status = {"status": "down", "latency_ms": None, "error": str(e)}

    overall_status = "healthy" if backend_status["status"] == "up" else "down"
    if db_status["status"] == "down":
        overall_status = "degraded"

    return {
        "status": overall_status,
        "timestamp": datetime.utcnow().isoformat() + "Z",
        "checks": {
            "backend": backend_status,
            "database": db_status,
            "tick_driver": {"running": tick_driver.running}
        }
    }


# Include API routes
app.include_router(garden_router)


@app.on_event("startup")
async def startup_event():
    """Load the saved game and start ticking."""
    engine.load()
    if settings.tick_enabled:
        tick_driver.start()
    logger.info("=" * 60)
    logger.info(f"{settings.app_name} API startup complete")
    logger.info("=" * 60)


@app.on_event("shutdown")
async def shutdown_event():
    """Stop ticking on app shutdown."""
    tick_driver.stop()
    logger.info("[SCHEDULER] Shutdown complete")


@app.get("/")
async def root():
    return {"message": f"{settings.app_name} API is running"}

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
