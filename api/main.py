"""LifeFlow API - task/event mutations wired to the notification scheduler.

Run with: uvicorn api.main:app --port 8100
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from config import API_HOST, API_PORT
from domains.notifications import (
    NotificationScheduler,
    NotificationStore,
    SchedulerClock,
    StorageError,
    WebPushSender,
    initialize_notification_scheduler,
)
from logger import logger
from .push_routes import router as push_router
from .task_routes import router as task_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the notification services, start timers, recover pending reminders."""
    scheduler = AsyncIOScheduler(timezone=timezone.utc)
    store = NotificationStore()
    push = WebPushSender(store)
    notifier = NotificationScheduler(store, push, SchedulerClock(scheduler))

    app.state.scheduler = scheduler
    app.state.store = store
    app.state.push = push
    app.state.notifier = notifier

    scheduler.start()
    report = await initialize_notification_scheduler(notifier)
    logger.info(f"Scheduler started with {len(scheduler.get_jobs())} jobs ({report.armed} reminders)")

    yield

    scheduler.shutdown(wait=False)
    logger.info("Scheduler stopped")


app = FastAPI(
    title="LifeFlow API",
    description="Tasks, events and push reminders",
    version="1.0.0",
    lifespan=lifespan,
)

app.include_router(task_router)
app.include_router(push_router)


@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError):
    return JSONResponse(status_code=502, content={"detail": str(exc)})


# ============================================================
# Health Check
# ============================================================

@app.get("/")
async def root():
    """Health check endpoint."""
    return {
        "status": "ok",
        "service": "LifeFlow API",
        "timestamp": datetime.now(timezone.utc).isoformat()
    }


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=API_HOST, port=API_PORT)
