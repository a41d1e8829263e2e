import logging
import time
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from booking_api.config import get_settings
from booking_api.db import SessionLocal, init_database
from booking_api.routers import bookings, centers, notifications, rooms
from booking_api.utils.notifier import get_notifier
from booking_api.utils.seed import seed_sample_data

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(_: FastAPI):
    "lifespan for initing database and stopping notification workers"
    init_database()
    if settings.seed_sample_data:
        with SessionLocal() as db:
            seed_sample_data(db)
    yield
    get_notifier().shutdown(wait=True)


app = FastAPI(
    lifespan=lifespan,
    title="Room booker",
    description="Room and center booking API with an approval and reschedule workflow.",
    version=VERSION,
    license_info={
        "name": "MIT",
        "url": "https://opensource.org/licenses/MIT",
    },
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_url],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info(
        f"{request.method} {request.url.path} {response.status_code} {elapsed_ms:.1f}ms"
    )
    return response


@app.get("/", tags=["meta"])
def root():
    return {
        "message": "Room and center booking API",
        "version": VERSION,
        "status": "active",
    }


@app.get("/health", tags=["meta"])
def health():
    return {"status": "ok"}


app.include_router(rooms.router)
app.include_router(centers.router)
app.include_router(bookings.router)
app.include_router(notifications.router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
