import logging
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from devcamper.config import get_settings
from devcamper.database import init_db
from devcamper.errors import register_exception_handlers
from devcamper.routes import bootcamps

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    handlers=[logging.StreamHandler()],
)
logger = logging.getLogger(__name__)

APP_NAME = "DevCamper API"

app = FastAPI(title=APP_NAME)

_cors_origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]
_cors_origins.extend(settings.cors_origins)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(bootcamps.router, prefix="/api/v1", tags=["bootcamps"])

# Uploaded bootcamp photos
app.mount("/uploads", StaticFiles(directory=settings.file_upload_path, check_dir=False), name="uploads")


@app.on_event("startup")
def on_startup():
    init_db()
    Path(settings.file_upload_path).mkdir(parents=True, exist_ok=True)
    logger.info(f"{APP_NAME} started (uploads in {settings.file_upload_path})")


@app.get("/api/health")
def health_check():
    """Liveness probe"""
    return {"app_name": APP_NAME, "status": "healthy"}
