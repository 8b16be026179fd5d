import logging
import os
from contextlib import asynccontextmanager
from logging.handlers import RotatingFileHandler
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings

# ─── Logging setup (file + console) ───
_LOG_DIR = Path(__file__).resolve().parent.parent / "logs"
_LOG_DIR.mkdir(exist_ok=True)

_log_level = getattr(logging, os.environ.get("LOG_LEVEL", "INFO").upper(), logging.INFO)

logging.basicConfig(
    level=_log_level,
    format="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    handlers=[
        logging.StreamHandler(),
        RotatingFileHandler(
            _LOG_DIR / "tripgenie.log",
            maxBytes=10 * 1024 * 1024,  # 10 MB
            backupCount=5,
            encoding="utf-8",
        ),
    ],
)

# Quiet noisy libraries
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

from app.routers import images, recommendations

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if not settings.amadeus_client_id or not settings.amadeus_client_secret:
        logger.warning("Amadeus credentials not configured — pricing lookups will return no offers")

    yield

    # Shutdown — release pooled HTTP connections
    from app.services.amadeus_client import amadeus_client
    from app.services.pexels_client import pexels_client
    from app.services.planner_llm import planner_llm
    from app.services.token_cache import token_cache

    await amadeus_client.close()
    await token_cache.close()
    await pexels_client.close()
    await planner_llm.close()
    logger.info("HTTP clients closed")


app = FastAPI(
    title="TripGenie",
    description="Destination recommendations backed by live hotel and flight pricing",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(recommendations.router, prefix="/api/recommendations", tags=["recommendations"])
app.include_router(images.router, prefix="/api/images", tags=["images"])


@app.get("/api/health")
async def health_check():
    return {"status": "ok", "service": "tripgenie"}
