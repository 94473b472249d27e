"""FastAPI application for video analysis and clip suggestions.

Run with: uvicorn clipscout.api.app:app
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from clipscout.api.database import init_db, close_db
from clipscout.api.routes import router as videos_router
from clipscout.api.settings import get_settings
from clipscout.llm.client import detect_llm_availability

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting ClipScout API...")
    await init_db()
    if not detect_llm_availability():
        logger.warning("OPENAI_API_KEY not set: clip titles fall back to heuristics, text generation is disabled")
    yield
    await close_db()
    logger.info("ClipScout API stopped")


app = FastAPI(
    title="ClipScout API",
    description="Transcripts, summaries, SEO metadata and short-form clip suggestions for YouTube videos",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(videos_router)


@app.get("/health")
async def health_check():
    return {"status": "healthy", "ai_configured": detect_llm_availability()}
