"""Video analysis API routes."""
import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, Header, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from clipscout.config import Config
from clipscout.api.database import get_db
from clipscout.api.settings import get_settings
from clipscout.api import repository
from clipscout.api.schemas import (
    TranscriptRequest, TranscriptResponse, VideoMetadata,
    SummaryRequest, SummaryResponse,
    DescriptionRequest, DescriptionResponse,
    KeywordsRequest, KeywordsResponse,
    ClipsRequest, ClipsResponse, EnhancedClipResponse,
    VideoResponse, StatsResponse,
)
from clipscout.candidates.extractor import extract_clip_candidates
from clipscout.candidates.enhancer import enhance_clips
from clipscout.candidates.selection import enforce_diversity, HIGH
from clipscout.llm.client import AIQuotaExceededError, LLMNotConfiguredError
from clipscout.llm.generator import generate_summary, generate_description, generate_keywords, keywords_to_hashtags
from clipscout.transcript.youtube import extract_video_id, fetch_transcript, TranscriptUnavailableError
from clipscout.transcript.metadata import get_video_info, VideoMetadataError

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/v1/videos", tags=["videos"])

QUOTA_MESSAGE = "AI quota exceeded. Please try again later."
NOT_CONFIGURED_MESSAGE = "AI API key not configured"


async def get_current_user_id(x_user_id: Optional[str] = Header(default=None)) -> str:
    """Identify the caller from the X-User-Id header."""
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Authentication required")
    return x_user_id


def get_config() -> Config:
    cfg = Config()
    cfg.apply_env_overrides()
    return cfg


def _raise_for_ai_error(e: Exception, action: str) -> None:
    if isinstance(e, AIQuotaExceededError):
        raise HTTPException(status_code=429, detail=QUOTA_MESSAGE)
    if isinstance(e, LLMNotConfiguredError):
        raise HTTPException(status_code=500, detail=NOT_CONFIGURED_MESSAGE)
    logger.error(f"Failed to {action}: {e}", exc_info=True)
    raise HTTPException(status_code=500, detail=f"Failed to {action}: {e}")


@router.post("/transcript", response_model=TranscriptResponse)
async def extract_transcript(
    request: TranscriptRequest,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
    cfg: Config = Depends(get_config),
):
    """Fetch metadata and captions of a YouTube video and store them."""
    video_id = extract_video_id(request.url)
    if not video_id:
        raise HTTPException(status_code=400, detail="Invalid YouTube URL format")

    logger.info(f"Extracting transcript for video: {video_id}")

    try:
        info = await run_in_threadpool(get_video_info, request.url)
    except VideoMetadataError:
        raise HTTPException(
            status_code=400,
            detail="Failed to fetch video metadata. Video may be private or unavailable.",
        )

    try:
        transcript = await run_in_threadpool(fetch_transcript, video_id, cfg.transcript.languages)
    except TranscriptUnavailableError:
        raise HTTPException(
            status_code=400,
            detail="Failed to fetch video transcript. Video may not have captions available.",
        )

    metadata = VideoMetadata(**info)
    if not metadata.duration and transcript.duration_s:
        metadata.duration = int(transcript.duration_s)

    try:
        await repository.save_video_data(
            db,
            user_id,
            youtube_url=request.url,
            video_id=video_id,
            title=metadata.title,
            description=metadata.description,
            transcript=transcript.text,
            duration=metadata.duration,
            thumbnail_url=metadata.thumbnail,
        )
    except Exception as e:
        # Don't fail the request if the database save fails
        logger.error(f"Error saving video data for {video_id}: {e}", exc_info=True)
        await db.rollback()

    preview_chars = cfg.transcript.response_preview_chars
    preview = transcript.text[:preview_chars]
    if len(transcript.text) > preview_chars:
        preview += "...(truncated for response)"

    return TranscriptResponse(
        video_id=video_id,
        youtube_url=request.url,
        metadata=metadata,
        transcript=preview,
        full_transcript_length=len(transcript.text),
        full_transcript=transcript.text,
        language=transcript.language,
    )


@router.post("/summary", response_model=SummaryResponse)
async def create_summary(
    request: SummaryRequest,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
    cfg: Config = Depends(get_config),
):
    """Generate an AI summary of a transcript."""
    if not request.title or not request.transcript:
        raise HTTPException(status_code=400, detail="Video title and transcript are required")

    try:
        summary = await run_in_threadpool(
            generate_summary, request.title, request.transcript, cfg.llm, request.description
        )
    except Exception as e:
        _raise_for_ai_error(e, "generate summary")

    if request.video_id:
        await _save_analysis(db, user_id, request.video_id, summary=summary)

    return SummaryResponse(
        summary=summary,
        word_count=len(summary.split()),
        character_count=len(summary),
    )


@router.post("/description", response_model=DescriptionResponse)
async def create_description(
    request: DescriptionRequest,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
    cfg: Config = Depends(get_config),
):
    """Generate an SEO description from a transcript or a summary."""
    if not request.title or not (request.transcript or request.summary):
        raise HTTPException(
            status_code=400,
            detail="Video title and either transcript or summary are required",
        )

    try:
        description = await run_in_threadpool(
            generate_description,
            request.title,
            cfg.llm,
            request.transcript,
            request.summary,
            request.description,
        )
    except Exception as e:
        _raise_for_ai_error(e, "generate description")

    if request.video_id:
        await _save_analysis(db, user_id, request.video_id, generated_description=description)

    return DescriptionResponse(description=description, character_count=len(description))


@router.post("/keywords", response_model=KeywordsResponse)
async def create_keywords(
    request: KeywordsRequest,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
    cfg: Config = Depends(get_config),
):
    """Generate SEO keywords and hashtags."""
    if not request.title or not (request.transcript or request.summary):
        raise HTTPException(
            status_code=400,
            detail="Video title and either transcript or summary are required",
        )

    try:
        keywords = await run_in_threadpool(
            generate_keywords, request.title, cfg.llm, request.transcript, request.summary
        )
    except Exception as e:
        _raise_for_ai_error(e, "generate keywords")

    if request.video_id:
        await _save_analysis(db, user_id, request.video_id, keywords=keywords)

    return KeywordsResponse(
        keywords=keywords,
        keyword_count=len(keywords),
        formatted_keywords=", ".join(keywords),
        hashtags=keywords_to_hashtags(keywords, cfg.llm.max_hashtags),
    )


@router.post("/clips", response_model=ClipsResponse)
async def find_clips(
    request: ClipsRequest,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
    cfg: Config = Depends(get_config),
):
    """Find highlight clips in a transcript and enhance them with the LLM."""
    if not request.title or not request.transcript:
        raise HTTPException(status_code=400, detail="Video title and transcript are required")

    max_clips = request.max_clips if request.max_clips is not None else cfg.clips.max_clips
    candidates = extract_clip_candidates(
        request.transcript,
        max_candidates=max_clips,
        total_duration_s=request.duration,
        cfg=cfg,
    )
    if cfg.clips.dedupe_overlaps:
        candidates = enforce_diversity(candidates, cfg.clips.max_overlap_ratio)

    if not candidates:
        return ClipsResponse(message="No viral clip opportunities found in this video")

    logger.info(f"Found {len(candidates)} potential clips")

    try:
        clips = await run_in_threadpool(
            enhance_clips, candidates, request.title, request.transcript, cfg, request.duration
        )
    except Exception as e:
        _raise_for_ai_error(e, "generate clips")

    if request.video_id:
        try:
            await repository.replace_clips(db, user_id, request.video_id, clips)
        except Exception as e:
            logger.error(f"Error saving clips for {request.video_id}: {e}", exc_info=True)
            await db.rollback()

    return ClipsResponse(
        clips=[EnhancedClipResponse(**c.to_dict()) for c in clips],
        total_clips=len(clips),
        high_viral_potential=sum(1 for c in clips if c.viral_potential == HIGH),
        message="Viral clips analyzed and enhanced successfully",
    )


@router.get("", response_model=List[VideoResponse])
async def list_videos(
    limit: Optional[int] = None,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """List the caller's videos with their clips, most recent first."""
    limit = limit or get_settings().history_limit
    videos = await repository.get_user_videos(db, user_id, limit)
    return [repository.video_to_dict(v) for v in videos]


@router.get("/stats", response_model=StatsResponse)
async def video_stats(
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    return await repository.get_video_stats(db, user_id)


@router.get("/{video_id}", response_model=VideoResponse)
async def get_video(
    video_id: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Get a stored video with all generated content."""
    video = await repository.get_video(db, user_id, video_id, with_clips=True)
    if not video:
        raise HTTPException(status_code=404, detail="Video not found")
    return repository.video_to_dict(video)


async def _save_analysis(db: AsyncSession, user_id: str, video_id: str, **analysis) -> None:
    try:
        await repository.update_video_analysis(db, user_id, video_id, **analysis)
        logger.info(f"Saved {', '.join(analysis)} for video {video_id}")
    except Exception as e:
        logger.error(f"Error updating video analysis for {video_id}: {e}", exc_info=True)
        await db.rollback()
