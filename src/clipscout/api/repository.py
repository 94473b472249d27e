"""Persistence of videos, generated analysis and clips, keyed by user."""
import logging
from datetime import datetime
from typing import Dict, List, Optional, Any

from sqlalchemy import select, delete, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from clipscout.api.models import Video, Clip
from clipscout.candidates.models import EnhancedClip

logger = logging.getLogger(__name__)


class VideoNotFoundError(LookupError):
    """Raised when a (user, video) pair has no stored video."""


async def get_video(db: AsyncSession, user_id: str, video_id: str, with_clips: bool = False) -> Optional[Video]:
    query = select(Video).where(Video.user_id == user_id).where(Video.video_id == video_id)
    if with_clips:
        query = query.options(selectinload(Video.clips))
    result = await db.execute(query)
    return result.scalar_one_or_none()


async def save_video_data(
    db: AsyncSession,
    user_id: str,
    youtube_url: str,
    video_id: str,
    title: str,
    description: Optional[str] = None,
    transcript: Optional[str] = None,
    duration: Optional[int] = None,
    thumbnail_url: Optional[str] = None,
) -> Video:
    """Insert or update the video for (user, video_id)."""
    video = await get_video(db, user_id, video_id)
    if video is None:
        video = Video(user_id=user_id, video_id=video_id)
        db.add(video)

    video.youtube_url = youtube_url
    video.title = title
    video.description = description or None
    video.transcript = transcript or None
    video.duration = duration or None
    video.thumbnail_url = thumbnail_url or None
    video.updated_at = datetime.utcnow()

    await db.commit()
    await db.refresh(video)
    return video


async def update_video_analysis(
    db: AsyncSession,
    user_id: str,
    video_id: str,
    summary: Optional[str] = None,
    generated_description: Optional[str] = None,
    keywords: Optional[List[str]] = None,
) -> Video:
    """Store generated content on an existing video; empty values are skipped."""
    video = await get_video(db, user_id, video_id)
    if video is None:
        raise VideoNotFoundError(f"Video not found for YouTube ID: {video_id}")

    if summary:
        video.summary = summary
    if generated_description:
        video.generated_description = generated_description
    if keywords:
        video.keywords = list(keywords)
    video.updated_at = datetime.utcnow()

    await db.commit()
    await db.refresh(video)
    return video


async def replace_clips(
    db: AsyncSession,
    user_id: str,
    video_id: str,
    clips: List[EnhancedClip],
) -> List[Clip]:
    """Replace every stored clip of (user, video_id) with `clips`."""
    video = await get_video(db, user_id, video_id)
    if video is None:
        raise VideoNotFoundError(f"Video not found for YouTube ID: {video_id}")

    await db.execute(
        delete(Clip)
        .where(Clip.user_id == user_id)
        .where(Clip.video_uuid == video.id)
    )

    rows = [
        Clip(
            user_id=user_id,
            video_uuid=video.id,
            video_id=video_id,
            title=clip.improved_title or clip.original_title or "Untitled Clip",
            start_time=clip.start_time,
            end_time=clip.end_time,
            transcript_excerpt=clip.transcript,
            hook_score=clip.hook_score or 0,
        )
        for clip in clips
    ]
    db.add_all(rows)
    video.updated_at = datetime.utcnow()
    await db.commit()

    logger.info(f"Stored {len(rows)} clips for video {video_id} (user {user_id})")
    return rows


async def get_user_videos(db: AsyncSession, user_id: str, limit: int = 20) -> List[Video]:
    """Videos of a user with their clips, most recently updated first."""
    result = await db.execute(
        select(Video)
        .options(selectinload(Video.clips))
        .where(Video.user_id == user_id)
        .order_by(Video.updated_at.desc())
        .limit(limit)
    )
    return list(result.scalars().all())


async def get_video_stats(db: AsyncSession, user_id: str) -> Dict[str, int]:
    videos = await db.execute(select(func.count(Video.id)).where(Video.user_id == user_id))
    clips = await db.execute(select(func.count(Clip.id)).where(Clip.user_id == user_id))
    return {
        "total_videos": videos.scalar_one(),
        "total_clips": clips.scalar_one(),
    }


def clip_to_dict(clip: Clip) -> Dict[str, Any]:
    return {
        "id": clip.id,
        "title": clip.title,
        "start_time": clip.start_time,
        "end_time": clip.end_time,
        "transcript": clip.transcript_excerpt,
        "hook_score": clip.hook_score,
        "created_at": clip.created_at,
    }


def video_to_dict(video: Video) -> Dict[str, Any]:
    """Complete video record with its clips and availability flags."""
    clips = sorted(video.clips, key=lambda c: (-c.hook_score, c.start_time))
    keywords = video.keywords or []
    return {
        "id": video.id,
        "video_id": video.video_id,
        "youtube_url": video.youtube_url,
        "title": video.title,
        "description": video.description,
        "generated_description": video.generated_description,
        "transcript": video.transcript,
        "summary": video.summary,
        "keywords": keywords,
        "duration": video.duration,
        "thumbnail_url": video.thumbnail_url,
        "clips": [clip_to_dict(c) for c in clips],
        "clips_count": len(clips),
        "created_at": video.created_at,
        "updated_at": video.updated_at,
        "has_transcript": bool(video.transcript),
        "has_summary": bool(video.summary),
        "has_generated_description": bool(video.generated_description),
        "has_keywords": bool(keywords),
        "has_clips": bool(clips),
    }
