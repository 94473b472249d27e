"""YouTube video metadata lookup using yt-dlp (no download)."""
import logging
from typing import Any, Dict

from yt_dlp import YoutubeDL
from yt_dlp.utils import DownloadError

logger = logging.getLogger(__name__)


class VideoMetadataError(RuntimeError):
    """Raised when metadata cannot be fetched (private, removed, ...)."""


def get_ydl_opts() -> Dict[str, Any]:
    """Build yt-dlp options for a metadata-only lookup."""
    return {
        "quiet": True,
        "no_warnings": True,
        "skip_download": True,
        "retries": 3,
    }


def get_video_info(url: str) -> Dict[str, Any]:
    """
    Get video metadata without downloading.

    Args:
        url: Video URL

    Returns:
        Dict with title, description, duration, thumbnail, author,
        view_count and upload_date

    Raises:
        VideoMetadataError: if yt-dlp cannot extract the video
    """
    try:
        with YoutubeDL(get_ydl_opts()) as ydl:
            logger.info(f"Fetching metadata for: {url}")
            info = ydl.extract_info(url, download=False)
    except DownloadError as e:
        logger.error(f"Failed to get video info: {e}")
        raise VideoMetadataError(str(e)) from e

    if not info:
        raise VideoMetadataError(f"No metadata returned for {url}")

    upload_date = info.get("upload_date") or ""
    if len(upload_date) == 8:
        upload_date = f"{upload_date[:4]}-{upload_date[4:6]}-{upload_date[6:]}"

    return {
        "title": info.get("title", "Unknown"),
        "description": info.get("description") or "",
        "duration": int(info.get("duration") or 0),
        "thumbnail": info.get("thumbnail") or "",
        "author": info.get("uploader") or "Unknown",
        "view_count": int(info.get("view_count") or 0),
        "upload_date": upload_date,
    }
