"""YouTube URL parsing and caption lookup."""
import re
import logging
from typing import Iterable, List, Optional, Sequence

from youtube_transcript_api import CouldNotRetrieveTranscript, YouTubeTranscriptApi

from clipscout.models.transcript import TimedSegment, Transcript

logger = logging.getLogger(__name__)


VIDEO_ID_PATTERNS = [
    re.compile(r"(?:https?://)?(?:www\.)?youtube\.com/watch\?v=([^&]+)"),
    re.compile(r"(?:https?://)?(?:www\.)?youtu\.be/([^?]+)"),
    re.compile(r"(?:https?://)?(?:www\.)?youtube\.com/embed/([^?]+)"),
    re.compile(r"(?:https?://)?(?:www\.)?youtube\.com/v/([^?]+)"),
]


class TranscriptUnavailableError(RuntimeError):
    """Raised when a video has no usable captions."""


def extract_video_id(url: str) -> Optional[str]:
    """Extract the video ID from the common YouTube URL formats."""
    if not url:
        return None
    for pattern in VIDEO_ID_PATTERNS:
        match = pattern.search(url)
        if match:
            return match.group(1)
    return None


def is_valid_youtube_url(url: str) -> bool:
    return extract_video_id(url) is not None


def fetch_transcript(
    video_id: str,
    languages: Sequence[str] = ("en", "en-US"),
    api: Optional[YouTubeTranscriptApi] = None
) -> Transcript:
    """
    Fetch the captions of a video.

    Tries the preferred languages first, then any transcript the video has.

    Raises:
        TranscriptUnavailableError: if no captions can be retrieved
    """
    api = api or YouTubeTranscriptApi()
    logger.info(f"Fetching transcript for video: {video_id}")

    try:
        fetched = api.fetch(video_id, languages=list(languages))
    except CouldNotRetrieveTranscript as e:
        logger.info(f"No transcript in {list(languages)} for {video_id}, trying any language: {e}")
        fetched = _fetch_any_language(api, video_id)

    segments = _to_segments(fetched)
    text = " ".join(s.text for s in segments if s.text and s.text.strip())
    text = " ".join(text.split())
    if not text:
        raise TranscriptUnavailableError(f"Transcript for {video_id} is empty")

    language = getattr(fetched, "language_code", None)
    logger.info(f"Transcript fetched: {len(text)} characters, {len(segments)} segments")
    return Transcript(video_id=video_id, text=text, segments=segments, language=language)


def _fetch_any_language(api: YouTubeTranscriptApi, video_id: str):
    try:
        for transcript in api.list(video_id):
            return transcript.fetch()
    except CouldNotRetrieveTranscript as e:
        raise TranscriptUnavailableError(
            "Failed to fetch video transcript. The video may not have captions available."
        ) from e
    raise TranscriptUnavailableError(f"No captions found for {video_id}")


def _to_segments(snippets: Iterable) -> List[TimedSegment]:
    segments = []
    for snippet in snippets:
        segments.append(TimedSegment(
            offset_ms=float(snippet.start) * 1000,
            text=snippet.text,
            duration_ms=float(snippet.duration) * 1000,
        ))
    return segments
