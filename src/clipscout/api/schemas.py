from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field


# --- Requests ---

class TranscriptRequest(BaseModel):
    """Request body for transcript extraction."""
    url: str


class SummaryRequest(BaseModel):
    title: str = ""
    transcript: str = ""
    description: Optional[str] = None
    video_id: Optional[str] = None


class DescriptionRequest(BaseModel):
    title: str = ""
    transcript: Optional[str] = None
    summary: Optional[str] = None
    description: Optional[str] = None
    video_id: Optional[str] = None


class KeywordsRequest(BaseModel):
    title: str = ""
    transcript: Optional[str] = None
    summary: Optional[str] = None
    video_id: Optional[str] = None


class ClipsRequest(BaseModel):
    """Request body for clip finding."""
    title: str = ""
    transcript: str = ""
    duration: Optional[float] = None
    video_id: Optional[str] = None
    max_clips: Optional[int] = Field(default=None, ge=0, le=50)


# --- Responses ---

class VideoMetadata(BaseModel):
    title: str
    description: str = ""
    duration: int = 0
    thumbnail: str = ""
    author: str = "Unknown"
    view_count: int = 0
    upload_date: str = ""


class TranscriptResponse(BaseModel):
    video_id: str
    youtube_url: str
    metadata: VideoMetadata
    transcript: str
    full_transcript_length: int
    full_transcript: str
    language: Optional[str] = None


class SummaryResponse(BaseModel):
    summary: str
    word_count: int
    character_count: int


class DescriptionResponse(BaseModel):
    description: str
    character_count: int


class KeywordsResponse(BaseModel):
    keywords: List[str]
    keyword_count: int
    formatted_keywords: str
    hashtags: List[str]


class EnhancedClipResponse(BaseModel):
    original_title: str
    improved_title: str
    start_time: float
    end_time: float
    duration: float
    hook_score: int
    viral_potential: str
    reason: str = ""
    strategy: str = ""
    transcript: str = ""


class ClipsResponse(BaseModel):
    clips: List[EnhancedClipResponse] = []
    total_clips: int = 0
    high_viral_potential: int = 0
    message: str = ""


class StoredClipResponse(BaseModel):
    id: str
    title: str
    start_time: float
    end_time: float
    transcript: Optional[str] = None
    hook_score: int = 0
    created_at: datetime


class VideoResponse(BaseModel):
    """Complete stored video with generated content and clips."""
    id: str
    video_id: str
    youtube_url: str
    title: str
    description: Optional[str] = None
    generated_description: Optional[str] = None
    transcript: Optional[str] = None
    summary: Optional[str] = None
    keywords: List[str] = []
    duration: Optional[int] = None
    thumbnail_url: Optional[str] = None
    clips: List[StoredClipResponse] = []
    clips_count: int = 0
    created_at: datetime
    updated_at: datetime
    has_transcript: bool = False
    has_summary: bool = False
    has_generated_description: bool = False
    has_keywords: bool = False
    has_clips: bool = False


class StatsResponse(BaseModel):
    total_videos: int
    total_clips: int
