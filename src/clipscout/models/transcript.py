"""Transcript data models shared by the caption lookup and the extractor."""
from __future__ import annotations
from dataclasses import dataclass, field, asdict
from typing import Any, List, Mapping, Optional, Union
import json
import os


@dataclass
class TimedSegment:
    """Caption line with its offset from the start of the video."""
    offset_ms: float
    text: str
    duration_ms: Optional[float] = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "TimedSegment":
        """Build from a dict using either snake_case or camelCase keys."""
        offset = data.get("offset_ms", data.get("offsetMillis", data.get("offset", 0)))
        duration = data.get("duration_ms", data.get("durationMillis"))
        return cls(
            offset_ms=float(offset or 0),
            text=str(data.get("text", "")),
            duration_ms=float(duration) if duration is not None else None,
        )


SegmentLike = Union[TimedSegment, Mapping[str, Any]]


def coerce_segments(segments: Optional[List[SegmentLike]]) -> List[TimedSegment]:
    """Normalize a list of segments or segment dicts."""
    if not segments:
        return []
    return [
        s if isinstance(s, TimedSegment) else TimedSegment.from_mapping(s)
        for s in segments
    ]


@dataclass
class Transcript:
    """
    Complete transcript of a video.

    `text` is the whitespace-collapsed concatenation of all segment texts.
    """
    video_id: str
    text: str
    segments: List[TimedSegment] = field(default_factory=list)
    language: Optional[str] = None

    @property
    def duration_s(self) -> float:
        """Approximate duration from the last segment (0 when unknown)."""
        if not self.segments:
            return 0.0
        last = self.segments[-1]
        return (last.offset_ms + (last.duration_ms or 0.0)) / 1000.0

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)

    def save(self, path: str) -> None:
        """Save transcript to JSON file."""
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2, ensure_ascii=False)

    @classmethod
    def load(cls, path: str) -> "Transcript":
        """Load transcript from JSON file."""
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)

        return cls(
            video_id=data.get("video_id", ""),
            text=data.get("text", ""),
            segments=coerce_segments(data.get("segments", [])),
            language=data.get("language"),
        )
