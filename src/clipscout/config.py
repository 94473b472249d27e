from __future__ import annotations
import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from dataclasses import dataclass, field
from typing import Tuple


# Phrases that tend to open an attention-grabbing moment
DEFAULT_HOOK_PHRASES: Tuple[str, ...] = (
    "but wait", "however", "surprisingly", "shocking", "unbelievable",
    "secret", "hack", "tip", "mistake", "wrong", "truth", "revealed",
    "never", "always", "everyone", "nobody", "first time", "last time",
    "before", "after", "transform", "change", "difference", "compare",
    "vs", "versus", "better", "worse", "best", "worst", "ultimate",
    "how to", "why", "what if", "stop", "start", "listen",
)

DEFAULT_EMOTIONAL_WORDS: Tuple[str, ...] = (
    "amazing", "incredible", "insane", "crazy", "mind-blowing",
    "shocking", "surprising", "unbelievable", "wow", "omg",
    "scary", "terrifying", "beautiful", "wonderful", "love", "hate",
)


@dataclass
class ExtractorConfig:
    """Heuristic clip candidate extraction parameters."""
    hook_phrases: Tuple[str, ...] = DEFAULT_HOOK_PHRASES
    emotional_words: Tuple[str, ...] = DEFAULT_EMOTIONAL_WORDS
    hook_phrase_points: int = 2
    emotional_word_points: int = 1
    question_points: int = 1
    number_points: int = 1
    min_sentence_chars: int = 20      # shorter units are never scored
    max_candidates: int = 6
    min_scored_candidates: int = 2    # below this, fall back to chunking
    clip_length_s: float = 45.0       # nominal length of a scored candidate
    max_chunk_s: float = 60.0         # cap on a fallback chunk
    default_duration_s: float = 600.0
    title_max_chars: int = 100
    chunk_title_chars: int = 50


@dataclass
class ClipsConfig:
    """Clip-finding workflow parameters."""
    max_clips: int = 8                # cap used by the clips endpoint
    dedupe_overlaps: bool = False     # optional post-processing pass
    max_overlap_ratio: float = 0.35
    high_potential_score: int = 4
    medium_potential_score: int = 3
    default_strategy: str = "Post during peak hours (7-9 PM), use trending hashtags"


@dataclass
class LLMConfig:
    """External LLM configuration for generated content."""
    provider: str = "openai"
    model: str = "gpt-4o-mini"
    max_tokens: int = 2000
    clips_temperature: float = 0.9
    summary_temperature: float = 0.7
    description_temperature: float = 0.7
    keywords_temperature: float = 0.6
    clips_transcript_chars: int = 8000
    summary_transcript_chars: int = 10000
    description_transcript_chars: int = 4000
    keywords_transcript_chars: int = 6000
    max_keywords: int = 25
    max_hashtags: int = 10


@dataclass
class TranscriptConfig:
    """Caption lookup settings."""
    languages: Tuple[str, ...] = ("en", "en-US")
    response_preview_chars: int = 10000


@dataclass
class Config:
    """Main configuration container combining all settings."""
    extractor: ExtractorConfig = field(default_factory=ExtractorConfig)
    clips: ClipsConfig = field(default_factory=ClipsConfig)
    llm: LLMConfig = field(default_factory=LLMConfig)
    transcript: TranscriptConfig = field(default_factory=TranscriptConfig)
    debug: bool = False               # --debug flag for verbose logging

    def apply_env_overrides(self) -> None:
        """Pick up optional overrides from the environment."""
        model = os.getenv("CLIPSCOUT_LLM_MODEL")
        if model:
            self.llm.model = model
        if os.getenv("CLIPSCOUT_DEDUPE_OVERLAPS", "").lower() in ("1", "true", "yes"):
            self.clips.dedupe_overlaps = True
