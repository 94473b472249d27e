"""LLM enhancement of extracted clip candidates.

This module optionally sends the heuristic candidates to an LLM that
rewrites titles and adds a posting strategy. The workflow must work
without it: when no API key is configured, or when the answer cannot be
parsed, the enhanced clips are derived directly from the candidates.
"""
from __future__ import annotations
import json
import logging
import re
from typing import Any, Dict, List, Optional

from clipscout.config import Config
from clipscout.candidates.models import ClipCandidate, EnhancedClip
from clipscout.candidates.selection import viral_potential
from clipscout.llm.client import complete, detect_llm_availability
from clipscout.utils.system import format_duration, truncate_text

logger = logging.getLogger(__name__)


ENHANCE_SYSTEM_PROMPT = """You are a short-form video strategist. You improve clip suggestions for YouTube Shorts, TikTok and Reels. Keep the suggested time ranges unless a small adjustment clearly improves the clip. Answer with JSON only."""

ENHANCE_USER_PROMPT_TEMPLATE = """Based on this YouTube video content, improve these clip suggestions for YouTube Shorts and viral content:

Video Title: "{title}"
{duration_line}
Transcript excerpt: "{transcript_excerpt}"

Clip suggestions:
{clip_descriptions}

Return JSON with this exact schema, one entry per suggestion, in the same order:
{{
  "clips": [
    {{
      "improvedTitle": "catchy title",
      "startTime": number,
      "endTime": number,
      "duration": number,
      "hookScore": number,
      "viralPotential": "HIGH" | "MEDIUM" | "LOW",
      "reason": "why this clip works",
      "strategy": "posting tips and hashtags",
      "transcript": "actual content from the clip for preview"
    }}
  ]
}}"""

NUMBERED_LINE_RE = re.compile(r"^\d+\.\s*")


def enhance_clips(
    candidates: List[ClipCandidate],
    title: str,
    transcript: str,
    cfg: Config,
    duration: Optional[float] = None,
    client: Optional[Any] = None
) -> List[EnhancedClip]:
    """
    Improve candidate titles and strategy with an LLM.

    Args:
        candidates: Candidates from the extractor, best first
        title: Video title
        transcript: Full transcript text
        cfg: Configuration with LLM settings
        duration: Video duration in seconds, if known
        client: Optional pre-built OpenAI client

    Returns:
        Enhanced clips, one per returned LLM entry (or per candidate on fallback)

    Raises:
        AIQuotaExceededError: if the provider reports a quota/rate limit
    """
    if not candidates:
        return []

    if client is None and not detect_llm_availability():
        logger.warning("OPENAI_API_KEY not set, skipping LLM enhancement")
        return fallback_enhanced_clips(candidates, cfg)

    prompt = build_enhance_prompt(candidates, title, transcript, cfg, duration)

    logger.info(f"Enhancing {len(candidates)} clip candidates with LLM...")
    raw = complete(
        prompt,
        cfg.llm,
        cfg.llm.clips_temperature,
        system_prompt=ENHANCE_SYSTEM_PROMPT,
        json_mode=True,
        client=client,
    )

    try:
        clips = parse_enhanced_clips(raw, candidates, cfg)
    except (ValueError, TypeError, AttributeError) as e:
        logger.warning(f"Failed to parse LLM response as JSON, using fallback method: {e}")
        clips = fallback_enhanced_clips(candidates, cfg, extract_numbered_titles(raw))

    logger.info(f"Enhanced {len(clips)} clips")
    return clips


def build_enhance_prompt(
    candidates: List[ClipCandidate],
    title: str,
    transcript: str,
    cfg: Config,
    duration: Optional[float] = None
) -> str:
    duration_line = f"Video Duration: {format_duration(duration)}" if duration else ""
    return ENHANCE_USER_PROMPT_TEMPLATE.format(
        title=title,
        duration_line=duration_line,
        transcript_excerpt=truncate_text(transcript, cfg.llm.clips_transcript_chars),
        clip_descriptions=format_candidates_for_llm(candidates),
    )


def format_candidates_for_llm(candidates: List[ClipCandidate]) -> str:
    return "\n\n".join(
        f'{i + 1}. "{c.title}" ({c.start_time:g}s-{c.end_time:g}s) - Score: {c.hook_score}\n'
        f"  Reason: {c.reason}\n"
        f'  Content: "{c.source_text[:150]}..."'
        for i, c in enumerate(candidates)
    )


def extract_json_text(text: str) -> str:
    """Return the JSON payload of an LLM answer, unwrapping code fences."""
    match = re.search(r"```json\s*([\s\S]*?)\s*```", text)
    if match:
        return match.group(1)
    match = re.search(r"```\s*([\s\S]*?)\s*```", text)
    if match:
        return match.group(1)
    return text.strip()


def parse_enhanced_clips(
    raw: str,
    candidates: List[ClipCandidate],
    cfg: Config
) -> List[EnhancedClip]:
    """
    Parse the LLM JSON answer into enhanced clips.

    The preview transcript always comes from the matching candidate when
    there is one; missing fields are filled from the candidate.

    Raises:
        ValueError: if the answer is not a JSON object with a "clips" list
    """
    data = json.loads(extract_json_text(raw))
    if not isinstance(data, dict) or not isinstance(data.get("clips"), list):
        raise ValueError("LLM answer has no 'clips' list")

    clips = []
    for index, item in enumerate(data["clips"]):
        if not isinstance(item, dict):
            continue
        source = candidates[index] if index < len(candidates) else None
        clips.append(_merge_llm_clip(item, source, cfg))
    return clips


def fallback_enhanced_clips(
    candidates: List[ClipCandidate],
    cfg: Config,
    improved_titles: Optional[List[str]] = None
) -> List[EnhancedClip]:
    """Derive enhanced clips directly from candidates."""
    improved_titles = improved_titles or []
    clips = []
    for index, c in enumerate(candidates):
        improved = improved_titles[index] if index < len(improved_titles) else c.title
        clips.append(EnhancedClip(
            original_title=c.title,
            improved_title=improved or c.title,
            start_time=c.start_time,
            end_time=c.end_time,
            duration=c.end_time - c.start_time,
            hook_score=c.hook_score,
            viral_potential=viral_potential(c.hook_score, cfg.clips),
            reason=c.reason,
            strategy=cfg.clips.default_strategy,
            transcript=c.source_text,
        ))
    return clips


def extract_numbered_titles(text: str) -> List[str]:
    """Collect `1. Title` style lines from a free-form answer."""
    return [
        NUMBERED_LINE_RE.sub("", line.strip()).strip()
        for line in text.splitlines()
        if NUMBERED_LINE_RE.match(line.strip())
    ]


def _merge_llm_clip(
    item: Dict[str, Any],
    source: Optional[ClipCandidate],
    cfg: Config
) -> EnhancedClip:
    def pick(*keys, default=None):
        for key in keys:
            if item.get(key) not in (None, ""):
                return item[key]
        return default

    start = float(pick("startTime", "start_time", default=source.start_time if source else 0))
    end = float(pick("endTime", "end_time", default=source.end_time if source else start))
    hook_score = int(pick("hookScore", "hook_score", default=source.hook_score if source else 0))
    original_title = source.title if source else str(pick("title", default=""))

    potential = str(pick("viralPotential", "viral_potential", default="")).upper()
    if potential not in ("HIGH", "MEDIUM", "LOW"):
        potential = viral_potential(hook_score, cfg.clips)

    transcript = source.source_text if source else str(pick("transcript", default=""))

    return EnhancedClip(
        original_title=original_title,
        improved_title=str(pick("improvedTitle", "improved_title", "title", default=original_title)),
        start_time=start,
        end_time=end,
        duration=float(pick("duration", default=end - start)),
        hook_score=hook_score,
        viral_potential=potential,
        reason=str(pick("reason", default=source.reason if source else "")),
        strategy=str(pick("strategy", default=cfg.clips.default_strategy)),
        transcript=transcript,
    )
