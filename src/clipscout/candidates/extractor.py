"""Heuristic clip candidate extractor.

Scans a transcript sentence by sentence and proposes time-ranged clip
candidates with an additive hook score.

Scoring (per sentence, lower-cased for matching only):
- +2 for every hook phrase found as a substring
- +1 for every emotional word found as a substring
- +1 if the sentence contains a question mark
- +1 if the sentence contains a digit

Any sentence scoring at least 1 becomes a candidate whose start time is a
linear estimate over the sentence index. When fewer than two candidates
come out of scoring, the video is instead cut into equal time chunks.

Matching is plain substring matching, so short phrases such as "vs" also
match inside longer words.
"""
from __future__ import annotations
import logging
import math
import re
from typing import List, Optional, Tuple

from clipscout.config import Config, ExtractorConfig
from clipscout.candidates.models import ClipCandidate
from clipscout.models.transcript import SegmentLike, coerce_segments

logger = logging.getLogger(__name__)


SENTENCE_RE = re.compile(r"[^.!?]+[.!?]+")
TERMINATORS_RE = re.compile(r"[.!?]+")
DIGIT_RE = re.compile(r"[0-9]")

QUESTION_REASON = "Contains question"
NUMBERS_REASON = "Contains numbers/stats"
FALLBACK_REASON = "Segmented based on timing"
ELLIPSIS = "..."


def extract_clip_candidates(
    transcript: Optional[str],
    timed_segments: Optional[List[SegmentLike]] = None,
    max_candidates: Optional[int] = None,
    total_duration_s: Optional[float] = None,
    cfg: Optional[Config] = None
) -> List[ClipCandidate]:
    """
    Propose ranked clip candidates from a transcript.

    Args:
        transcript: Full spoken text of the video (None is treated as empty)
        timed_segments: Optional caption segments, only used to estimate
            the duration when total_duration_s is missing
        max_candidates: Upper bound on returned candidates
        total_duration_s: Video duration in seconds, if known
        cfg: Configuration (optional, uses defaults if None)

    Returns:
        Candidates sorted by hook score descending, at most max_candidates
    """
    ext_cfg = cfg.extractor if cfg else ExtractorConfig()
    if max_candidates is None:
        max_candidates = ext_cfg.max_candidates

    if max_candidates <= 0:
        return []

    sentences = split_sentences(transcript or "", ext_cfg.min_sentence_chars)
    duration = resolve_duration(total_duration_s, timed_segments, ext_cfg.default_duration_s)

    candidates = []
    for index, sentence in enumerate(sentences):
        score, reasons = score_sentence(sentence, ext_cfg)
        if score < 1:
            continue

        start_time = math.floor((index / len(sentences)) * duration)
        end_time = min(start_time + ext_cfg.clip_length_s, duration)

        candidates.append(ClipCandidate(
            title=truncate_title(sentence, ext_cfg.title_max_chars),
            start_time=start_time,
            end_time=end_time,
            source_text=sentence,
            hook_score=score,
            reasons=reasons,
        ))

    logger.debug(f"Scored {len(sentences)} sentences into {len(candidates)} candidates")

    if len(candidates) < ext_cfg.min_scored_candidates:
        logger.debug(
            f"Only {len(candidates)} scored candidates, chunking {duration:.1f}s "
            f"into {max_candidates} segments"
        )
        candidates = build_fallback_candidates(sentences, duration, max_candidates, ext_cfg)

    # sorted() is stable, ties keep transcript order
    candidates = sorted(candidates, key=lambda c: c.hook_score, reverse=True)
    return candidates[:max_candidates]


def split_sentences(text: str, min_chars: int = 20) -> List[str]:
    """
    Split text into trimmed sentence-like units.

    Units keep their terminators. Text without any terminated unit is split
    on the terminator characters instead. Units shorter than min_chars are
    dropped.
    """
    units = SENTENCE_RE.findall(text)
    if not units:
        units = TERMINATORS_RE.split(text)

    sentences = [u.strip() for u in units]
    return [s for s in sentences if len(s) >= min_chars]


def resolve_duration(
    total_duration_s: Optional[float],
    timed_segments: Optional[List[SegmentLike]],
    default_s: float = 600.0
) -> float:
    """Pick the duration used for time estimates."""
    if _is_usable_duration(total_duration_s) and total_duration_s:
        return float(total_duration_s)

    segments = coerce_segments(timed_segments)
    if segments:
        derived = segments[-1].offset_ms / 1000
        if _is_usable_duration(derived):
            return derived

    return default_s


def score_sentence(sentence: str, cfg: ExtractorConfig) -> Tuple[int, List[str]]:
    """
    Compute the additive hook score of one sentence.

    Returns:
        (score, reasons) with one reason per matched signal, in the order
        hook phrases, emotional words, question, numbers
    """
    lower = sentence.lower()
    score = 0
    reasons = []

    for phrase in cfg.hook_phrases:
        if phrase in lower:
            score += cfg.hook_phrase_points
            reasons.append(f'Contains hook word: "{phrase}"')

    for word in cfg.emotional_words:
        if word in lower:
            score += cfg.emotional_word_points
            reasons.append(f'Emotional content: "{word}"')

    if "?" in sentence:
        score += cfg.question_points
        reasons.append(QUESTION_REASON)

    if DIGIT_RE.search(sentence):
        score += cfg.number_points
        reasons.append(NUMBERS_REASON)

    return score, reasons


def build_fallback_candidates(
    sentences: List[str],
    duration: float,
    count: int,
    cfg: ExtractorConfig
) -> List[ClipCandidate]:
    """
    Cut the video into `count` equal time chunks.

    Each chunk is labelled with the sentence at the same relative position
    in the transcript, or "Segment N" when there is none.
    """
    step = math.floor(duration / count)
    chunk_length = min(cfg.max_chunk_s, duration / count)

    candidates = []
    for i in range(count):
        start_time = i * step
        end_time = min(start_time + chunk_length, duration)

        sentence_index = len(sentences)
        if duration > 0:
            sentence_index = math.floor((start_time / duration) * len(sentences))
        if sentence_index < len(sentences):
            sentence = sentences[sentence_index]
        else:
            sentence = f"Segment {i + 1}"

        candidates.append(ClipCandidate(
            title=f"Part {i + 1}: {sentence[:cfg.chunk_title_chars]}{ELLIPSIS}",
            start_time=start_time,
            end_time=end_time,
            source_text=sentence,
            hook_score=1,
            reasons=[FALLBACK_REASON],
        ))

    return candidates


def truncate_title(text: str, max_chars: int = 100) -> str:
    """Cut text to max_chars, marking the cut with an ellipsis."""
    if len(text) > max_chars:
        return text[:max_chars] + ELLIPSIS
    return text


def _is_usable_duration(value: Optional[float]) -> bool:
    if value is None or isinstance(value, bool):
        return False
    try:
        value = float(value)
    except (TypeError, ValueError):
        return False
    return math.isfinite(value) and value >= 0
