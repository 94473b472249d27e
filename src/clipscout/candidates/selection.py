"""Post-processing of extracted clip candidates.

This module is kept separate from the extractor: the extractor never
merges or drops overlapping candidates. Callers that need distinct clips
can run `enforce_diversity` on its output.

- viral_potential: HIGH/MEDIUM/LOW tier from a hook score
- enforce_diversity: drop candidates overlapping a higher-ranked one
"""
from __future__ import annotations
import logging
from typing import List, Optional

from clipscout.config import ClipsConfig
from clipscout.candidates.models import ClipCandidate

logger = logging.getLogger(__name__)


HIGH = "HIGH"
MEDIUM = "MEDIUM"
LOW = "LOW"


def viral_potential(hook_score: int, cfg: Optional[ClipsConfig] = None) -> str:
    """Map a hook score to a viral-potential tier."""
    cfg = cfg or ClipsConfig()
    if hook_score >= cfg.high_potential_score:
        return HIGH
    if hook_score >= cfg.medium_potential_score:
        return MEDIUM
    return LOW


def compute_overlap_ratio(
    start1: float, end1: float,
    start2: float, end2: float
) -> float:
    """
    Compute overlap ratio between two time ranges.

    Returns the overlap duration divided by the shorter range duration.
    """
    overlap_start = max(start1, start2)
    overlap_end = min(end1, end2)
    overlap_duration = max(overlap_end - overlap_start, 0)

    if overlap_duration == 0:
        return 0.0

    duration1 = end1 - start1
    duration2 = end2 - start2
    min_duration = max(min(duration1, duration2), 0.001)

    return overlap_duration / min_duration


def enforce_diversity(
    candidates: List[ClipCandidate],
    max_overlap: float = 0.35
) -> List[ClipCandidate]:
    """
    Filter candidates so that no two overlap by more than max_overlap.

    Args:
        candidates: Candidates sorted by hook score descending
        max_overlap: Maximum allowed overlap ratio

    Returns:
        Filtered list, order preserved
    """
    diverse = []

    for candidate in candidates:
        has_conflict = False
        for selected in diverse:
            overlap = compute_overlap_ratio(
                candidate.start_time, candidate.end_time,
                selected.start_time, selected.end_time
            )
            if overlap > max_overlap:
                has_conflict = True
                break

        if not has_conflict:
            diverse.append(candidate)

    if len(diverse) < len(candidates):
        logger.info(f"Dropped {len(candidates) - len(diverse)} overlapping candidates")

    return diverse
