"""
Clip candidate discovery package.

Modules:
- models: Data models for candidates and enhanced clips
- extractor: Heuristic sentence scoring and fallback chunking
- selection: Viral-potential tiers and optional overlap filtering
- enhancer: Optional LLM enhancement of extracted candidates

Note: To avoid circular imports, import functions directly from submodules:
    from clipscout.candidates.extractor import extract_clip_candidates
    from clipscout.candidates.enhancer import enhance_clips
"""

# Only export models at package level (no circular import risk)
from clipscout.candidates.models import (
    ClipCandidate,
    EnhancedClip,
)

__all__ = [
    "ClipCandidate",
    "EnhancedClip",
]
