"""Data models for the clip candidate workflow."""
from __future__ import annotations
from dataclasses import dataclass, field, asdict
from typing import List
import json
import os


@dataclass
class ClipCandidate:
    """Heuristic clip candidate proposed from a transcript."""
    title: str
    start_time: float
    end_time: float
    source_text: str
    hook_score: int = 0
    reasons: List[str] = field(default_factory=list)

    @property
    def duration(self) -> float:
        return self.end_time - self.start_time

    @property
    def reason(self) -> str:
        """Reasons joined into a single explanation string."""
        return ", ".join(self.reasons)

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class EnhancedClip:
    """Clip candidate after AI (or fallback) enhancement."""
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

    def to_dict(self) -> dict:
        return asdict(self)


def save_candidates(
    candidates: List[ClipCandidate],
    output_path: str
) -> None:
    """Save candidates to a JSON file."""
    os.makedirs(os.path.dirname(output_path) or ".", exist_ok=True)

    data = {
        "candidates": [c.to_dict() for c in candidates]
    }

    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
