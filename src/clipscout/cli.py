import argparse
import json
import logging
import sys
from typing import List, Optional

from clipscout.config import Config
from clipscout.candidates.extractor import extract_clip_candidates
from clipscout.candidates.enhancer import enhance_clips
from clipscout.candidates.models import save_candidates
from clipscout.candidates.selection import enforce_diversity
from clipscout.llm.client import detect_llm_availability
from clipscout.models.transcript import Transcript
from clipscout.transcript.youtube import extract_video_id, fetch_transcript

logger = logging.getLogger(__name__)


def setup_logging(debug: bool):
    level = logging.DEBUG if debug else logging.INFO
    formatter = logging.Formatter('%(asctime)s [%(levelname)s] %(name)s: %(message)s', datefmt='%Y-%m-%d %H:%M:%S')

    app_logger = logging.getLogger("clipscout")
    app_logger.setLevel(level)
    app_logger.propagate = False

    if app_logger.hasHandlers():
        app_logger.handlers.clear()

    # Console handler on stderr, stdout carries the JSON result
    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(level)
    ch.setFormatter(formatter)
    app_logger.addHandler(ch)

    root = logging.getLogger()
    root.setLevel(logging.WARNING)


def load_transcript_file(path: str) -> Transcript:
    """Load a plain-text transcript, or a JSON one saved by Transcript.save."""
    if path.endswith(".json"):
        return Transcript.load(path)
    with open(path, "r", encoding="utf-8") as f:
        return Transcript(video_id="", text=f.read())


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Find short-form clip candidates in a video transcript")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--transcript", type=str, help="Transcript file (.txt or .json)")
    source.add_argument("--url", type=str, help="YouTube URL to fetch captions from")
    parser.add_argument("--duration", type=float, help="Video duration in seconds")
    parser.add_argument("--max-clips", type=int, help="Maximum number of candidates")
    parser.add_argument("--dedupe", action="store_true", help="Drop overlapping candidates")
    parser.add_argument("--enhance", action="store_true", help="Enhance candidates with the LLM")
    parser.add_argument("--title", type=str, default="", help="Video title used for LLM enhancement")
    parser.add_argument("--llm-model", type=str, help="Override LLM model")
    parser.add_argument("--output", type=str, help="Also write candidates to this JSON file")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    cfg = Config()
    cfg.apply_env_overrides()

    if args.debug: cfg.debug = True
    if args.llm_model: cfg.llm.model = args.llm_model
    if args.dedupe: cfg.clips.dedupe_overlaps = True
    setup_logging(cfg.debug)

    if args.url:
        video_id = extract_video_id(args.url)
        if not video_id:
            logger.error(f"Invalid YouTube URL: {args.url}")
            return 2
        transcript = fetch_transcript(video_id, cfg.transcript.languages)
    else:
        transcript = load_transcript_file(args.transcript)

    candidates = extract_clip_candidates(
        transcript.text,
        timed_segments=transcript.segments,
        max_candidates=args.max_clips,
        total_duration_s=args.duration,
        cfg=cfg,
    )
    if cfg.clips.dedupe_overlaps:
        candidates = enforce_diversity(candidates, cfg.clips.max_overlap_ratio)

    if args.output:
        save_candidates(candidates, args.output)
        logger.info(f"Saved {len(candidates)} candidates to '{args.output}'")

    if args.enhance:
        if not detect_llm_availability():
            logger.warning("--enhance specified but OPENAI_API_KEY missing. Using heuristic titles.")
        clips = enhance_clips(candidates, args.title, transcript.text, cfg, args.duration)
        result = {"clips": [c.to_dict() for c in clips]}
    else:
        result = {"candidates": [c.to_dict() for c in candidates]}

    json.dump(result, sys.stdout, indent=2, ensure_ascii=False)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
