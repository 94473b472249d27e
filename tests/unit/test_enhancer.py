import json

import httpx
import openai
import pytest

from clipscout.config import Config
from clipscout.candidates.enhancer import (
    enhance_clips,
    extract_json_text,
    extract_numbered_titles,
    parse_enhanced_clips,
)
from clipscout.candidates.extractor import extract_clip_candidates
from clipscout.llm.client import AIQuotaExceededError


TRANSCRIPT = (
    "Why is this 1 secret so amazing? "
    "Here is the biggest mistake people make. "
    "We walked to the shop and bought some bread. "
    "But wait, there's even more to this story."
)


@pytest.fixture
def candidates():
    return extract_clip_candidates(TRANSCRIPT, max_candidates=3, total_duration_s=120)


def _llm_answer(n):
    return {
        "clips": [
            {
                "improvedTitle": f"Better title {i + 1}",
                "startTime": i * 10,
                "endTime": i * 10 + 30,
                "duration": 30,
                "hookScore": 5,
                "viralPotential": "high",
                "reason": "Strong hook",
                "strategy": "Post at noon",
                "transcript": "made up by the model",
            }
            for i in range(n)
        ]
    }


def test_enhance_parses_json_answer(candidates, fake_llm):
    client = fake_llm(json.dumps(_llm_answer(3)))

    clips = enhance_clips(candidates, "My video", TRANSCRIPT, Config(), duration=120, client=client)

    assert [c.improved_title for c in clips] == ["Better title 1", "Better title 2", "Better title 3"]
    assert clips[0].original_title == candidates[0].title
    assert clips[0].viral_potential == "HIGH"
    assert clips[1].start_time == 10
    # Preview text always comes from the transcript itself
    assert [c.transcript for c in clips] == [c.source_text for c in candidates]

    params = client.completions.calls[0]
    assert params["response_format"] == {"type": "json_object"}
    assert params["temperature"] == 0.9
    assert "My video" in params["messages"][-1]["content"]
    assert "Video Duration: 2:00" in params["messages"][-1]["content"]


def test_enhance_accepts_fenced_json(candidates, fake_llm):
    answer = "Here you go:\n```json\n" + json.dumps(_llm_answer(1)) + "\n```"

    clips = enhance_clips(candidates, "My video", TRANSCRIPT, Config(), client=fake_llm(answer))

    assert len(clips) == 1
    assert clips[0].improved_title == "Better title 1"


def test_enhance_falls_back_to_numbered_titles(candidates, fake_llm):
    answer = "1. First catchy title\n2. Second catchy title\nsomething else"

    clips = enhance_clips(candidates, "My video", TRANSCRIPT, Config(), client=fake_llm(answer))

    assert len(clips) == len(candidates)
    assert clips[0].improved_title == "First catchy title"
    assert clips[1].improved_title == "Second catchy title"
    assert clips[2].improved_title == candidates[2].title
    assert clips[0].strategy == Config().clips.default_strategy
    assert clips[0].hook_score == candidates[0].hook_score


def test_enhance_without_api_key_uses_candidates(candidates, no_api_key):
    clips = enhance_clips(candidates, "My video", TRANSCRIPT, Config())

    assert [c.improved_title for c in clips] == [c.title for c in candidates]
    assert [c.start_time for c in clips] == [c.start_time for c in candidates]
    assert clips[0].viral_potential == "HIGH"
    assert clips[0].reason == candidates[0].reason
    assert all(c.duration == c.end_time - c.start_time for c in clips)


def test_enhance_empty_candidates_skips_llm(fake_llm):
    client = fake_llm("{}")
    assert enhance_clips([], "My video", TRANSCRIPT, Config(), client=client) == []
    assert client.completions.calls == []


def test_enhance_raises_on_quota(candidates, fake_llm):
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    error = openai.RateLimitError(
        "You exceeded your current quota",
        response=httpx.Response(429, request=request),
        body=None,
    )

    with pytest.raises(AIQuotaExceededError):
        enhance_clips(candidates, "My video", TRANSCRIPT, Config(), client=fake_llm(error=error))


def test_parse_requires_clips_list(candidates):
    with pytest.raises(ValueError):
        parse_enhanced_clips('{"items": []}', candidates, Config())
    with pytest.raises(ValueError):
        parse_enhanced_clips("not json", candidates, Config())


def test_parse_fills_missing_fields_from_candidate(candidates):
    clips = parse_enhanced_clips('{"clips": [{"improvedTitle": "Only a title"}]}', candidates, Config())

    assert clips[0].improved_title == "Only a title"
    assert clips[0].start_time == candidates[0].start_time
    assert clips[0].end_time == candidates[0].end_time
    assert clips[0].hook_score == candidates[0].hook_score


def test_extract_json_text():
    assert extract_json_text('```json\n{"a": 1}\n```') == '{"a": 1}'
    assert extract_json_text('```\n{"a": 1}\n```') == '{"a": 1}'
    assert extract_json_text('  {"a": 1}  ') == '{"a": 1}'


def test_extract_numbered_titles():
    assert extract_numbered_titles("intro\n1. One\n 2.Two\n") == ["One", "Two"]
    assert extract_numbered_titles("") == []
