"""LLM-generated video content: summary, SEO description and keywords."""
import logging
from typing import Any, List, Optional

from clipscout.config import LLMConfig
from clipscout.llm.client import complete
from clipscout.utils.system import truncate_text

logger = logging.getLogger(__name__)


SUMMARY_PROMPT_TEMPLATE = """Please create a concise, engaging summary of this YouTube video based on its transcript.

Video Title: "{title}"
{description_line}
Transcript: "{transcript}"

Write 3-5 short paragraphs covering the main topic, the key points in the order they appear, and the main takeaways.
Start directly with the content, without phrases like "This video discusses"."""

DESCRIPTION_PROMPT_TEMPLATE = """Create an SEO-optimized YouTube video description.

Video Title: "{title}"
{context}

Generate a compelling YouTube description that:
- Starts with a hook that makes people want to watch
- Includes key points and value propositions
- Has clear calls-to-action
- Uses proper formatting with line breaks
- Includes relevant hashtags at the end
- Is optimized for YouTube SEO
- DO NOT use emojis
- Keep it professional and engaging

YouTube Description:"""

KEYWORDS_PROMPT_TEMPLATE = """Based on this YouTube video content, generate relevant keywords and tags for SEO optimization:

Video Title: "{title}"
{context}

Generate 15-25 relevant keywords/tags that would help this video be discovered on YouTube. Include:
- Primary keywords related to the main topic (3-5 keywords)
- Secondary keywords for broader reach (5-8 keywords)
- Long-tail keywords that people might search for (5-7 keywords)
- Trending terms in this niche if applicable (2-5 keywords)

Requirements:
- Each keyword should be 1-4 words long
- Focus on search terms people actually use
- Avoid overly generic words

Return as a simple comma-separated list without quotes or numbers."""


def generate_summary(
    title: str,
    transcript: str,
    cfg: LLMConfig,
    description: Optional[str] = None,
    client: Optional[Any] = None
) -> str:
    description_line = f'Original Description: "{description[:500]}"' if description else ""
    prompt = SUMMARY_PROMPT_TEMPLATE.format(
        title=title,
        description_line=description_line,
        transcript=truncate_text(transcript, cfg.summary_transcript_chars),
    )
    logger.info("Generating AI summary...")
    summary = complete(prompt, cfg, cfg.summary_temperature, client=client).strip()
    logger.info(f"Generated summary ({len(summary.split())} words)")
    return summary


def generate_description(
    title: str,
    cfg: LLMConfig,
    transcript: Optional[str] = None,
    summary: Optional[str] = None,
    description: Optional[str] = None,
    client: Optional[Any] = None
) -> str:
    if not transcript and not summary:
        raise ValueError("Either transcript or summary is required")

    context = []
    if summary:
        context.append(f'Summary: "{summary}"')
    if transcript:
        context.append(f'Transcript: "{truncate_text(transcript, cfg.description_transcript_chars)}"')
    if description:
        context.append(f'Original Description: "{description[:1000]}"')

    prompt = DESCRIPTION_PROMPT_TEMPLATE.format(title=title, context="\n".join(context))
    logger.info("Generating SEO description...")
    return complete(prompt, cfg, cfg.description_temperature, client=client).strip()


def generate_keywords(
    title: str,
    cfg: LLMConfig,
    transcript: Optional[str] = None,
    summary: Optional[str] = None,
    client: Optional[Any] = None
) -> List[str]:
    if not transcript and not summary:
        raise ValueError("Either transcript or summary is required")

    context = []
    if summary:
        context.append(f'Summary: "{summary}"')
    if transcript:
        context.append(f'Transcript: "{truncate_text(transcript, cfg.keywords_transcript_chars)}"')

    prompt = KEYWORDS_PROMPT_TEMPLATE.format(title=title, context="\n".join(context))
    logger.info("Generating keywords and tags...")
    keywords = parse_keywords(
        complete(prompt, cfg, cfg.keywords_temperature, client=client),
        cfg.max_keywords,
    )
    logger.info(f"Generated {len(keywords)} keywords")
    return keywords


def parse_keywords(text: str, max_keywords: int = 25) -> List[str]:
    """Split a comma-separated LLM answer into clean keywords."""
    keywords = [k.strip() for k in text.split(",")]
    keywords = [k for k in keywords if 0 < len(k) < 50]
    return keywords[:max_keywords]


def keywords_to_hashtags(keywords: List[str], limit: int = 10) -> List[str]:
    return ["#" + "".join(k.split()) for k in keywords[:limit]]
