"""
Insight Dispatcher

Decides when to ask the text generator for a narrative insight and merges the
answer into the analysis. Generated text is optional: burnout analysis never
fails because of it.
"""

import logging
from typing import Optional, Sequence

from analytics.config_loader import get_section
from analytics.models import BurnoutAnalysisResult, InteractionRecord
from analytics.stats import average
from analytics.windowing import sort_newest_first
from utils.llm import TextGenerator

logger = logging.getLogger(__name__)

_burnout_config = get_section("burnout")
INSIGHT_MIN_RISK_SCORE = _burnout_config.get("insight_min_risk_score", 40)

SUMMARY_RECENT_INTERACTIONS = 10
BURNOUT_INSIGHT_MAX_CHARS = 150
BURNOUT_INSIGHT_MAX_TOKENS = 80
INTERACTION_INSIGHT_MAX_CHARS = 100
INTERACTION_INSIGHT_MAX_TOKENS = 100


def should_request_insight(analysis: BurnoutAnalysisResult, text_generator: Optional[TextGenerator]) -> bool:
    return text_generator is not None and analysis.risk_score >= INSIGHT_MIN_RISK_SCORE


def build_burnout_summary(records: Sequence[InteractionRecord], analysis: BurnoutAnalysisResult) -> str:
    """Short plain-text description of the caregiver's recent pattern."""
    recent = [record for _, record in sort_newest_first(records)][:SUMMARY_RECENT_INTERACTIONS]
    avg_mood = average(r.mood_rating for r in recent)
    mood_text = f"{avg_mood:.1f}" if avg_mood is not None else "N/A"

    return (
        "Recent caregiving pattern:\n"
        f"- {len(recent)} interactions logged\n"
        f"- Average mood: {mood_text}/5\n"
        f"- Burnout risk score: {analysis.risk_score}/100\n"
        f"- Detected signals: {', '.join(analysis.signals)}"
    )


def build_burnout_prompt(summary: str) -> str:
    return (
        "As a compassionate caregiving coach, provide a brief, warm, personalized insight "
        f"(2-3 sentences, max {BURNOUT_INSIGHT_MAX_CHARS} characters) about this caregiver's burnout risk:\n\n"
        f"{summary}\n\n"
        "Focus on encouragement and actionable self-care advice. Be empathetic but concise."
    )


async def maybe_add_burnout_insight(
    records: Sequence[InteractionRecord],
    analysis: BurnoutAnalysisResult,
    text_generator: Optional[TextGenerator]
) -> BurnoutAnalysisResult:
    """
    Attach a generated insight when the risk score warrants one.

    Any failure of the text generator (timeout, HTTP error, malformed payload)
    is logged and leaves ai_insight unset.

    Returns:
        The same analysis object, with ai_insight populated on success
    """
    if not should_request_insight(analysis, text_generator):
        logger.debug(f"Skipping insight generation (score={analysis.risk_score}, generator={'yes' if text_generator else 'no'})")
        return analysis

    prompt = build_burnout_prompt(build_burnout_summary(records, analysis))
    try:
        insight = await text_generator.generate(prompt, max_tokens=BURNOUT_INSIGHT_MAX_TOKENS)
    except Exception as e:
        logger.warning(f"Burnout insight generation failed, continuing without it: {e}", exc_info=True)
        return analysis

    if insight:
        analysis.ai_insight = insight
        logger.info(f"Generated burnout insight ({len(insight)} chars)")
    else:
        logger.warning("Text generator returned no content for burnout insight")
    return analysis


def build_interaction_prompt(record: InteractionRecord) -> str:
    def rating(value: Optional[int]) -> str:
        return str(value) if value is not None else "N/A"

    return (
        "Generate a brief, warm insight from this caregiving moment:\n\n"
        f"Activity: {record.activity_type}\n"
        f"Title: {record.title or 'N/A'}\n"
        f"Description: {record.description or 'N/A'}\n"
        f"Mood: {rating(record.mood_rating)}/5\n"
        f"Success: {rating(record.success_level)}/5\n\n"
        "Write 1-2 sentences highlighting what made this moment special or what can be learned "
        f"for future care. Be warm and encouraging. Keep it under {INTERACTION_INSIGHT_MAX_CHARS} characters."
    )


async def generate_interaction_insight(
    record: InteractionRecord,
    text_generator: Optional[TextGenerator]
) -> Optional[str]:
    """
    Generate a short insight for a single interaction.

    Returns None when no text generator is configured. Generator errors propagate.
    """
    if text_generator is None:
        logger.info("No text generator configured, returning empty interaction insight")
        return None
    return await text_generator.generate(build_interaction_prompt(record), max_tokens=INTERACTION_INSIGHT_MAX_TOKENS)
