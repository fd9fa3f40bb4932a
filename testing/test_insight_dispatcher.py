"""
Unit Tests: generated insight dispatch for burnout analysis and single interactions

The text generator is a soft dependency: failures must never break the analysis.

Run with: pytest testing/test_insight_dispatcher.py -v
"""

import asyncio
from datetime import datetime, timedelta, timezone

import httpx
import pytest

from analytics import orchestrator
from analytics.insight_dispatcher import (
    build_burnout_summary,
    generate_interaction_insight,
    maybe_add_burnout_insight,
)
from analytics.models import BurnoutAnalysisResult, InteractionRecord

NOW = datetime(2026, 3, 18, 12, 0, tzinfo=timezone.utc)


# =============================================================================
# Fakes & Helpers
# =============================================================================

class FakeTextGenerator:
    def __init__(self, answer="You are doing more than enough. Rest is part of care."):
        self.answer = answer
        self.prompts = []

    async def generate(self, prompt, max_tokens=80):
        self.prompts.append(prompt)
        return self.answer


class FailingTextGenerator:
    def __init__(self, error):
        self.error = error
        self.calls = 0

    async def generate(self, prompt, max_tokens=80):
        self.calls += 1
        raise self.error


def make_interaction(hours_ago: float, **fields) -> InteractionRecord:
    return InteractionRecord(
        id=f"interaction-{hours_ago}",
        created_at=(NOW - timedelta(hours=hours_ago)).isoformat(),
        activity_type="conversation",
        **fields
    )


def declining_payload():
    """14 interactions whose success drops from 5 to 2 week over week (score 45)."""
    previous = [make_interaction(8 * 24 + i * 12, success_level=5) for i in range(7)]
    recent = [make_interaction(i * 12, success_level=2) for i in range(7)]
    return [r.model_dump() for r in previous + recent]


def high_risk_analysis(score=65):
    return BurnoutAnalysisResult(
        risk_score=score,
        signals=["Success ratings dropped by 3.0 points", "Low energy levels averaging 2.0/5"],
        recommendations=["Prioritize rest and consider asking for support from others"],
    )


# =============================================================================
# Burnout insight
# =============================================================================

class TestBurnoutInsight:

    def test_insight_attached_at_or_above_forty(self):
        generator = FakeTextGenerator()
        records = [make_interaction(i, mood_rating=3) for i in range(7)]

        result = asyncio.run(maybe_add_burnout_insight(records, high_risk_analysis(40), generator))

        assert result.ai_insight == generator.answer
        assert len(generator.prompts) == 1
        assert "Burnout risk score: 40/100" in generator.prompts[0]
        assert "max 150 characters" in generator.prompts[0]

    def test_no_request_below_forty(self):
        generator = FakeTextGenerator()

        result = asyncio.run(maybe_add_burnout_insight([], high_risk_analysis(39), generator))

        assert result.ai_insight is None
        assert generator.prompts == []

    def test_no_generator_configured(self):
        result = asyncio.run(maybe_add_burnout_insight([], high_risk_analysis(90), None))

        assert result.ai_insight is None

    @pytest.mark.parametrize("error", [
        httpx.ReadTimeout("timed out"),
        httpx.HTTPStatusError(
            "server error",
            request=httpx.Request("POST", "https://api.openai.com/v1/chat/completions"),
            response=httpx.Response(502),
        ),
        KeyError("choices"),
    ])
    def test_generator_failure_keeps_analysis(self, error):
        generator = FailingTextGenerator(error)
        analysis = high_risk_analysis(65)

        result = asyncio.run(maybe_add_burnout_insight([], analysis, generator))

        assert generator.calls == 1
        assert result.risk_score == 65
        assert result.signals == analysis.signals
        assert result.recommendations == analysis.recommendations
        assert result.ai_insight is None
        assert "aiInsight" not in result.model_dump(by_alias=True, exclude_none=True)

    def test_empty_answer_leaves_insight_unset(self):
        result = asyncio.run(maybe_add_burnout_insight([], high_risk_analysis(), FakeTextGenerator(answer=None)))

        assert result.ai_insight is None

    def test_full_flow_survives_generator_failure(self):
        generator = FailingTextGenerator(httpx.ConnectError("unreachable"))

        result = asyncio.run(orchestrator.process_burnout_request(declining_payload(), generator, now=NOW))

        assert generator.calls == 1
        assert result.risk_score == 45
        assert result.signals == ["Success ratings dropped by 3.0 points"]
        assert result.ai_insight is None


class TestBurnoutSummary:

    def test_summary_uses_ten_most_recent(self):
        records = (
            [make_interaction(200 + i, mood_rating=1) for i in range(5)]
            + [make_interaction(i, mood_rating=4) for i in range(10)]
        )

        summary = build_burnout_summary(records, high_risk_analysis(50))

        assert "- 10 interactions logged" in summary
        assert "- Average mood: 4.0/5" in summary
        assert "- Burnout risk score: 50/100" in summary
        assert "Success ratings dropped by 3.0 points, Low energy levels averaging 2.0/5" in summary

    def test_summary_without_moods(self):
        summary = build_burnout_summary([make_interaction(1)], high_risk_analysis())

        assert "- Average mood: N/A/5" in summary


# =============================================================================
# Single-interaction insight
# =============================================================================

class TestInteractionInsight:

    def test_no_generator_returns_none(self):
        record = make_interaction(1, mood_rating=5, success_level=4)

        assert asyncio.run(generate_interaction_insight(record, None)) is None

    def test_prompt_describes_interaction(self):
        generator = FakeTextGenerator(answer="Music brought her right back to herself.")
        record = make_interaction(1, title="Sing-along", description="We sang old songs", mood_rating=5, success_level=4)

        insight = asyncio.run(generate_interaction_insight(record, generator))

        assert insight == "Music brought her right back to herself."
        prompt = generator.prompts[0]
        assert "Title: Sing-along" in prompt
        assert "Description: We sang old songs" in prompt
        assert "Mood: 5/5" in prompt
        assert "Success: 4/5" in prompt

    def test_generator_errors_propagate(self):
        generator = FailingTextGenerator(RuntimeError("boom"))

        with pytest.raises(RuntimeError):
            asyncio.run(generate_interaction_insight(make_interaction(1), generator))

    def test_missing_interaction_is_rejected(self):
        with pytest.raises(ValueError):
            asyncio.run(orchestrator.process_interaction_insight(None, FakeTextGenerator()))
