"""
Unit Tests: calculate_burnout_risk() signals, scoring and recommendations

Signals (in evaluation order) and contributions:
    1. Frequency decline  > 30%      -> decline * 30
    2. Success decline    > 0.5 pts  -> decline * 15
    3. Mood decline       > 0.5 pts  -> decline * 12
    4. Description length > 30%      -> relative decline * 20
    5. Gap in last 7 days > 72 hours -> +15
    6. Avg energy         < 2.5      -> +15

Run with: pytest testing/test_burnout_engine.py -v
"""

from datetime import datetime, timedelta, timezone

import pytest

from analytics.burnout_engine import (
    NO_SIGNALS_MESSAGE,
    NOT_ENOUGH_DATA_RECOMMENDATION,
    NOT_ENOUGH_DATA_SIGNAL,
    _tiered_recommendations,
    calculate_burnout_risk,
)
from analytics.models import InteractionRecord

NOW = datetime(2026, 3, 18, 12, 0, tzinfo=timezone.utc)


# =============================================================================
# Helpers
# =============================================================================

def make_interaction(hours_ago: float, **fields) -> InteractionRecord:
    """Helper to create an InteractionRecord relative to NOW."""
    fields.setdefault("activity_type", "conversation")
    return InteractionRecord(
        id=f"interaction-{hours_ago}",
        created_at=(NOW - timedelta(hours=hours_ago)).isoformat(),
        **fields
    )


def current_week(count: int, spacing_hours: float = 12, **fields):
    """`count` interactions in the last 7 days, newest at NOW."""
    return [make_interaction(i * spacing_hours, **fields) for i in range(count)]


def previous_week(count: int, spacing_hours: float = 12, **fields):
    """`count` interactions between 8 and 14 days ago."""
    return [make_interaction(8 * 24 + i * spacing_hours, **fields) for i in range(count)]


# =============================================================================
# Data sufficiency
# =============================================================================

class TestNotEnoughData:

    @pytest.mark.parametrize("count", range(7))
    def test_fewer_than_seven_interactions(self, count):
        records = current_week(count, energy_level=1)

        result = calculate_burnout_risk(records, NOW)

        assert result.risk_score == 0
        assert result.signals == [NOT_ENOUGH_DATA_SIGNAL]
        assert result.recommendations == [NOT_ENOUGH_DATA_RECOMMENDATION]

    def test_timeless_records_still_count_towards_floor(self):
        records = current_week(6, mood_rating=5) + [
            InteractionRecord(id="bad", created_at="not-a-date", activity_type="meal")
        ]

        result = calculate_burnout_risk(records, NOW)

        assert result.signals == [NO_SIGNALS_MESSAGE]


# =============================================================================
# Scenarios
# =============================================================================

class TestScenarios:

    def test_steady_week_has_no_signals(self):
        """7 evenly spaced, top-rated interactions with no prior week."""
        records = current_week(7, mood_rating=5, success_level=5, energy_level=5)

        result = calculate_burnout_risk(records, NOW)

        assert result.risk_score == 0
        assert result.signals == [NO_SIGNALS_MESSAGE]
        assert result.recommendations == [
            "You're doing amazing! Keep nurturing yourself and your loved one"
        ]
        assert result.ai_insight is None

    def test_success_decline_only(self):
        """Previous week all success=5, current week all success=2, no moods."""
        records = previous_week(7, success_level=5) + current_week(7, success_level=2)

        result = calculate_burnout_risk(records, NOW)

        assert result.risk_score == 45
        assert result.signals == ["Success ratings dropped by 3.0 points"]
        assert result.recommendations == [
            "Moderate burnout risk - monitor your wellbeing closely",
            "Try revisiting activities that worked well in the past",
            "Celebrate small wins and positive moments",
        ]


# =============================================================================
# Individual signals
# =============================================================================

class TestSignals:

    def test_frequency_decline(self):
        records = previous_week(10) + current_week(6)

        result = calculate_burnout_risk(records, NOW)

        assert result.risk_score == 12
        assert result.signals == ["Interaction frequency decreased by 40%"]
        assert "Consider setting reminders to maintain regular interactions" in result.recommendations

    def test_frequency_decline_is_monotonic(self):
        scores = []
        for recent in range(10, -1, -1):
            records = previous_week(10) + current_week(recent)
            scores.append(calculate_burnout_risk(records, NOW).risk_score)

        assert scores == sorted(scores)
        assert scores[0] == 0
        assert scores[-1] == 30

    def test_frequency_decline_at_threshold_does_not_trigger(self):
        records = previous_week(10) + current_week(7)

        result = calculate_burnout_risk(records, NOW)

        assert result.risk_score == 0

    def test_mood_decline(self):
        records = previous_week(7, mood_rating=5) + current_week(7, mood_rating=3)

        result = calculate_burnout_risk(records, NOW)

        assert result.risk_score == 24
        assert result.signals == ["Overall mood decreased by 2.0 points"]
        assert "Focus on mood-boosting activities and self-care" in result.recommendations

    def test_description_length_decline(self):
        records = previous_week(7, description="x" * 100) + current_week(7, description="y" * 40)

        result = calculate_burnout_risk(records, NOW)

        assert result.risk_score == 12
        assert result.signals == ["Journal entries 60% shorter, indicating less engagement"]

    def test_empty_descriptions_are_ignored(self):
        records = previous_week(7, description="x" * 100) + current_week(7, description="")

        result = calculate_burnout_risk(records, NOW)

        assert result.signals == [NO_SIGNALS_MESSAGE]

    def test_gap_between_interactions(self):
        recent = [make_interaction(h) for h in (3, 0, 100, 5, 1, 2, 4)]

        result = calculate_burnout_risk(recent, NOW)

        assert result.risk_score == 15
        assert result.signals == ["4-day gap between interactions detected"]
        assert "Try to maintain more consistent interaction patterns" in result.recommendations

    def test_gap_of_exactly_three_days_does_not_trigger(self):
        recent = [make_interaction(h) for h in (0, 1, 2, 3, 4, 5, 77)]

        result = calculate_burnout_risk(recent, NOW)

        assert result.signals == [NO_SIGNALS_MESSAGE]

    def test_low_energy(self):
        records = current_week(7, energy_level=2)

        result = calculate_burnout_risk(records, NOW)

        assert result.risk_score == 15
        assert result.signals == ["Low energy levels averaging 2.0/5"]
        assert "Prioritize rest and consider asking for support from others" in result.recommendations

    def test_missing_ratings_are_not_zero(self):
        """Only one low-energy record among unrated ones still averages 2.0, not 2/7."""
        records = current_week(6) + [make_interaction(80, energy_level=2)]

        result = calculate_burnout_risk(records, NOW)

        assert "Low energy levels averaging 2.0/5" in result.signals

    def test_out_of_range_ratings_are_ignored(self):
        records = current_week(6, energy_level=5) + [make_interaction(80, energy_level=0, mood_rating=7)]

        result = calculate_burnout_risk(records, NOW)

        assert result.risk_score == 0
        assert result.signals == [NO_SIGNALS_MESSAGE]

    def test_fractional_ratings_are_ignored(self):
        records = current_week(6, energy_level=5) + [make_interaction(80, energy_level=1.5)]

        result = calculate_burnout_risk(records, NOW)

        assert result.risk_score == 0
        assert result.signals == [NO_SIGNALS_MESSAGE]

    @pytest.mark.parametrize("value, expected", [
        (4, 4), (4.0, 4), ("3", 3), (3.5, None), ("2.5", None), (0, None), (True, None), ("high", None),
    ])
    def test_rating_coercion(self, value, expected):
        record = InteractionRecord(id="r", created_at=NOW.isoformat(), mood_rating=value)

        assert record.mood_rating == expected


# =============================================================================
# Scoring and recommendations
# =============================================================================

class TestScoring:

    def test_signals_follow_evaluation_order(self):
        records = (
            previous_week(7, success_level=5, mood_rating=5)
            + current_week(7, success_level=2, mood_rating=4, energy_level=2)
        )

        result = calculate_burnout_risk(records, NOW)

        # 3 * 15 + 1 * 12 + 15
        assert result.risk_score == 72
        assert result.signals == [
            "Success ratings dropped by 3.0 points",
            "Overall mood decreased by 1.0 points",
            "Low energy levels averaging 2.0/5",
        ]

    def test_high_risk_recommendations(self):
        records = previous_week(7, success_level=5) + current_week(7, success_level=2, energy_level=2)

        result = calculate_burnout_risk(records, NOW)

        assert result.risk_score == 60
        assert result.recommendations == [
            "⚠️ High burnout risk detected - consider taking a break",
            "Try revisiting activities that worked well in the past",
            "Prioritize rest and consider asking for support from others",
            "Reach out to family or friends for support",
            "Schedule time for self-care activities",
        ]

    def test_mild_risk_recommendations(self):
        recent = [make_interaction(h, energy_level=2) for h in (0, 1, 2, 3, 4, 5, 100)]

        result = calculate_burnout_risk(recent, NOW)

        assert result.risk_score == 30
        assert result.recommendations[-2:] == [
            "Keep up the great work!",
            "Remember to take breaks when needed",
        ]

    def test_score_is_capped_at_100(self):
        records = (
            previous_week(10, success_level=5, mood_rating=5, description="x" * 100)
            + [
                make_interaction(0, success_level=1, mood_rating=1, energy_level=1, description="y"),
                make_interaction(100, success_level=1, mood_rating=1, energy_level=1, description="y"),
            ]
        )

        result = calculate_burnout_risk(records, NOW)

        assert result.risk_score == 100
        assert len(result.signals) == 6
        assert result.signals[0].startswith("Interaction frequency decreased")
        assert result.signals[5].startswith("Low energy levels")

    def test_score_is_integer_in_range(self):
        records = previous_week(9, mood_rating=4) + current_week(4, mood_rating=3)

        result = calculate_burnout_risk(records, NOW)

        assert isinstance(result.risk_score, int)
        assert 0 <= result.risk_score <= 100

    def test_recommendations_are_deduplicated_in_order(self):
        recommendations = _tiered_recommendations(10, ["a", "b", "a", "c", "b"])

        assert recommendations == [
            "a", "b", "c",
            "You're doing amazing! Keep nurturing yourself and your loved one",
        ]

    def test_wire_format_uses_camel_case(self):
        records = current_week(7, mood_rating=5)

        payload = calculate_burnout_risk(records, NOW).model_dump(by_alias=True, exclude_none=True)

        assert set(payload) == {"riskScore", "signals", "recommendations"}
