"""
Burnout Engine

This module implements the caregiver burnout-risk heuristic: six week-over-week
decline signals combined into a 0-100 risk score with recommendations.
"""

import logging
from datetime import datetime, tzinfo
from typing import List, Optional, Sequence

from analytics.config_loader import get_section
from analytics.models import BurnoutAnalysisResult, InteractionRecord
from analytics.stats import average, round_half_up
from analytics.windowing import TimeWindows, get_timezone, parse_timestamp, split_windows

logger = logging.getLogger(__name__)

# Load configuration
_burnout_config = get_section("burnout")
MIN_INTERACTIONS = _burnout_config.get("min_interactions", 7)

MAX_RISK_SCORE = 100

# Signal thresholds and weights
FREQUENCY_DECLINE_THRESHOLD = 0.3
FREQUENCY_WEIGHT = 30
SUCCESS_DECLINE_THRESHOLD = 0.5
SUCCESS_WEIGHT = 15
MOOD_DECLINE_THRESHOLD = 0.5
MOOD_WEIGHT = 12
DESCRIPTION_DECLINE_THRESHOLD = 0.3
DESCRIPTION_WEIGHT = 20
MAX_GAP_HOURS = 72
GAP_POINTS = 15
LOW_ENERGY_THRESHOLD = 2.5
LOW_ENERGY_POINTS = 15

# Risk tiers
HIGH_RISK_SCORE = 60
MODERATE_RISK_SCORE = 40
MILD_RISK_SCORE = 20

NOT_ENOUGH_DATA_SIGNAL = "Not enough data to analyze burnout patterns"
NOT_ENOUGH_DATA_RECOMMENDATION = "Keep logging moments to build your caregiving insights"
NO_SIGNALS_MESSAGE = "No burnout signals detected - you're maintaining healthy caregiving patterns"


class _SignalCollector:
    """Accumulates triggered signals in evaluation order."""

    def __init__(self):
        self.signals: List[str] = []
        self.recommendations: List[str] = []
        self.score = 0.0

    def add(self, signal: str, points: float, recommendation: str):
        self.signals.append(signal)
        self.recommendations.append(recommendation)
        self.score += points
        logger.debug(f"Signal triggered: {signal} (+{points:.2f})")


def _average_decline(recent: Sequence[InteractionRecord], previous: Sequence[InteractionRecord], field: str) -> Optional[float]:
    """avgPrevious - avgRecent for a rating field, or None unless both windows recorded it."""
    avg_recent = average(getattr(r, field) for r in recent)
    avg_previous = average(getattr(r, field) for r in previous)
    if avg_recent is None or avg_previous is None:
        return None
    return avg_previous - avg_recent


def _check_frequency(windows: TimeWindows, collector: _SignalCollector):
    previous_count = len(windows.previous_7_days)
    if previous_count == 0:
        return
    decline = (previous_count - len(windows.last_7_days)) / previous_count
    if decline > FREQUENCY_DECLINE_THRESHOLD:
        collector.add(
            f"Interaction frequency decreased by {round_half_up(decline * 100)}%",
            decline * FREQUENCY_WEIGHT,
            "Consider setting reminders to maintain regular interactions"
        )


def _check_success(windows: TimeWindows, collector: _SignalCollector):
    decline = _average_decline(windows.last_7_days, windows.previous_7_days, "success_level")
    if decline is not None and decline > SUCCESS_DECLINE_THRESHOLD:
        collector.add(
            f"Success ratings dropped by {decline:.1f} points",
            decline * SUCCESS_WEIGHT,
            "Try revisiting activities that worked well in the past"
        )


def _check_mood(windows: TimeWindows, collector: _SignalCollector):
    decline = _average_decline(windows.last_7_days, windows.previous_7_days, "mood_rating")
    if decline is not None and decline > MOOD_DECLINE_THRESHOLD:
        collector.add(
            f"Overall mood decreased by {decline:.1f} points",
            decline * MOOD_WEIGHT,
            "Focus on mood-boosting activities and self-care"
        )


def _check_description_length(windows: TimeWindows, collector: _SignalCollector):
    avg_recent = average(len(r.description) for r in windows.last_7_days if r.description)
    avg_previous = average(len(r.description) for r in windows.previous_7_days if r.description)
    if avg_recent is None or avg_previous is None:
        return
    decline = (avg_previous - avg_recent) / avg_previous
    if decline > DESCRIPTION_DECLINE_THRESHOLD:
        collector.add(
            f"Journal entries {round_half_up(decline * 100)}% shorter, indicating less engagement",
            decline * DESCRIPTION_WEIGHT,
            "Take time to reflect and write detailed notes about your experiences"
        )


def _check_gaps(windows: TimeWindows, tz: tzinfo, collector: _SignalCollector):
    if len(windows.last_7_days) < 2:
        return
    # Windows are newest first, so each gap is record[i] - record[i + 1]
    timestamps = [parse_timestamp(r.created_at, tz) for r in windows.last_7_days]
    gaps = [
        (newer - older).total_seconds() / 3600
        for newer, older in zip(timestamps, timestamps[1:])
    ]
    max_gap = max(gaps)
    if max_gap > MAX_GAP_HOURS:
        collector.add(
            f"{round_half_up(max_gap / 24)}-day gap between interactions detected",
            GAP_POINTS,
            "Try to maintain more consistent interaction patterns"
        )


def _check_energy(windows: TimeWindows, collector: _SignalCollector):
    avg_energy = average(r.energy_level for r in windows.last_7_days)
    if avg_energy is not None and avg_energy < LOW_ENERGY_THRESHOLD:
        collector.add(
            f"Low energy levels averaging {avg_energy:.1f}/5",
            LOW_ENERGY_POINTS,
            "Prioritize rest and consider asking for support from others"
        )


def _tiered_recommendations(risk_score: int, recommendations: List[str]) -> List[str]:
    """Wrap per-signal recommendations with general guidance for the risk tier."""
    recommendations = list(recommendations)
    if risk_score >= HIGH_RISK_SCORE:
        recommendations.insert(0, "⚠️ High burnout risk detected - consider taking a break")
        recommendations.append("Reach out to family or friends for support")
        recommendations.append("Schedule time for self-care activities")
    elif risk_score >= MODERATE_RISK_SCORE:
        recommendations.insert(0, "Moderate burnout risk - monitor your wellbeing closely")
        recommendations.append("Celebrate small wins and positive moments")
    elif risk_score >= MILD_RISK_SCORE:
        recommendations.append("Keep up the great work!")
        recommendations.append("Remember to take breaks when needed")
    else:
        recommendations.append("You're doing amazing! Keep nurturing yourself and your loved one")
    # Deduplicate, keeping first occurrence
    return list(dict.fromkeys(recommendations))


def calculate_burnout_risk(
    records: Sequence[InteractionRecord],
    now: datetime,
    tz: Optional[tzinfo] = None
) -> BurnoutAnalysisResult:
    """
    Score caregiver burnout risk from week-over-week interaction trends.

    Signals are evaluated in a fixed order (frequency, success, mood,
    description length, gaps, energy); each triggered one contributes points,
    a signal message and a recommendation.

    Args:
        records: Interaction records in any order
        now: Reference time for the 7-day windows
        tz: Timezone for naive timestamps (configured local timezone if None)

    Returns:
        BurnoutAnalysisResult with risk_score in [0, 100]
    """
    if len(records) < MIN_INTERACTIONS:
        logger.info(f"Only {len(records)} interactions (< {MIN_INTERACTIONS}), skipping burnout scoring")
        return BurnoutAnalysisResult(
            risk_score=0,
            signals=[NOT_ENOUGH_DATA_SIGNAL],
            recommendations=[NOT_ENOUGH_DATA_RECOMMENDATION]
        )

    tz = tz or get_timezone()
    windows = split_windows(records, now, tz)
    collector = _SignalCollector()

    _check_frequency(windows, collector)
    _check_success(windows, collector)
    _check_mood(windows, collector)
    _check_description_length(windows, collector)
    _check_gaps(windows, tz, collector)
    _check_energy(windows, collector)

    risk_score = min(round_half_up(collector.score), MAX_RISK_SCORE)
    recommendations = _tiered_recommendations(risk_score, collector.recommendations)
    signals = collector.signals or [NO_SIGNALS_MESSAGE]

    logger.info(
        f"Burnout risk: score={risk_score}, signals triggered={len(collector.signals)} "
        f"(from {len(records)} interactions)"
    )

    return BurnoutAnalysisResult(
        risk_score=risk_score,
        signals=signals,
        recommendations=recommendations
    )
