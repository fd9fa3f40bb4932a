"""
Prediction Engine

This module predicts which activity / time-of-day / weekday combinations are
most likely to produce "beautiful moments" (success and mood both >= 4),
based on a care recipient's interaction history.
"""

from typing import Dict, List, NamedTuple, Optional, Sequence
from datetime import tzinfo
from collections import defaultdict
import logging

from analytics.config_loader import get_section
from analytics.models import ActivityPrediction, BestTimes, InteractionRecord, PredictionResult
from analytics.stats import confidence_level, rate, round_half_up
from analytics.windowing import get_timezone, parse_timestamp

logger = logging.getLogger(__name__)

# Load configuration
_prediction_config = get_section("prediction")
MIN_INTERACTIONS = _prediction_config.get("min_interactions", 10)

NOT_ENOUGH_DATA_MESSAGE = "Need more interaction history for predictions (minimum 10 interactions)"

POSITIVE_RATING = 4
BEST_TIMES_MIN_SAMPLES = 2
BEST_TIMES_LIMIT = 5
BEST_ACTIVITIES_MIN_RATE = 0.5
BEST_ACTIVITIES_LIMIT = 10

# (start hour inclusive, end hour exclusive, bucket); everything else is night
TIME_OF_DAY_BOUNDARIES = [
    (5, 12, "morning"),
    (12, 17, "afternoon"),
    (17, 21, "evening"),
]

WEEKDAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


class PatternKey(NamedTuple):
    activity_type: str
    time_of_day: str
    day_of_week: str


class _PatternCounts:
    def __init__(self):
        self.total = 0
        self.successful = 0
        self.beautiful = 0


def time_of_day_for_hour(hour: int) -> str:
    """Map an hour (0-23) to morning / afternoon / evening / night."""
    for start, end, bucket in TIME_OF_DAY_BOUNDARIES:
        if start <= hour < end:
            return bucket
    return "night"


def _recommendation_for_rate(beautiful_moment_rate: float) -> str:
    percent = round_half_up(beautiful_moment_rate * 100)
    if beautiful_moment_rate >= 0.7:
        return f"Excellent choice! {percent}% beautiful moment rate"
    if beautiful_moment_rate >= 0.5:
        return f"Good option with {percent}% success rate"
    if beautiful_moment_rate >= 0.3:
        return "Moderate success - consider timing or approach adjustments"
    return "Try a different time or activity combination"


def _meets(value: Optional[int]) -> bool:
    # Missing ratings count as 0 for thresholds but stay in the denominator
    return (value or 0) >= POSITIVE_RATING


def _group_patterns(records: Sequence[InteractionRecord], tz: tzinfo) -> Dict[PatternKey, _PatternCounts]:
    patterns: Dict[PatternKey, _PatternCounts] = defaultdict(_PatternCounts)
    skipped = 0

    for record in records:
        timestamp = parse_timestamp(record.created_at, tz)
        if timestamp is None:
            skipped += 1
            continue
        local = timestamp.astimezone(tz)
        key = PatternKey(
            activity_type=record.activity_type,
            time_of_day=time_of_day_for_hour(local.hour),
            day_of_week=WEEKDAY_NAMES[local.weekday()]
        )

        counts = patterns[key]
        counts.total += 1
        success_ok = _meets(record.success_level)
        mood_ok = _meets(record.mood_rating)
        if success_ok or mood_ok:
            counts.successful += 1
        if success_ok and mood_ok:
            counts.beautiful += 1

    if skipped:
        logger.warning(f"Skipped {skipped} interactions with unparseable timestamps")
    logger.debug(f"Grouped interactions into {len(patterns)} patterns")
    return patterns


def _sort_key(prediction: ActivityPrediction):
    # Rate desc, then sample size desc, then alphabetical on the key dimensions
    return (
        -prediction.beautiful_moment_rate,
        -prediction.sample_size,
        prediction.activity_type,
        prediction.time_of_day,
        prediction.day_of_week,
    )


def analyze_predictions(
    records: Sequence[InteractionRecord],
    tz: Optional[tzinfo] = None
) -> PredictionResult:
    """
    Predict beautiful-moment likelihood per activity, time of day and weekday.

    Args:
        records: Interaction records in any order
        tz: Timezone used to derive hour and weekday (configured local timezone if None)

    Returns:
        PredictionResult with predictions sorted by beautiful_moment_rate (descending),
        best times per time-of-day bucket and best high-confidence activities
    """
    if len(records) < MIN_INTERACTIONS:
        logger.info(f"Only {len(records)} interactions (< {MIN_INTERACTIONS}), skipping predictions")
        return PredictionResult(message=NOT_ENOUGH_DATA_MESSAGE)

    tz = tz or get_timezone()
    patterns = _group_patterns(records, tz)

    predictions: List[ActivityPrediction] = []
    for key, counts in patterns.items():
        beautiful_moment_rate = rate(counts.beautiful, counts.total)
        predictions.append(ActivityPrediction(
            activity_type=key.activity_type,
            time_of_day=key.time_of_day,
            day_of_week=key.day_of_week,
            success_probability=rate(counts.successful, counts.total),
            beautiful_moment_rate=beautiful_moment_rate,
            sample_size=counts.total,
            confidence_level=confidence_level(counts.total),
            recommendation=_recommendation_for_rate(beautiful_moment_rate)
        ))

    predictions.sort(key=_sort_key)

    def best_for(time_of_day: str) -> List[ActivityPrediction]:
        matching = [
            p for p in predictions
            if p.time_of_day == time_of_day and p.sample_size >= BEST_TIMES_MIN_SAMPLES
        ]
        return matching[:BEST_TIMES_LIMIT]

    best_times = BestTimes(
        morning=best_for("morning"),
        afternoon=best_for("afternoon"),
        evening=best_for("evening")
    )

    best_activities = [
        p for p in predictions
        if p.confidence_level == "high" and p.beautiful_moment_rate >= BEST_ACTIVITIES_MIN_RATE
    ][:BEST_ACTIVITIES_LIMIT]

    top = predictions[0] if predictions else None
    if top:
        logger.info(
            f"Predictions: {len(predictions)} patterns, top={top.activity_type}/{top.time_of_day}/"
            f"{top.day_of_week} (rate {top.beautiful_moment_rate:.2f}, n={top.sample_size})"
        )

    return PredictionResult(
        predictions=predictions,
        best_times=best_times,
        best_activities=best_activities
    )
