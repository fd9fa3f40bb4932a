"""
Pydantic Models for Analytics Service

This module defines the interaction record contract consumed by the analytics
engines, and the request/response models for the analytics endpoints.
"""

import logging
import math
from datetime import datetime
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)

RATING_MIN = 1
RATING_MAX = 5

TimeOfDay = Literal["morning", "afternoon", "evening", "night"]
ConfidenceLevel = Literal["high", "medium", "low"]


def coerce_rating(value: Any) -> Optional[int]:
    """
    Normalize a 1-5 rating coming from an untrusted record.

    Returns None (treated as "not recorded") for missing, non-numeric,
    boolean, fractional or out-of-range values instead of raising. Integral
    floats and numeric strings ("4", 4.0) are accepted as integers.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        logger.warning(f"Ignoring boolean rating value {value!r}")
        return None
    try:
        rating = float(value)
    except (TypeError, ValueError):
        logger.warning(f"Ignoring non-numeric rating value {value!r}")
        return None
    if math.isnan(rating) or rating < RATING_MIN or rating > RATING_MAX:
        logger.warning(f"Ignoring out-of-range rating value {value!r}")
        return None
    if not rating.is_integer():
        logger.warning(f"Ignoring fractional rating value {value!r}")
        return None
    return int(rating)


class InteractionRecord(BaseModel):
    """One logged caregiving moment. Extra fields are ignored."""
    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    created_at: Optional[str] = None  # ISO format timestamp
    activity_type: str = "other"
    title: Optional[str] = None
    description: Optional[str] = None
    mood_rating: Optional[int] = None  # 1-5
    success_level: Optional[int] = None  # 1-5
    energy_level: Optional[int] = None  # 1-5
    tags: List[str] = Field(default_factory=list)

    @field_validator("id", "title", "description", mode="before")
    @classmethod
    def _to_optional_str(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        return str(value)

    @field_validator("created_at", mode="before")
    @classmethod
    def _timestamp_to_str(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        if isinstance(value, datetime):
            return value.isoformat()
        return str(value)

    @field_validator("activity_type", mode="before")
    @classmethod
    def _activity_type_default(cls, value: Any) -> str:
        if value is None or value == "":
            return "other"
        return str(value)

    @field_validator("mood_rating", "success_level", "energy_level", mode="before")
    @classmethod
    def _rating_in_range(cls, value: Any) -> Optional[int]:
        return coerce_rating(value)

    @field_validator("tags", mode="before")
    @classmethod
    def _tags_list(cls, value: Any) -> List[str]:
        if not isinstance(value, (list, tuple)):
            return []
        return [str(tag) for tag in value if tag is not None]


class InteractionsRequest(BaseModel):
    """Request model for the burnout and prediction endpoints."""
    # Shape is validated by the orchestrator so a bad payload maps to HTTP 400
    interactions: Any = None


class BurnoutAnalysisResult(BaseModel):
    """Response model for burnout analysis."""
    model_config = ConfigDict(populate_by_name=True)

    risk_score: int = Field(default=0, ge=0, le=100, alias="riskScore")
    signals: List[str] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
    ai_insight: Optional[str] = Field(default=None, alias="aiInsight")


class ActivityPrediction(BaseModel):
    """Success statistics for one (activity type, time of day, weekday) combination."""
    activity_type: str
    time_of_day: TimeOfDay
    day_of_week: str
    success_probability: float = Field(ge=0.0, le=1.0)
    beautiful_moment_rate: float = Field(ge=0.0, le=1.0)
    sample_size: int = Field(ge=0)
    confidence_level: ConfidenceLevel
    recommendation: str


class BestTimes(BaseModel):
    morning: List[ActivityPrediction] = Field(default_factory=list)
    afternoon: List[ActivityPrediction] = Field(default_factory=list)
    evening: List[ActivityPrediction] = Field(default_factory=list)


class PredictionResult(BaseModel):
    """Response model for beautiful-moment prediction."""
    predictions: List[ActivityPrediction] = Field(default_factory=list)
    best_times: BestTimes = Field(default_factory=BestTimes)
    best_activities: List[ActivityPrediction] = Field(default_factory=list)
    message: Optional[str] = None


class InteractionInsightRequest(BaseModel):
    """Request model for the single-interaction insight endpoint."""
    interaction: Any = None


class InteractionInsightResponse(BaseModel):
    insight: Optional[str] = None
