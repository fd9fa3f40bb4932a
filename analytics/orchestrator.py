"""
Analytics Service Orchestrator

This module orchestrates the analytics flows:
- Validates the call shape of incoming interaction lists
- Fixes the reference time ("now") at the boundary
- Runs the burnout and prediction engines
- Optionally enriches burnout results with a generated insight
- Writes activity logs
"""

from typing import Any, List, Optional
from datetime import datetime, timezone
import logging
import uuid

from pydantic import ValidationError

from utils import database
from utils import activity_logger
from utils.llm import TextGenerator
from analytics.config_loader import get_section
from analytics.burnout_engine import calculate_burnout_risk
from analytics.prediction_engine import analyze_predictions
from analytics.insight_dispatcher import generate_interaction_insight, maybe_add_burnout_insight
from analytics.models import BurnoutAnalysisResult, InteractionRecord, PredictionResult

logger = logging.getLogger(__name__)

INVALID_INTERACTIONS_MESSAGE = "Missing or invalid interactions data"
INVALID_INTERACTION_MESSAGE = "Missing interaction data"

_burnout_config = get_section("burnout")
_prediction_config = get_section("prediction")
BURNOUT_FETCH_LIMIT = _burnout_config.get("recipient_fetch_limit", 50)
PREDICTION_FETCH_LIMIT = _prediction_config.get("recipient_fetch_limit", 500)


def parse_interactions(payload: Any) -> List[InteractionRecord]:
    """
    Validate and parse a raw interactions payload.

    Args:
        payload: Value of the "interactions" field as received

    Returns:
        List of InteractionRecord

    Raises:
        ValueError: If payload is missing, not a list, or contains a non-object element
    """
    if payload is None or not isinstance(payload, list):
        raise ValueError(INVALID_INTERACTIONS_MESSAGE)

    records = []
    for index, item in enumerate(payload):
        if isinstance(item, InteractionRecord):
            records.append(item)
            continue
        if not isinstance(item, dict):
            raise ValueError(f"{INVALID_INTERACTIONS_MESSAGE}: element {index} is not an object")
        try:
            records.append(InteractionRecord.model_validate(item))
        except ValidationError as e:
            raise ValueError(f"{INVALID_INTERACTIONS_MESSAGE}: element {index}: {e}")
    return records


def parse_interaction(payload: Any) -> InteractionRecord:
    """Validate a single interaction payload (for insight generation)."""
    if not payload or not isinstance(payload, dict):
        raise ValueError(INVALID_INTERACTION_MESSAGE)
    try:
        return InteractionRecord.model_validate(payload)
    except ValidationError as e:
        raise ValueError(f"{INVALID_INTERACTION_MESSAGE}: {e}")


def validate_recipient_id(recipient_id: str) -> None:
    """
    Raises:
        ValueError: If recipient_id is not a valid UUID
    """
    try:
        uuid.UUID(recipient_id)
    except (ValueError, TypeError, AttributeError):
        raise ValueError(f"Invalid recipient_id format: '{recipient_id}'. Must be a valid UUID.")


async def process_burnout_request(
    payload: Any,
    text_generator: Optional[TextGenerator] = None,
    now: Optional[datetime] = None,
    recipient_id: Optional[str] = None
) -> BurnoutAnalysisResult:
    """
    Run burnout analysis for a raw interactions payload.

    Args:
        payload: Interactions list as received
        text_generator: Optional generator for the narrative insight
        now: Reference time; defaults to the current UTC time
        recipient_id: Care recipient UUID, recorded in the activity log only

    Returns:
        BurnoutAnalysisResult

    Raises:
        ValueError: If the payload shape is invalid
    """
    start_time = datetime.now()
    now = now or datetime.now(timezone.utc)
    interaction_count = len(payload) if isinstance(payload, list) else 0

    try:
        records = parse_interactions(payload)
        analysis = calculate_burnout_risk(records, now)
        analysis = await maybe_add_burnout_insight(records, analysis, text_generator)

        activity_logger.log_burnout_activity(
            timestamp=start_time,
            status="success",
            interaction_count=len(records),
            recipient_id=recipient_id,
            risk_score=analysis.risk_score,
            signals=analysis.signals,
            insight_generated=analysis.ai_insight is not None,
            duration_seconds=(datetime.now() - start_time).total_seconds()
        )
        return analysis
    except Exception as e:
        logger.error(f"Error processing burnout request: {e}", exc_info=not isinstance(e, ValueError))
        activity_logger.log_burnout_activity(
            timestamp=start_time,
            status="error",
            interaction_count=interaction_count,
            recipient_id=recipient_id,
            error=str(e),
            duration_seconds=(datetime.now() - start_time).total_seconds()
        )
        raise


def process_prediction_request(payload: Any, recipient_id: Optional[str] = None) -> PredictionResult:
    """
    Run beautiful-moment prediction for a raw interactions payload.

    Args:
        payload: Interactions list as received
        recipient_id: Care recipient UUID, recorded in the activity log only

    Returns:
        PredictionResult

    Raises:
        ValueError: If the payload shape is invalid
    """
    start_time = datetime.now()
    interaction_count = len(payload) if isinstance(payload, list) else 0

    try:
        records = parse_interactions(payload)
        result = analyze_predictions(records)

        activity_logger.log_prediction_activity(
            timestamp=start_time,
            status="success",
            interaction_count=len(records),
            recipient_id=recipient_id,
            prediction_count=len(result.predictions),
            best_activity_count=len(result.best_activities),
            duration_seconds=(datetime.now() - start_time).total_seconds()
        )
        return result
    except Exception as e:
        logger.error(f"Error processing prediction request: {e}", exc_info=not isinstance(e, ValueError))
        activity_logger.log_prediction_activity(
            timestamp=start_time,
            status="error",
            interaction_count=interaction_count,
            recipient_id=recipient_id,
            error=str(e),
            duration_seconds=(datetime.now() - start_time).total_seconds()
        )
        raise


async def process_recipient_burnout(
    recipient_id: str,
    text_generator: Optional[TextGenerator] = None,
    now: Optional[datetime] = None
) -> BurnoutAnalysisResult:
    """Load a recipient's recent interactions from the database and analyze burnout risk."""
    validate_recipient_id(recipient_id)
    rows = database.fetch_recipient_interactions(recipient_id, limit=BURNOUT_FETCH_LIMIT)
    return await process_burnout_request(rows, text_generator=text_generator, now=now, recipient_id=recipient_id)


def process_recipient_predictions(recipient_id: str) -> PredictionResult:
    """Load a recipient's interaction history from the database and predict beautiful moments."""
    validate_recipient_id(recipient_id)
    rows = database.fetch_recipient_interactions(recipient_id, limit=PREDICTION_FETCH_LIMIT)
    return process_prediction_request(rows, recipient_id=recipient_id)


async def process_interaction_insight(payload: Any, text_generator: Optional[TextGenerator] = None) -> Optional[str]:
    """
    Generate a short insight for a single interaction.

    Raises:
        ValueError: If the interaction payload is missing or invalid
    """
    record = parse_interaction(payload)
    return await generate_interaction_insight(record, text_generator)
