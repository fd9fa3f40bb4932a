"""
API Layer for Analytics Service

This module provides FastAPI endpoints for burnout analysis, beautiful-moment
prediction and interaction insights.
"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, Request

from analytics import orchestrator
from analytics.models import (
    BurnoutAnalysisResult,
    InteractionInsightRequest,
    InteractionInsightResponse,
    InteractionsRequest,
    PredictionResult
)
from utils import activity_logger
from utils import database
from utils.llm import TextGenerator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/analytics", tags=["analytics"])


def get_text_generator(request: Request) -> Optional[TextGenerator]:
    """Text generator built once at start-up and stored on the app state."""
    return getattr(request.app.state, "text_generator", None)


def _elapsed(start_time: datetime) -> float:
    return (datetime.now() - start_time).total_seconds()


@router.post("/burnout", response_model=BurnoutAnalysisResult, response_model_exclude_none=True)
async def analyze_burnout(body: InteractionsRequest, request: Request):
    """
    Analyze caregiver burnout risk from a list of interactions.

    Fewer than 7 interactions returns a zero score with a "not enough data"
    signal. A generated insight is attached when the score is 40 or more and
    a text generator is configured.
    """
    start_time = datetime.now()
    logger.info("POST /analytics/burnout - Endpoint called")

    try:
        result = await orchestrator.process_burnout_request(
            body.interactions,
            text_generator=get_text_generator(request)
        )
        logger.info(f"POST /analytics/burnout - Completed in {_elapsed(start_time):.2f}s (score={result.risk_score})")
        return result
    except ValueError as e:
        logger.error(f"POST /analytics/burnout - Validation error: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"POST /analytics/burnout - Exception after {_elapsed(start_time):.2f}s: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Internal server error: {str(e)}")


@router.post("/predictions", response_model=PredictionResult, response_model_exclude_none=True)
async def predict_beautiful_moments(body: InteractionsRequest):
    """
    Predict the activity / time-of-day / weekday combinations most likely to
    produce beautiful moments. Requires at least 10 interactions.
    """
    start_time = datetime.now()
    logger.info("POST /analytics/predictions - Endpoint called")

    try:
        result = orchestrator.process_prediction_request(body.interactions)
        logger.info(f"POST /analytics/predictions - Completed in {_elapsed(start_time):.2f}s ({len(result.predictions)} patterns)")
        return result
    except ValueError as e:
        logger.error(f"POST /analytics/predictions - Validation error: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"POST /analytics/predictions - Exception after {_elapsed(start_time):.2f}s: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Internal server error: {str(e)}")


@router.post("/insight", response_model=InteractionInsightResponse)
async def interaction_insight(body: InteractionInsightRequest, request: Request):
    """Generate a short, warm insight for a single logged interaction."""
    logger.info("POST /analytics/insight - Endpoint called")

    try:
        insight = await orchestrator.process_interaction_insight(
            body.interaction,
            text_generator=get_text_generator(request)
        )
        return InteractionInsightResponse(insight=insight)
    except ValueError as e:
        logger.error(f"POST /analytics/insight - Validation error: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"POST /analytics/insight - Exception: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Internal server error: {str(e)}")


@router.get(
    "/recipients/{recipient_id}/burnout",
    response_model=BurnoutAnalysisResult,
    response_model_exclude_none=True
)
async def recipient_burnout(recipient_id: str, request: Request):
    """Analyze burnout risk from the recipient's interactions stored in the database."""
    logger.info(f"GET /analytics/recipients/{recipient_id}/burnout - Endpoint called")

    try:
        return await orchestrator.process_recipient_burnout(
            recipient_id,
            text_generator=get_text_generator(request)
        )
    except ValueError as e:
        logger.error(f"GET /analytics/recipients/{recipient_id}/burnout - Validation error: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"GET /analytics/recipients/{recipient_id}/burnout - Exception: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Internal server error: {str(e)}")


@router.get(
    "/recipients/{recipient_id}/predictions",
    response_model=PredictionResult,
    response_model_exclude_none=True
)
async def recipient_predictions(recipient_id: str):
    """Predict beautiful moments from the recipient's interaction history in the database."""
    logger.info(f"GET /analytics/recipients/{recipient_id}/predictions - Endpoint called")

    try:
        return orchestrator.process_recipient_predictions(recipient_id)
    except ValueError as e:
        logger.error(f"GET /analytics/recipients/{recipient_id}/predictions - Validation error: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"GET /analytics/recipients/{recipient_id}/predictions - Exception: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Internal server error: {str(e)}")


@router.get("/activity")
async def recent_activity(
    kind: str = Query(default="burnout"),
    limit: int = Query(default=50, ge=1, le=500),
    recipient_id: Optional[str] = None
):
    """Recent analytics activity log entries, newest first."""
    try:
        entries = activity_logger.read_activity_logs(kind, limit=limit, recipient_id=recipient_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"kind": kind, "count": len(entries), "entries": entries}


@router.get("/health")
async def health(request: Request):
    """
    Health check endpoint for analytics service.

    Returns:
        Dictionary with service status, text generator availability and database connectivity
    """
    logger.info("GET /analytics/health - Health check called")
    return {
        "status": "healthy",
        "service": "analytics",
        "text_generator": "configured" if get_text_generator(request) else "not_configured",
        "database": "connected" if database.check_connection() else "disconnected",
        "timestamp": datetime.now().isoformat()
    }
