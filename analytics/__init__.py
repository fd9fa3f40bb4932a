"""
Analytics package for caregiver burnout scoring and beautiful-moment prediction.

This package provides:
- Windowing: splits interactions into the current and previous week
- Burnout engine: week-over-week decline signals and risk score
- Prediction engine: success rates per activity, time of day and weekday
- Insight dispatcher: optional generated narrative insights
- Orchestrator and API: request validation, logging and HTTP endpoints
"""

from . import windowing
from . import burnout_engine
from . import prediction_engine
from . import insight_dispatcher
from . import orchestrator
from . import models

__all__ = [
    'windowing',
    'burnout_engine',
    'prediction_engine',
    'insight_dispatcher',
    'orchestrator',
    'models'
]
