"""
Activity Logger Utility

Provides activity logging for the burnout and prediction analytics.
Logs are written to JSONL files for easy parsing and dashboard display.
"""

import json
import os
import logging
import threading
from datetime import datetime
from typing import Dict, Optional, Any
from pathlib import Path

logger = logging.getLogger(__name__)

# Base directory for activity logs
BASE_LOG_DIR = "data/activity_logs"

LOG_KINDS = ("burnout", "prediction")

# Locks for thread-safe file writing
_locks = {kind: threading.Lock() for kind in LOG_KINDS}


def get_log_dir(kind: str) -> str:
    if kind not in LOG_KINDS:
        raise ValueError(f"Unknown activity log kind: '{kind}'. Must be one of: {', '.join(LOG_KINDS)}")
    return os.path.join(BASE_LOG_DIR, kind)


def _get_log_file(kind: str) -> str:
    """
    Get log file path for today's date.

    Args:
        kind: Log kind ("burnout" or "prediction")

    Returns:
        Path to log file
    """
    log_dir = get_log_dir(kind)
    os.makedirs(log_dir, exist_ok=True)
    today = datetime.now().strftime("%Y%m%d")
    return os.path.join(log_dir, f"{kind}_activity_{today}.jsonl")


def _write_entry(kind: str, log_entry: Dict[str, Any]):
    try:
        log_file = _get_log_file(kind)
        with _locks[kind]:
            with open(log_file, 'a', encoding='utf-8') as f:
                f.write(json.dumps(log_entry, ensure_ascii=False) + '\n')
        logger.debug(f"Logged {kind} activity to {log_file}")
    except Exception as e:
        logger.warning(f"Failed to log {kind} activity: {e}", exc_info=True)


def log_burnout_activity(
    timestamp: datetime,
    status: str,  # "success", "error"
    interaction_count: int = 0,
    recipient_id: Optional[str] = None,
    risk_score: Optional[int] = None,
    signals: Optional[list] = None,
    insight_generated: bool = False,
    error: Optional[str] = None,
    duration_seconds: Optional[float] = None
):
    """
    Log burnout analysis activity.

    Args:
        timestamp: Request timestamp
        status: Activity status ("success", "error")
        interaction_count: Number of interactions analyzed
        recipient_id: Care recipient UUID (recipient-scoped calls only)
        risk_score: Computed risk score (if successful)
        signals: Triggered signal messages
        insight_generated: Whether a generated insight was attached
        error: Error message (if failed)
        duration_seconds: Processing duration in seconds
    """
    _write_entry("burnout", {
        "timestamp": timestamp.isoformat(),
        "logged_at": datetime.now().isoformat(),
        "recipient_id": recipient_id,
        "status": status,
        "interaction_count": interaction_count,
        "risk_score": risk_score,
        "signals": signals or [],
        "insight_generated": insight_generated,
        "error": error,
        "duration_seconds": duration_seconds
    })


def log_prediction_activity(
    timestamp: datetime,
    status: str,  # "success", "error"
    interaction_count: int = 0,
    recipient_id: Optional[str] = None,
    prediction_count: Optional[int] = None,
    best_activity_count: Optional[int] = None,
    error: Optional[str] = None,
    duration_seconds: Optional[float] = None
):
    """
    Log beautiful-moment prediction activity.

    Args:
        timestamp: Request timestamp
        status: Activity status ("success", "error")
        interaction_count: Number of interactions analyzed
        recipient_id: Care recipient UUID (recipient-scoped calls only)
        prediction_count: Number of activity patterns predicted
        best_activity_count: Number of high-confidence best activities
        error: Error message (if failed)
        duration_seconds: Processing duration in seconds
    """
    _write_entry("prediction", {
        "timestamp": timestamp.isoformat(),
        "logged_at": datetime.now().isoformat(),
        "recipient_id": recipient_id,
        "status": status,
        "interaction_count": interaction_count,
        "prediction_count": prediction_count,
        "best_activity_count": best_activity_count,
        "error": error,
        "duration_seconds": duration_seconds
    })


def read_activity_logs(
    kind: str,
    limit: int = 100,
    recipient_id: Optional[str] = None
) -> list[Dict[str, Any]]:
    """
    Read activity logs of one kind.

    Args:
        kind: Log kind ("burnout" or "prediction")
        limit: Maximum number of entries to return
        recipient_id: Optional filter by recipient_id

    Returns:
        List of log entries (newest first)
    """
    log_dir = get_log_dir(kind)
    if not os.path.exists(log_dir):
        return []

    all_entries = []

    for log_file in Path(log_dir).glob("*.jsonl"):
        try:
            with open(log_file, 'r', encoding='utf-8') as f:
                for line in f:
                    line = line.strip()
                    if not line:
                        continue
                    try:
                        entry = json.loads(line)
                    except json.JSONDecodeError:
                        continue
                    if recipient_id and entry.get("recipient_id") != recipient_id:
                        continue
                    all_entries.append(entry)
        except OSError as e:
            logger.warning(f"Error reading log file {log_file}: {e}")
            continue

    def get_sort_key(entry):
        ts = entry.get("timestamp", "")
        try:
            return datetime.fromisoformat(ts.replace('Z', '+00:00')).timestamp()
        except (AttributeError, ValueError):
            return 0

    all_entries.sort(key=get_sort_key, reverse=True)
    return all_entries[:limit]
