"""
Statistical primitives shared by the burnout and prediction engines.
"""

import math
from typing import Iterable, Optional

HIGH_CONFIDENCE_MIN_SAMPLES = 5
MEDIUM_CONFIDENCE_MIN_SAMPLES = 3


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (2.5 -> 3)."""
    return int(math.floor(value + 0.5))


def average(values: Iterable[Optional[float]]) -> Optional[float]:
    """Mean of the present values, or None if nothing was recorded."""
    present = [v for v in values if v is not None]
    if not present:
        return None
    return sum(present) / len(present)


def rate(count: int, total: int) -> float:
    return count / total if total > 0 else 0.0


def confidence_level(sample_size: int) -> str:
    """Bucket a sample size into high / medium / low confidence."""
    if sample_size >= HIGH_CONFIDENCE_MIN_SAMPLES:
        return "high"
    if sample_size >= MEDIUM_CONFIDENCE_MIN_SAMPLES:
        return "medium"
    return "low"
