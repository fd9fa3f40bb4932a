import os
import sys

import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from utils import activity_logger


@pytest.fixture(autouse=True)
def isolated_activity_logs(tmp_path, monkeypatch):
    """Keep activity log files out of the working tree."""
    log_dir = tmp_path / "activity_logs"
    monkeypatch.setattr(activity_logger, "BASE_LOG_DIR", str(log_dir))
    return log_dir
