"""
Probe stage: duration of the source video in whole seconds
"""
import logging
from pathlib import Path
from typing import Optional

from .errors import ProbeError
from .tools import ExternalTool

logger = logging.getLogger(__name__)


def probe_duration(path: Path, tools: ExternalTool) -> Optional[int]:
    """
    Return the duration truncated to whole seconds, or None if it is unknown.

    An unknown duration is not an error; the planner falls back to fixed offsets.
    """
    try:
        seconds = tools.probe_duration(path)
    except ProbeError as e:
        logger.warning(f"Could not determine duration of {path}: {e.message}")
        return None

    if seconds < 0:
        logger.warning(f"Negative duration reported for {path}: {seconds}")
        return None

    duration = int(seconds)
    logger.info(f"Duration: {duration}s")
    return duration
