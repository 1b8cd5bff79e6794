"""
Pipeline stages and external tool access
"""

from .errors import (
    BgClipsError,
    ConfigurationError,
    DownloadError,
    ErrorHandler,
    ProbeError,
    ToolNotFoundError,
    TranscodeError,
    error_handler,
)
from .pipeline import ClipPipeline
from .planner import EvenlySpacedStrategy, ExplicitStrategy, plan_clips
from .tools import ExternalTool, FFmpegToolchain, TranscodeSpec

__all__ = [
    "ClipPipeline",
    "ExternalTool",
    "FFmpegToolchain",
    "TranscodeSpec",
    "EvenlySpacedStrategy",
    "ExplicitStrategy",
    "plan_clips",
    "BgClipsError",
    "ToolNotFoundError",
    "DownloadError",
    "ProbeError",
    "TranscodeError",
    "ConfigurationError",
    "ErrorHandler",
    "error_handler",
]
