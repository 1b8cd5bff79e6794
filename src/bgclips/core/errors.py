"""
Error handling system for bgclips
"""
import logging
import threading
import time
import traceback
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


class ErrorSeverity(Enum):
    """Error severity levels"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCategory(Enum):
    """Error categories, one per pipeline stage plus configuration"""
    TOOLING = "tooling"
    ACQUISITION = "acquisition"
    PROBE = "probe"
    TRANSCODE = "transcode"
    CONFIGURATION = "configuration"
    SYSTEM = "system"


@dataclass
class ErrorContext:
    """Context information for error handling"""
    operation: str
    file_path: Optional[str] = None
    clip_index: Optional[int] = None
    start_offset: Optional[int] = None
    additional_info: Optional[Dict[str, Any]] = None


@dataclass
class ErrorInfo:
    """Detailed error information"""
    error_type: str
    message: str
    severity: ErrorSeverity
    category: ErrorCategory
    context: ErrorContext
    traceback: Optional[str] = None
    timestamp: float = 0.0
    suggestions: Optional[List[str]] = None

    def __post_init__(self):
        if self.timestamp == 0.0:
            self.timestamp = time.time()

        if self.suggestions is None:
            self.suggestions = self._generate_suggestions()

    def _generate_suggestions(self) -> List[str]:
        """Generate troubleshooting suggestions"""
        suggestions = {
            ErrorCategory.TOOLING: [
                "Install yt-dlp: pip install yt-dlp (or: sudo apt install yt-dlp)",
                "Install ffmpeg: sudo apt install ffmpeg",
            ],
            ErrorCategory.ACQUISITION: [
                "Make sure yt-dlp is up to date: pip install -U yt-dlp",
                "Check if the video is publicly accessible",
                "Download the video manually and place it at the cache path",
            ],
            ErrorCategory.TRANSCODE: [
                "Check that the start offset lies inside the source video",
                "Adjust the clip timestamps with --timestamps",
            ],
            ErrorCategory.CONFIGURATION: [
                "Check the configuration file format",
                "Write a fresh default with --write-config",
            ],
        }

        return suggestions.get(self.category, [])


class BgClipsError(Exception):
    """Base exception class for bgclips"""

    def __init__(
        self,
        message: str,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        category: ErrorCategory = ErrorCategory.SYSTEM,
        context: Optional[ErrorContext] = None
    ):
        super().__init__(message)
        self.message = message
        self.severity = severity
        self.category = category
        self.context = context or ErrorContext("unknown")

    @property
    def is_fatal(self) -> bool:
        return self.severity in (ErrorSeverity.HIGH, ErrorSeverity.CRITICAL)

    def to_error_info(self) -> ErrorInfo:
        """Convert to ErrorInfo object"""
        return ErrorInfo(
            error_type=self.__class__.__name__,
            message=self.message,
            severity=self.severity,
            category=self.category,
            context=self.context,
            traceback=traceback.format_exc()
        )


class ToolNotFoundError(BgClipsError):
    """A required external binary is not on PATH"""
    def __init__(self, tool: str, context: Optional[ErrorContext] = None):
        super().__init__(
            f"{tool} not found",
            severity=ErrorSeverity.CRITICAL,
            category=ErrorCategory.TOOLING,
            context=context or ErrorContext("check_tools", additional_info={"tool": tool})
        )
        self.tool = tool


class DownloadError(BgClipsError):
    """Source video could not be acquired"""
    def __init__(self, message: str, context: Optional[ErrorContext] = None):
        super().__init__(
            message,
            severity=ErrorSeverity.CRITICAL,
            category=ErrorCategory.ACQUISITION,
            context=context
        )


class ProbeError(BgClipsError):
    """Duration could not be determined"""
    def __init__(self, message: str, context: Optional[ErrorContext] = None):
        super().__init__(
            message,
            severity=ErrorSeverity.LOW,
            category=ErrorCategory.PROBE,
            context=context
        )


class TranscodeError(BgClipsError):
    """A single clip failed to transcode"""
    def __init__(self, message: str, context: Optional[ErrorContext] = None):
        super().__init__(
            message,
            severity=ErrorSeverity.MEDIUM,
            category=ErrorCategory.TRANSCODE,
            context=context
        )


class ConfigurationError(BgClipsError):
    """Configuration related errors"""
    def __init__(self, message: str, context: Optional[ErrorContext] = None):
        super().__init__(
            message,
            severity=ErrorSeverity.HIGH,
            category=ErrorCategory.CONFIGURATION,
            context=context
        )


class ErrorHandler:
    """Centralized error handling system"""

    def __init__(self, max_history_size: int = 100):
        self.error_history: List[ErrorInfo] = []
        self.max_history_size = max_history_size
        self._lock = threading.Lock()

    def handle_error(
        self,
        error: Exception,
        context: Optional[ErrorContext] = None
    ) -> ErrorInfo:
        """Log an error at its severity level and record it"""
        if isinstance(error, BgClipsError):
            error_info = error.to_error_info()
        else:
            error_info = ErrorInfo(
                error_type=error.__class__.__name__,
                message=str(error),
                severity=ErrorSeverity.HIGH,
                category=ErrorCategory.SYSTEM,
                context=context or ErrorContext("unknown"),
                traceback=traceback.format_exc()
            )

        if context:
            error_info.context = context

        self._log_error(error_info)
        self._add_to_history(error_info)

        return error_info

    def _log_error(self, error_info: ErrorInfo):
        """Log error with appropriate level"""
        log_message = f"{error_info.category.value}: {error_info.message}"

        if error_info.severity == ErrorSeverity.CRITICAL:
            logger.critical(log_message)
        elif error_info.severity == ErrorSeverity.HIGH:
            logger.error(log_message)
        elif error_info.severity == ErrorSeverity.MEDIUM:
            logger.warning(log_message)
        else:
            logger.info(log_message)

        if error_info.severity in (ErrorSeverity.HIGH, ErrorSeverity.CRITICAL):
            for suggestion in error_info.suggestions or []:
                logger.info(f"  hint: {suggestion}")

    def _add_to_history(self, error_info: ErrorInfo):
        """Add error to history"""
        with self._lock:
            self.error_history.append(error_info)

            if len(self.error_history) > self.max_history_size:
                self.error_history.pop(0)

    def get_error_stats(self) -> Dict[str, Any]:
        """Get error statistics"""
        with self._lock:
            history = list(self.error_history)

        if not history:
            return {'total_errors': 0}

        category_counts = {}
        severity_counts = {}

        for error in history:
            category_counts[error.category.value] = category_counts.get(error.category.value, 0) + 1
            severity_counts[error.severity.value] = severity_counts.get(error.severity.value, 0) + 1

        return {
            'total_errors': len(history),
            'by_category': category_counts,
            'by_severity': severity_counts,
        }

    def clear_history(self):
        """Clear error history"""
        with self._lock:
            self.error_history.clear()


# Global error handler instance
error_handler = ErrorHandler()
