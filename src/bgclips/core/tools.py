"""
External tool interface: yt-dlp, ffprobe and ffmpeg
"""
import logging
import shutil
import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

from ..models.config import EncodingConfig
from .errors import (
    DownloadError,
    ErrorContext,
    ProbeError,
    ToolNotFoundError,
    TranscodeError,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TranscodeSpec:
    """Everything ffmpeg needs to cut one clip"""
    source: Path
    output: Path
    start_offset: int
    duration: int
    encoding: EncodingConfig

    def video_filter(self) -> str:
        # -2 keeps the aspect ratio with an even height for libx264
        return f"scale={self.encoding.width}:-2,fps={self.encoding.fps}"

    def to_args(self, binary: str = "ffmpeg") -> List[str]:
        args = [
            binary, "-y",
            "-ss", str(self.start_offset),
            "-t", str(self.duration),
            "-i", str(self.source),
            "-vf", self.video_filter(),
            "-c:v", self.encoding.video_codec,
            "-crf", str(self.encoding.crf),
            "-preset", self.encoding.preset,
        ]
        if self.encoding.strip_audio:
            args.append("-an")
        if self.encoding.faststart:
            args.extend(["-movflags", "+faststart"])
        args.append(str(self.output))
        args.extend(["-loglevel", "error", "-stats"])
        return args


class ExternalTool(ABC):
    """
    Operations the pipeline needs from the outside world.

    The pipeline only talks to this interface, so tests can substitute a fake.
    """

    @abstractmethod
    def check_available(self) -> None:
        """Raise ToolNotFoundError if a required binary is missing."""

    @abstractmethod
    def download(self, url: str, dest_path: Path, format_selector: str,
                 merge_output_format: str = "mp4") -> None:
        """Fetch url into dest_path. Raise DownloadError on failure."""

    @abstractmethod
    def probe_duration(self, path: Path) -> float:
        """Return the container duration in seconds. Raise ProbeError on failure."""

    @abstractmethod
    def transcode(self, spec: TranscodeSpec) -> None:
        """Produce spec.output. Raise TranscodeError on failure."""


class FFmpegToolchain(ExternalTool):
    """ExternalTool backed by the yt-dlp, ffprobe and ffmpeg binaries"""

    def __init__(
        self,
        timeout: Optional[float] = None,
        downloader: str = "yt-dlp",
        prober: str = "ffprobe",
        transcoder: str = "ffmpeg",
    ):
        self.timeout = timeout
        self.downloader = downloader
        self.prober = prober
        self.transcoder = transcoder

    def check_available(self) -> None:
        for tool in (self.downloader, self.transcoder):
            if shutil.which(tool) is None:
                raise ToolNotFoundError(tool)
            logger.debug(f"Found {tool}")

    def _run(self, args: Sequence[str], capture: bool = True) -> subprocess.CompletedProcess:
        logger.debug("Running: %s", " ".join(args))
        return subprocess.run(
            list(args),
            check=True,
            stdout=subprocess.PIPE if capture else None,
            stderr=subprocess.PIPE if capture else None,
            text=True,
            # tool output may carry non-UTF-8 metadata bytes
            encoding="utf-8",
            errors="replace",
            timeout=self.timeout,
        )

    def download(self, url: str, dest_path: Path, format_selector: str,
                 merge_output_format: str = "mp4") -> None:
        args = [
            self.downloader,
            "-f", format_selector,
            "--merge-output-format", merge_output_format,
            "-o", str(dest_path),
            url,
        ]
        context = ErrorContext("download", file_path=str(dest_path),
                               additional_info={"url": url})
        try:
            # Let yt-dlp draw its own progress on the terminal.
            self._run(args, capture=False)
        except subprocess.CalledProcessError as e:
            raise DownloadError(
                f"{self.downloader} exited with status {e.returncode} for {url}",
                context=context,
            ) from e
        except subprocess.TimeoutExpired as e:
            raise DownloadError(f"Download timed out after {e.timeout}s", context=context) from e
        except OSError as e:
            raise DownloadError(f"Could not start {self.downloader}: {e}", context=context) from e

    def probe_duration(self, path: Path) -> float:
        args = [
            self.prober,
            "-v", "error",
            "-show_entries", "format=duration",
            "-of", "default=noprint_wrappers=1:nokey=1",
            str(path),
        ]
        context = ErrorContext("probe", file_path=str(path))
        try:
            proc = self._run(args)
        except subprocess.CalledProcessError as e:
            raise ProbeError(f"ffprobe failed: {(e.stderr or '').strip()}", context=context) from e
        except subprocess.TimeoutExpired as e:
            raise ProbeError(f"ffprobe timed out after {e.timeout}s", context=context) from e
        except OSError as e:
            raise ProbeError(f"Could not start {self.prober}: {e}", context=context) from e

        output = (proc.stdout or "").strip()
        try:
            return float(output.splitlines()[0])
        except (IndexError, ValueError) as e:
            raise ProbeError(f"Unparseable duration: {output!r}", context=context) from e

    def transcode(self, spec: TranscodeSpec) -> None:
        context = ErrorContext("transcode", file_path=str(spec.output),
                               start_offset=spec.start_offset)
        try:
            self._run(spec.to_args(self.transcoder))
        except subprocess.CalledProcessError as e:
            stderr = (e.stderr or "").strip()
            raise TranscodeError(
                f"ffmpeg exited with status {e.returncode} for {spec.output.name}"
                + (f": {stderr.splitlines()[-1]}" if stderr else ""),
                context=context,
            ) from e
        except subprocess.TimeoutExpired as e:
            raise TranscodeError(
                f"ffmpeg timed out after {e.timeout}s for {spec.output.name}", context=context
            ) from e
        except OSError as e:
            raise TranscodeError(f"Could not start {self.transcoder}: {e}", context=context) from e
