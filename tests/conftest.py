"""
Test configuration for bgclips
"""
import sys
from pathlib import Path
from typing import List, Optional, Set

import pytest

# Add src to Python path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from bgclips.core.errors import DownloadError, ProbeError, ToolNotFoundError, TranscodeError
from bgclips.core.tools import ExternalTool, TranscodeSpec
from bgclips.models.config import PipelineConfig, SourceConfig


class FakeToolchain(ExternalTool):
    """In-memory stand-in for yt-dlp, ffprobe and ffmpeg"""

    def __init__(
        self,
        duration: Optional[float] = 180.0,
        download_fails: bool = False,
        missing_tool: Optional[str] = None,
        fail_offsets: Optional[Set[int]] = None,
        clip_bytes: int = 2048,
    ):
        self.duration = duration
        self.download_fails = download_fails
        self.missing_tool = missing_tool
        self.fail_offsets = fail_offsets or set()
        self.clip_bytes = clip_bytes
        self.downloads: List[str] = []
        self.probes: List[Path] = []
        self.transcodes: List[TranscodeSpec] = []

    def check_available(self) -> None:
        if self.missing_tool:
            raise ToolNotFoundError(self.missing_tool)

    def download(self, url, dest_path, format_selector, merge_output_format="mp4"):
        self.downloads.append(url)
        if self.download_fails:
            raise DownloadError(f"yt-dlp exited with status 1 for {url}")
        Path(dest_path).write_bytes(b"source video")

    def probe_duration(self, path):
        self.probes.append(Path(path))
        if self.duration is None:
            raise ProbeError("Unparseable duration: ''")
        return self.duration

    def transcode(self, spec):
        self.transcodes.append(spec)
        past_end = self.duration is not None and spec.start_offset >= self.duration
        if spec.start_offset in self.fail_offsets or past_end:
            raise TranscodeError(f"ffmpeg exited with status 1 for {spec.output.name}")
        spec.output.write_bytes(b"\0" * (self.clip_bytes + spec.start_offset))


@pytest.fixture
def fake_tools():
    return FakeToolchain()


@pytest.fixture
def pipeline_config(tmp_path):
    """Default pipeline settings with every path inside tmp_path"""
    return PipelineConfig(
        source=SourceConfig(cache_path=str(tmp_path / "source.mp4")),
        output_dir=str(tmp_path / "bg"),
    )


@pytest.fixture
def cached_source(pipeline_config):
    path = Path(pipeline_config.source.cache_path)
    path.write_bytes(b"already downloaded")
    return path
