from pathlib import Path
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class SourceMedia(BaseModel):
    """
    The full-length video every clip is cut from.
    """

    model_config = ConfigDict(frozen=True)

    path: Path
    duration: Optional[int] = Field(default=None, ge=0)
    cached: bool = False


class PlanEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    index: int = Field(..., ge=1)
    start_offset: int = Field(..., ge=0)


class ClipPlan(BaseModel):
    """
    Ordered start offsets for one run, together with the strategy that made them.
    """

    model_config = ConfigDict(frozen=True)

    strategy: Literal["evenly_spaced", "explicit", "fallback"]
    clip_duration: int = Field(..., ge=1)
    entries: List[PlanEntry]

    @property
    def start_offsets(self) -> List[int]:
        return [entry.start_offset for entry in self.entries]

    @property
    def count(self) -> int:
        return len(self.entries)


class OutputClip(BaseModel):
    """
    One produced clip. Same index always maps to the same path.
    """

    model_config = ConfigDict(frozen=True)

    index: int = Field(..., ge=1)
    path: Path
    width: int
    fps: int
    audio: bool = False
    faststart: bool = True


class ClipResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    entry: PlanEntry
    clip: OutputClip
    success: bool
    error: Optional[str] = None
    elapsed: float = 0.0


class ReportedFile(BaseModel):
    path: Path
    size_bytes: int
    size_human: str
    produced_this_run: bool


class RunReport(BaseModel):
    """
    Summary of a run. Printed, never persisted.
    """

    output_dir: Path
    files: List[ReportedFile] = Field(default_factory=list)
    total_size_bytes: int = 0
    total_size_human: str = "0"
    results: List[ClipResult] = Field(default_factory=list)
    preview_url: str = ""

    @property
    def succeeded(self) -> int:
        return sum(1 for result in self.results if result.success)

    @property
    def failed(self) -> int:
        return sum(1 for result in self.results if not result.success)

    @property
    def stale_files(self) -> List[ReportedFile]:
        return [f for f in self.files if not f.produced_this_run]
