"""
Clip extraction pipeline: acquisition, probe, plan, transcode, report
"""
import logging
import time
from pathlib import Path
from typing import Optional

from ..models.config import PipelineConfig
from ..models.media import ClipPlan, RunReport, SourceMedia
from .acquisition import acquire_source
from .errors import ErrorHandler, error_handler as default_error_handler
from .planner import plan_clips
from .probe import probe_duration
from .report import build_report
from .tools import ExternalTool, FFmpegToolchain
from .transcoder import transcode_all

logger = logging.getLogger(__name__)


class ClipPipeline:
    """
    Runs one batch from a frozen PipelineConfig.

    Each stage receives the previous stage's result. Tool and acquisition
    failures raise and stop the run; clip failures are recorded in the report.
    """

    def __init__(
        self,
        config: PipelineConfig,
        tools: Optional[ExternalTool] = None,
        error_handler: Optional[ErrorHandler] = None,
        show_progress: bool = False,
    ):
        self.config = config
        self.tools = tools or FFmpegToolchain(timeout=config.timeout_seconds)
        self.error_handler = error_handler or default_error_handler
        self.show_progress = show_progress

    def acquire(self) -> SourceMedia:
        self.tools.check_available()
        logger.info("All tools found")
        Path(self.config.output_dir).mkdir(parents=True, exist_ok=True)
        return acquire_source(self.config, self.tools)

    def plan(self, source: SourceMedia) -> ClipPlan:
        return plan_clips(source.duration, self.config.plan)

    def run(self) -> RunReport:
        started = time.perf_counter()
        logger.info(f"Starting clip extraction from {self.config.source.url}")

        source = self.acquire()

        duration = probe_duration(source.path, self.tools)
        source = source.model_copy(update={"duration": duration})

        plan = self.plan(source)

        results = transcode_all(
            plan,
            source,
            self.config,
            self.tools,
            error_handler=self.error_handler,
            show_progress=self.show_progress,
        )

        report = build_report(Path(self.config.output_dir), results, self.config)
        logger.info(
            f"Completed clip extraction in {time.perf_counter() - started:.2f}s "
            f"({report.succeeded} created, {report.failed} failed)"
        )
        return report
