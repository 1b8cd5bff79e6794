"""
Transcode stage: cut one silent, scaled clip per plan entry
"""
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import List, Optional

from tqdm import tqdm

from ..models.config import PipelineConfig
from ..models.media import ClipPlan, ClipResult, OutputClip, PlanEntry, SourceMedia
from .errors import ErrorContext, ErrorHandler, TranscodeError
from .tools import ExternalTool, TranscodeSpec

logger = logging.getLogger(__name__)


def clip_output_path(output_dir: Path, index: int, template: str = "bg-clip-{index}.mp4") -> Path:
    return Path(output_dir) / template.format(index=index)


def produce_clip(
    entry: PlanEntry,
    source: SourceMedia,
    config: PipelineConfig,
    clip_duration: int,
    tools: ExternalTool,
    error_handler: Optional[ErrorHandler] = None,
) -> ClipResult:
    """
    Transcode a single clip, overwriting any previous file at its path.

    A failure is logged and returned as an unsuccessful ClipResult; it never
    stops the remaining clips.
    """
    output = clip_output_path(Path(config.output_dir), entry.index, config.clip_name_template)
    clip = OutputClip(
        index=entry.index,
        path=output,
        width=config.encoding.width,
        fps=config.encoding.fps,
        audio=not config.encoding.strip_audio,
        faststart=config.encoding.faststart,
    )
    spec = TranscodeSpec(
        source=source.path,
        output=output,
        start_offset=entry.start_offset,
        duration=clip_duration,
        encoding=config.encoding,
    )

    logger.info(f"Creating clip {entry.index} (starting at {entry.start_offset}s)...")
    started = time.perf_counter()
    try:
        tools.transcode(spec)
    except TranscodeError as e:
        context = ErrorContext("transcode", file_path=str(output),
                               clip_index=entry.index, start_offset=entry.start_offset)
        if error_handler is not None:
            error_handler.handle_error(e, context)
        else:
            logger.warning(f"Clip {entry.index} may have issues: {e.message}")
        return ClipResult(entry=entry, clip=clip, success=False, error=e.message,
                          elapsed=time.perf_counter() - started)

    return ClipResult(entry=entry, clip=clip, success=True,
                      elapsed=time.perf_counter() - started)


def transcode_all(
    plan: ClipPlan,
    source: SourceMedia,
    config: PipelineConfig,
    tools: ExternalTool,
    error_handler: Optional[ErrorHandler] = None,
    show_progress: bool = False,
) -> List[ClipResult]:
    """
    Produce every clip in the plan and return the results in plan order.

    Clips are independent, so with max_workers > 1 they run on a thread pool.
    Either way this only returns once every clip has finished or failed.
    """
    def run(entry: PlanEntry) -> ClipResult:
        return produce_clip(entry, source, config, plan.clip_duration, tools, error_handler)

    results: List[ClipResult] = []
    with tqdm(total=plan.count, desc="Creating clips", unit="clip",
              disable=not show_progress) as progress:
        if config.max_workers == 1 or plan.count <= 1:
            for entry in plan.entries:
                results.append(run(entry))
                progress.update(1)
        else:
            with ThreadPoolExecutor(max_workers=config.max_workers) as pool:
                for result in pool.map(run, plan.entries):
                    results.append(result)
                    progress.update(1)

    failed = [r.entry.index for r in results if not r.success]
    if failed:
        logger.warning(f"{len(failed)} of {plan.count} clips failed: {failed}")
    return results
