"""
Report stage: what ended up in the output directory
"""
import logging
import math
import re
from pathlib import Path
from typing import List, Optional, Pattern

from ..models.config import PipelineConfig
from ..models.media import ClipResult, ReportedFile, RunReport

logger = logging.getLogger(__name__)

_UNITS = ["K", "M", "G", "T", "P"]


def human_size(num_bytes: int) -> str:
    """
    Format a byte count the way `ls -lh` and `du -sh` do: 512, 4.0K, 12M.
    Values round up, with one decimal below 10.
    """
    if num_bytes < 1024:
        return str(num_bytes)

    value = float(num_bytes)
    unit = ""
    for unit in _UNITS:
        value /= 1024.0
        if value < 1024 or unit == _UNITS[-1]:
            break

    if value < 10:
        rounded = math.ceil(value * 10) / 10
        if rounded < 10:
            return f"{rounded:.1f}{unit}"
        value = rounded
    return f"{math.ceil(value)}{unit}"


def clip_name_pattern(template: str) -> Pattern:
    head, _, tail = template.partition("{index}")
    return re.compile(re.escape(head) + r"(\d+)" + re.escape(tail) + r"$")


def directory_size(path: Path) -> int:
    if not path.is_dir():
        return 0
    return sum(f.stat().st_size for f in path.rglob("*") if f.is_file())


def list_clip_files(output_dir: Path, template: str) -> List[Path]:
    """Files in output_dir matching the clip naming pattern, ordered by index."""
    if not output_dir.is_dir():
        return []
    pattern = clip_name_pattern(template)
    matches = []
    for path in output_dir.iterdir():
        match = pattern.match(path.name)
        if match and path.is_file():
            matches.append((int(match.group(1)), path))
    return [path for _, path in sorted(matches)]


def build_report(
    output_dir: Path,
    results: List[ClipResult],
    config: PipelineConfig,
) -> RunReport:
    """
    Scan the output directory and summarize it.

    This is a directory listing, so clips left over from earlier runs are
    listed too; they are marked with produced_this_run=False.
    """
    output_dir = Path(output_dir)
    produced = {r.clip.path.resolve() for r in results if r.success}

    files = []
    for path in list_clip_files(output_dir, config.clip_name_template):
        size = path.stat().st_size
        files.append(ReportedFile(
            path=path,
            size_bytes=size,
            size_human=human_size(size),
            produced_this_run=path.resolve() in produced,
        ))

    total = directory_size(output_dir)
    report = RunReport(
        output_dir=output_dir,
        files=files,
        total_size_bytes=total,
        total_size_human=human_size(total),
        results=results,
        preview_url=config.preview_url,
    )

    if report.stale_files:
        logger.info(f"{len(report.stale_files)} listed clips were not produced by this run")
    return report


def render_report(report: RunReport, cache_path: Optional[Path] = None) -> str:
    lines = []
    if report.failed:
        lines.append(f"Finished with {report.failed} failed clip(s) "
                     f"({report.succeeded}/{len(report.results)} created)")
    else:
        lines.append("All background clips created!")
    lines.append("")

    lines.append("Files created:")
    for f in report.files:
        marker = "" if f.produced_this_run else "  [not from this run]"
        lines.append(f"  {f.path} ({f.size_human}){marker}")
    for result in report.results:
        if not result.success:
            lines.append(f"  {result.clip.path} FAILED: {result.error}")
    lines.append("")

    lines.append("Total size:")
    lines.append(f"{report.total_size_human}\t{report.output_dir}")
    lines.append("")

    lines.append("Background rotation is now active on your docs site!")
    lines.append(f"   Visit: {report.preview_url}")

    if cache_path is not None:
        lines.append("")
        lines.append("Optional cleanup:")
        lines.append(f"  rm {cache_path}  # Remove downloaded video to save space")

    return "\n".join(lines)
