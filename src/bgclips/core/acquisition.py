"""
Acquisition stage: make sure the source video exists locally
"""
import logging
from pathlib import Path

from ..models.config import PipelineConfig
from ..models.media import SourceMedia
from .errors import DownloadError, ErrorContext
from .tools import ExternalTool

logger = logging.getLogger(__name__)


def acquire_source(config: PipelineConfig, tools: ExternalTool) -> SourceMedia:
    """
    Return the cached source video, downloading it first if it is missing.

    Any existing file at the cache path counts as a hit; it is not checked for
    staleness. A failed download raises DownloadError and is not retried.
    """
    source = config.source
    cache_path = Path(source.cache_path)

    if cache_path.is_file():
        logger.info(f"Video already downloaded (using cached version): {cache_path}")
        return SourceMedia(path=cache_path, cached=True)

    logger.info(f"Downloading source video: {source.url}")
    if cache_path.parent != Path("."):
        cache_path.parent.mkdir(parents=True, exist_ok=True)

    tools.download(
        source.url,
        cache_path,
        format_selector=source.format_selector,
        merge_output_format=source.merge_output_format,
    )

    if not cache_path.is_file():
        raise DownloadError(
            f"Downloader reported success but {cache_path} does not exist",
            context=ErrorContext("download", file_path=str(cache_path)),
        )

    logger.info("Download complete")
    return SourceMedia(path=cache_path, cached=False)
