"""
bgclips - Background clip extraction for the docs site homepage

Downloads one source video and cuts it into short, silent, scaled clips
that loop behind the landing page.
"""

__version__ = "1.0.0"
__description__ = "Background clip extraction pipeline"

from .core.pipeline import ClipPipeline
from .models.config import AppConfig, PipelineConfig, SOURCE_PRESETS
from .models.media import ClipPlan, RunReport, SourceMedia

__all__ = [
    "ClipPipeline",
    "AppConfig",
    "PipelineConfig",
    "SOURCE_PRESETS",
    "ClipPlan",
    "RunReport",
    "SourceMedia",
    "__version__",
    "__description__",
]
