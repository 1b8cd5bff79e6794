from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class SourceConfig(BaseModel):
    """
    Where the source video comes from and where the downloaded copy is cached.
    """

    model_config = ConfigDict(frozen=True)

    url: str = Field(
        default="https://youtu.be/nMBBXqu0OLE",
        description="URL of the source video passed to yt-dlp."
    )

    format_selector: str = Field(
        default="bestvideo[height<=1080][ext=mp4]+bestaudio[ext=m4a]/best[ext=mp4]/best",
        description="yt-dlp format selector (-f)."
    )

    merge_output_format: str = Field(
        default="mp4",
        description="Container the downloaded streams are merged into."
    )

    cache_path: str = Field(
        default="temp-bf6-gameplay.mp4",
        description="Local path of the downloaded source. An existing file is reused as-is."
    )


# The two entry points of the original tool differ only in their source.
SOURCE_PRESETS: Dict[str, SourceConfig] = {
    "youtube": SourceConfig(),
    "facebook": SourceConfig(
        url="https://www.facebook.com/watch/?v=1136294041346082",
        format_selector="best[ext=mp4]/best",
    ),
}


class EncodingConfig(BaseModel):
    """
    ffmpeg settings applied to every output clip.
    """

    model_config = ConfigDict(frozen=True)

    width: int = Field(
        default=1280,
        gt=0,
        description="Output width in pixels. Height follows the aspect ratio, rounded to an even value."
    )

    fps: int = Field(
        default=20,
        gt=0,
        le=120,
        description="Output frame rate."
    )

    video_codec: str = Field(
        default="libx264",
        description="ffmpeg video encoder."
    )

    crf: int = Field(
        default=23,
        ge=0,
        le=51,
        description="Constant rate factor. Higher values give smaller files."
    )

    preset: str = Field(
        default="fast",
        description="Encoder speed preset."
    )

    strip_audio: bool = Field(
        default=True,
        description="Drop all audio streams (-an)."
    )

    faststart: bool = Field(
        default=True,
        description="Move the moov atom to the front so playback starts before download completes."
    )


class PlanConfig(BaseModel):
    """
    Timestamp planning parameters.
    """

    model_config = ConfigDict(frozen=True)

    clip_count: int = Field(
        default=5,
        ge=1,
        le=100,
        description="Number of clips to produce with the evenly spaced strategy."
    )

    clip_duration: int = Field(
        default=5,
        ge=1,
        description="Length of every clip in seconds."
    )

    min_duration: int = Field(
        default=30,
        ge=0,
        description="Sources shorter than this (or of unknown length) use the fallback offsets."
    )

    fallback_offsets: List[int] = Field(
        default=[5, 10, 15, 20, 25],
        description="Start offsets used when the source is short or its duration is unknown. "
                    "The fallback plan has one clip per entry, independent of clip_count."
    )

    explicit_offsets: Optional[List[int]] = Field(
        default=None,
        description="Operator supplied start offsets. Bypasses even spacing when set."
    )


class PipelineConfig(BaseModel):
    """
    Everything one run of the pipeline needs. Passed unchanged to every stage.
    """

    model_config = ConfigDict(frozen=True)

    source: SourceConfig = Field(
        default_factory=SourceConfig,
        description="Source video configuration."
    )

    encoding: EncodingConfig = Field(
        default_factory=EncodingConfig,
        description="Output clip encoding."
    )

    plan: PlanConfig = Field(
        default_factory=PlanConfig,
        description="Timestamp planning."
    )

    output_dir: str = Field(
        default="docs/public/bg",
        description="Directory the clips are written to."
    )

    clip_name_template: str = Field(
        default="bg-clip-{index}.mp4",
        description="Output file name; {index} is the 1-based clip number."
    )

    max_workers: int = Field(
        default=1,
        ge=1,
        le=16,
        description="Concurrent transcodes. 1 keeps the stage sequential."
    )

    timeout_seconds: Optional[float] = Field(
        default=None,
        gt=0,
        description="Timeout for each external tool invocation. None waits indefinitely."
    )

    preview_url: str = Field(
        default="http://localhost:5174/",
        description="Local docs preview URL printed after a run."
    )


class LoggingConfig(BaseModel):
    """
    Logging configuration settings.
    """

    level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)."
    )

    log_file: Optional[str] = Field(
        default=None,
        description="Path to log file. If None, logs to console only."
    )

    max_file_size_mb: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Maximum log file size in megabytes."
    )

    backup_count: int = Field(
        default=5,
        ge=1,
        le=20,
        description="Number of backup log files to keep."
    )


class AppConfig(BaseModel):
    """
    Complete application configuration.
    """

    pipeline: PipelineConfig = Field(
        default_factory=PipelineConfig,
        description="Pipeline configuration."
    )

    logging: LoggingConfig = Field(
        default_factory=LoggingConfig,
        description="Logging configuration."
    )

    @classmethod
    def load_from_file(cls, config_path: str) -> 'AppConfig':
        """
        Load configuration from a JSON or YAML file.

        Args:
            config_path: Path to the configuration file.

        Returns:
            AppConfig instance.
        """
        import json
        from pathlib import Path

        import yaml

        path = Path(config_path)

        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(path, 'r', encoding='utf-8') as f:
            if path.suffix.lower() in ['.yaml', '.yml']:
                data = yaml.safe_load(f)
            else:
                data = json.load(f)

        return cls(**(data or {}))

    def save_to_file(self, config_path: str):
        """
        Save configuration to a JSON or YAML file.

        Args:
            config_path: Path to save the configuration file.
        """
        import json
        from pathlib import Path

        import yaml

        path = Path(config_path)
        path.parent.mkdir(parents=True, exist_ok=True)

        data = self.model_dump()

        with open(path, 'w', encoding='utf-8') as f:
            if path.suffix.lower() in ['.yaml', '.yml']:
                yaml.safe_dump(data, f, default_flow_style=False, allow_unicode=True, sort_keys=False)
            else:
                json.dump(data, f, indent=2, ensure_ascii=False)

    def validate_config(self) -> List[str]:
        """
        Validate cross-field constraints and return a list of error messages.
        """
        errors = []
        plan = self.pipeline.plan

        if "{index}" not in self.pipeline.clip_name_template:
            errors.append("Clip name template must contain {index}")

        if any(offset < 0 for offset in plan.fallback_offsets):
            errors.append("Fallback offsets must not be negative")

        if not plan.fallback_offsets:
            errors.append("At least one fallback offset is required")

        if plan.explicit_offsets is not None:
            if not plan.explicit_offsets:
                errors.append("Explicit offsets must not be empty")
            if any(offset < 0 for offset in plan.explicit_offsets):
                errors.append("Explicit offsets must not be negative")

        if self.logging.level.upper() not in ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']:
            errors.append(f"Invalid log level: {self.logging.level}")

        return errors
