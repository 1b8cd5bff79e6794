"""
Timestamp planner: choose the start offset of every clip
"""
import logging
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from ..models.config import PlanConfig
from ..models.media import ClipPlan, PlanEntry
from .errors import ConfigurationError, ErrorContext

logger = logging.getLogger(__name__)


def parse_timestamp(value: str) -> int:
    """Whole seconds from '90', '1:30' or '00:01:30'."""
    text = value.strip()
    if not text:
        raise ValueError("Empty timestamp")

    parts = text.split(":")
    if len(parts) > 3:
        raise ValueError(f"Invalid timestamp '{value}'. Expected SS, MM:SS or HH:MM:SS")
    try:
        numbers = [int(part) for part in parts]
    except ValueError as exc:
        raise ValueError(f"Invalid timestamp '{value}'") from exc
    if any(n < 0 for n in numbers):
        raise ValueError(f"Timestamp must not be negative: '{value}'")
    if len(numbers) > 1 and any(n >= 60 for n in numbers[1:]):
        raise ValueError(f"Minutes and seconds must be below 60 in '{value}'")

    seconds = 0
    for n in numbers:
        seconds = seconds * 60 + n
    return seconds


def parse_timestamps(value: str) -> List[int]:
    return [parse_timestamp(part) for part in value.split(",") if part.strip()]


def _entries(offsets: Sequence[int]) -> List[PlanEntry]:
    return [PlanEntry(index=i, start_offset=offset) for i, offset in enumerate(offsets, start=1)]


class PlanningStrategy(ABC):
    """Turns a source duration into a ClipPlan"""

    @abstractmethod
    def plan(self, duration: Optional[int], config: PlanConfig) -> ClipPlan:
        ...


class EvenlySpacedStrategy(PlanningStrategy):
    """
    Split the source into clip_count + 1 equal intervals and start a clip at
    every inner boundary, so the last clip stays clear of the end.

    Sources that are shorter than min_duration, or whose duration is unknown,
    get the fixed fallback offsets instead. Those are not checked against the
    duration; clips past the end fail individually at transcode time.
    """

    def plan(self, duration: Optional[int], config: PlanConfig) -> ClipPlan:
        if duration is None or duration < config.min_duration:
            logger.warning("Video is very short or its duration is unknown, using fixed timestamps")
            if len(config.fallback_offsets) != config.clip_count:
                logger.warning(
                    f"Fallback table has {len(config.fallback_offsets)} offsets, "
                    f"clip_count is {config.clip_count}"
                )
            return ClipPlan(
                strategy="fallback",
                clip_duration=config.clip_duration,
                entries=_entries(config.fallback_offsets),
            )

        interval = duration // (config.clip_count + 1)
        offsets = [interval * i for i in range(1, config.clip_count + 1)]
        return ClipPlan(
            strategy="evenly_spaced",
            clip_duration=config.clip_duration,
            entries=_entries(offsets),
        )


class ExplicitStrategy(PlanningStrategy):
    """Use the operator's offsets verbatim, ignoring the duration"""

    def __init__(self, offsets: Sequence[int]):
        if not offsets:
            raise ConfigurationError("No explicit timestamps given",
                                     context=ErrorContext("plan"))
        negative = [offset for offset in offsets if offset < 0]
        if negative:
            raise ConfigurationError(f"Timestamps must not be negative: {negative}",
                                     context=ErrorContext("plan"))
        self.offsets = list(offsets)

    def plan(self, duration: Optional[int], config: PlanConfig) -> ClipPlan:
        if duration is not None:
            beyond = [o for o in self.offsets if o + config.clip_duration > duration]
            if beyond:
                logger.warning(f"Timestamps {beyond} run past the end of the {duration}s source")
        return ClipPlan(
            strategy="explicit",
            clip_duration=config.clip_duration,
            entries=_entries(self.offsets),
        )


def select_strategy(config: PlanConfig) -> PlanningStrategy:
    if config.explicit_offsets is not None:
        return ExplicitStrategy(config.explicit_offsets)
    return EvenlySpacedStrategy()


def plan_clips(duration: Optional[int], config: PlanConfig) -> ClipPlan:
    plan = select_strategy(config).plan(duration, config)
    logger.info(f"Planned {plan.count} clips ({plan.strategy}): {plan.start_offsets}")
    return plan
