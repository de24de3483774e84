"""
Limiting strategies deciding which measurements of a tag are kept.

A tag advertises roughly once a second; storing every advertisement is rarely
wanted. Each strategy instance belongs to one tag and decides, per
measurement, whether it is passed on (returned) or discarded (None).
"""

import threading
import time
from collections import deque
from enum import Enum
from typing import Callable, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from ..beacon.measurement import EnhancedRuuviMeasurement
from ..utils.config import ConfigurationError


Clock = Callable[[], int]


def current_millis() -> int:
    """Wall clock time in milliseconds."""
    return int(time.time() * 1000)


class LimitingStrategy:
    """
    Base class for limiting strategies.

    apply() is serialised per instance; subclasses implement _apply().
    """

    def __init__(self):
        self._lock = threading.Lock()

    def apply(self, measurement: EnhancedRuuviMeasurement) -> Optional[EnhancedRuuviMeasurement]:
        """
        Decide whether to keep a measurement.

        Returns:
            The measurement when it is kept, None when it is discarded
        """
        with self._lock:
            return self._apply(measurement)

    def _apply(self, measurement: EnhancedRuuviMeasurement) -> Optional[EnhancedRuuviMeasurement]:
        raise NotImplementedError


class DiscardUntilEnoughTimeHasElapsedStrategy(LimitingStrategy):
    """
    Keeps at most one measurement per update interval.

    The first measurement is always kept. Later ones are kept once the
    interval has elapsed since the last kept measurement.
    """

    def __init__(self, update_limit_ms: int, clock: Optional[Clock] = None, inclusive: bool = True):
        super().__init__()
        self.update_limit_ms = update_limit_ms
        self.clock = clock or current_millis
        self.inclusive = inclusive
        self.last_accepted: Optional[int] = None

    def _apply(self, measurement):
        now = self.clock()
        if self.last_accepted is None or self._has_elapsed(now):
            self.last_accepted = now
            return measurement
        return None

    def _has_elapsed(self, now: int) -> bool:
        deadline = self.last_accepted + self.update_limit_ms
        return now >= deadline if self.inclusive else now > deadline


class DiscardWithMotionSensitivityStrategy(LimitingStrategy):
    """
    Time gated strategy that also keeps measurements while the tag moves.

    When the time gate discards a measurement it is still kept if any
    acceleration axis changed by more than the threshold compared to the
    previous measurement. The first calm measurement after such motion is
    kept too, so the resting position is recorded.
    """

    def __init__(self,
                 update_limit_ms: int,
                 threshold: float,
                 history_size: int,
                 clock: Optional[Clock] = None,
                 inclusive: bool = True):
        super().__init__()
        self.default_strategy = DiscardUntilEnoughTimeHasElapsedStrategy(update_limit_ms, clock, inclusive)
        self.threshold = threshold
        self.history = deque(maxlen=history_size)
        self.outside_threshold = False

    def _apply(self, measurement):
        self.history.append(measurement)

        # The time gate is always consulted so its timer keeps running
        result = self.default_strategy.apply(measurement)
        if result is not None:
            return result

        if len(self.history) < 2:
            return None

        if self._is_outside_threshold(self.history[-2], self.history[-1]):
            self.outside_threshold = True
            return measurement

        if self.outside_threshold:
            # First calm reading after motion
            self.outside_threshold = False
            return measurement

        return None

    def _is_outside_threshold(self, previous, current) -> bool:
        for axis in ('acceleration_x', 'acceleration_y', 'acceleration_z'):
            before = getattr(previous, axis)
            after = getattr(current, axis)
            if before is None or after is None:
                continue
            if abs(after - before) > self.threshold:
                return True
        return False


class StrategyKind(str, Enum):
    """Available limiting strategies, by configuration name."""
    TIME_GATED = "time"
    MOTION_SENSITIVE = "motion"


class StrategySettings(BaseModel):
    """Validated limiting strategy parameters."""
    kind: StrategyKind = Field(StrategyKind.MOTION_SENSITIVE, description="Strategy to build")
    update_limit_ms: int = Field(9900, ge=0, description="Minimum interval between kept measurements")
    threshold: float = Field(0.05, ge=0, description="Acceleration change counted as motion (g)")
    history_size: int = Field(3, ge=1, description="Measurements remembered per tag")
    inclusive: bool = Field(True, description="Keep a measurement exactly at the interval boundary")

    @field_validator('kind', mode='before')
    @classmethod
    def kind_lowercase(cls, v):
        """Accept configuration names in any case."""
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @classmethod
    def from_config(cls, config, kind: Optional[str] = None) -> 'StrategySettings':
        """
        Build settings from a Config instance.

        Args:
            config: Configuration instance
            kind: Strategy name overriding the configured default

        Raises:
            ConfigurationError: If a parameter is out of range
        """
        try:
            return cls(
                kind=kind or config.limiting_strategy,
                update_limit_ms=config.update_limit_ms,
                threshold=config.motion_threshold,
                history_size=config.history_size,
                inclusive=config.update_limit_inclusive,
            )
        except ValidationError as e:
            raise ConfigurationError(f"Invalid limiting strategy settings: {e}")

    def create(self, clock: Optional[Clock] = None) -> LimitingStrategy:
        """Create a new strategy instance for one tag."""
        if self.kind == StrategyKind.TIME_GATED:
            return DiscardUntilEnoughTimeHasElapsedStrategy(self.update_limit_ms, clock, self.inclusive)
        return DiscardWithMotionSensitivityStrategy(
            self.update_limit_ms, self.threshold, self.history_size, clock, self.inclusive
        )
