"""
Limiting strategies and the per-tag strategy registry.
"""

from .limiting import (
    DiscardUntilEnoughTimeHasElapsedStrategy,
    DiscardWithMotionSensitivityStrategy,
    LimitingStrategy,
    StrategyKind,
    StrategySettings,
    current_millis,
)
from .registry import StrategyRegistry

__all__ = [
    'DiscardUntilEnoughTimeHasElapsedStrategy',
    'DiscardWithMotionSensitivityStrategy',
    'LimitingStrategy',
    'StrategyKind',
    'StrategyRegistry',
    'StrategySettings',
    'current_millis',
]
