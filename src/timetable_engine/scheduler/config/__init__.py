"""Configuration for the scheduler."""

from .constraints import ConstraintsConfig, SchedulingLimits, SoftWeights, UnitSegment
from .loader import ConfigLoader

__all__ = [
    "ConfigLoader",
    "ConstraintsConfig",
    "SchedulingLimits",
    "SoftWeights",
    "UnitSegment",
]
