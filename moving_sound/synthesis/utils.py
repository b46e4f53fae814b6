"""
General Utility Functions and Definitions

This module contains type definitions, enumerations and data classes used
across the synthesis package.

See Also:
    - config: For centralized configuration management
"""

import numpy as np
from enum import Enum
from dataclasses import dataclass
from typing import List

from .config import SAMPLING_RATE
from .exceptions import ScheduleDegenerateError, ValidationError

# Type aliases for improved readability
MonoSignal = np.ndarray  # Shape: (n_samples,), float64
Angle = int  # Tenths of a degree
AngleSchedule = List[Angle]


class Direction(Enum):
    """
    Direction of the angular sweep.

    The value is the token used in output file names.

    Attributes:
        CLOCKWISE: Angles increase along the sweep
        COUNTERCLOCKWISE: Angles decrease along the sweep
    """
    CLOCKWISE = 'c'
    COUNTERCLOCKWISE = 'cc'

    @property
    def clockwise(self) -> bool:
        return self is Direction.CLOCKWISE


class Channel(Enum):
    """Ear channel of a transfer function."""
    LEFT = 'L'
    RIGHT = 'R'


@dataclass(frozen=True)
class MotionParameters:
    """
    Parameters of one moving sound.

    Attributes:
        sweep_width: Width of the sweep [10^-1 deg], also the segment count
        sweep_velocity: Angular velocity [10^-1 deg/sec]
        center_angle: Angle placed in the middle of the sweep [10^-1 deg]
    """
    sweep_width: int
    sweep_velocity: int
    center_angle: int

    def __post_init__(self):
        if self.sweep_width <= 0:
            raise ScheduleDegenerateError(self.sweep_width)
        if self.sweep_velocity <= 0:
            raise ValidationError(f"Sweep velocity must be positive, got {self.sweep_velocity}")
        if self.center_angle < 0:
            raise ValidationError(f"Center angle must be non-negative, got {self.center_angle}")

    @property
    def move_time(self) -> float:
        """Duration of the sweep in seconds."""
        return self.sweep_width / self.sweep_velocity

    def total_move_samples(self, sampling_rate: int = SAMPLING_RATE) -> int:
        """Duration of the sweep in samples, truncated."""
        return int(self.move_time * sampling_rate)

    def segment_length(self, sampling_rate: int = SAMPLING_RATE) -> int:
        """
        Number of samples spent at each angle of the sweep.

        Samples left over by the integer division are never used.
        """
        return self.total_move_samples(sampling_rate) // self.sweep_width
