"""
Angle Scheduling Module

Computes the sequence of transfer-function angles visited by a sweep. Angles
are integers in tenths of a degree and wrap around at the angle modulus.
"""

from .config import ANGLE_MODULUS
from .exceptions import ScheduleDegenerateError
from .utils import Angle, AngleSchedule


def normalize_angle(angle: int, modulus: int = ANGLE_MODULUS) -> Angle:
    """
    Wrap an angle into [0, modulus).

    Examples:
        >>> normalize_angle(-5)
        3595
        >>> normalize_angle(3605)
        5
    """
    # Python's modulo already maps negatives into [0, modulus)
    return angle % modulus


def start_angle(sweep_width: int, center_angle: int, clockwise: bool,
                modulus: int = ANGLE_MODULUS) -> Angle:
    """
    First angle of a sweep centered on center_angle.

    Clockwise sweeps start half a width below the center and counterclockwise
    sweeps start one step short of half a width above it, so both directions
    cover the same angles when the width is even.
    """
    half_width = sweep_width // 2
    if clockwise:
        start = center_angle - half_width
    else:
        start = center_angle + half_width - 1
    return normalize_angle(start, modulus)


def calc_angles(sweep_width: int, center_angle: int, clockwise: bool,
                modulus: int = ANGLE_MODULUS) -> AngleSchedule:
    """
    Compute the angle of every segment of a sweep.

    The walk folds back on itself every sweep_width steps (a triangular,
    ping-pong path). Within a single sweep of sweep_width steps no fold occurs,
    so the result is a run of consecutive angles.

    Args:
        sweep_width: Number of steps [10^-1 deg]
        center_angle: Angle in the middle of the sweep [10^-1 deg]
        clockwise: True for increasing angles, False for decreasing
        modulus: Angle at which values wrap around

    Returns:
        List of sweep_width angles, each in [0, modulus)

    Raises:
        ScheduleDegenerateError: If sweep_width is not positive

    Examples:
        >>> calc_angles(10, 0, True, modulus=360)
        [355, 356, 357, 358, 359, 0, 1, 2, 3, 4]
        >>> calc_angles(10, 0, False, modulus=360)
        [4, 3, 2, 1, 0, 359, 358, 357, 356, 355]
    """
    if sweep_width <= 0:
        raise ScheduleDegenerateError(sweep_width)

    start = start_angle(sweep_width, center_angle, clockwise, modulus)
    period = sweep_width * 2

    angles = []
    for i in range(sweep_width):
        offset = i % period
        if offset > sweep_width:
            offset = period - offset
        if not clockwise:
            offset = -offset
        angles.append(normalize_angle(start + offset, modulus))
    return angles
