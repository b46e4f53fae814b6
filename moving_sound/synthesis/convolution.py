"""
Convolution and Overlap-Add Module

Linear convolution of short segments against transfer functions, and an
accumulator that sums the convolved segments at their offsets to rebuild one
long output signal.
"""

import numpy as np
from scipy import signal
from typing import Sequence, Union

from .config import SUPPORTED_CONVOLUTION_MODES
from .exceptions import SegmentOverflowError, ValidationError
from .utils import MonoSignal


def linear_convolve(x: Union[Sequence[float], np.ndarray],
                    h: Union[Sequence[float], np.ndarray],
                    method: str = 'direct') -> MonoSignal:
    """
    Full discrete linear convolution of two sequences.

    out[k] = sum_i x[i] * h[k - i], for k in [0, len(x) + len(h) - 1)

    Args:
        x: First sequence (length n)
        h: Second sequence (length m)
        method: 'direct' for the time-domain sum, 'fft' for FFT convolution

    Returns:
        Float64 array of length n + m - 1

    Raises:
        ValidationError: If either input is empty or the method is unknown
    """
    x = np.asarray(x, dtype=np.float64)
    h = np.asarray(h, dtype=np.float64)

    if x.size == 0 or h.size == 0:
        raise ValidationError("Cannot convolve an empty sequence")

    if method == 'direct':
        out = np.zeros(x.size + h.size - 1)
        for i, value in enumerate(x):
            out[i:i + h.size] += value * h
        return out
    elif method == 'fft':
        return signal.fftconvolve(x, h, mode='full')
    else:
        raise ValidationError(f"Unknown convolution method: {method}. "
                              f"Use one of: {SUPPORTED_CONVOLUTION_MODES}")


class OverlapAddAccumulator:
    """
    Output buffer for segmented convolution.

    Segment i of the input is convolved with its own transfer function and
    the result is added into the buffer starting at i * segment_length. The
    buffer is sized for the tail of the last segment and is never normalized.
    """

    def __init__(self, segment_length: int, segment_count: int, filter_length: int,
                 method: str = 'direct'):
        """
        Allocate a zeroed accumulator.

        Args:
            segment_length: Samples per input segment
            segment_count: Number of segments
            filter_length: Length of every transfer function
            method: Convolution method passed to linear_convolve
        """
        if segment_length <= 0 or segment_count <= 0 or filter_length <= 0:
            raise ValidationError(
                f"Accumulator dimensions must be positive: segment_length={segment_length}, "
                f"segment_count={segment_count}, filter_length={filter_length}")

        self.segment_length = segment_length
        self.segment_count = segment_count
        self.filter_length = filter_length
        self.method = method
        self.buffer = np.zeros(segment_count * segment_length + filter_length - 1)

    def __len__(self) -> int:
        return self.buffer.size

    def add(self, offset: int, values: np.ndarray) -> None:
        """Add values into the buffer starting at offset."""
        end = offset + values.size
        if offset < 0 or end > self.buffer.size:
            raise SegmentOverflowError(offset, values.size, self.buffer.size)
        self.buffer[offset:end] += values

    def add_segment(self, index: int, segment: np.ndarray,
                    transfer_function: np.ndarray) -> None:
        """
        Convolve one input segment and add it at its overlap-add offset.

        Args:
            index: Zero-based segment index
            segment: Input slice of segment_length samples
            transfer_function: Impulse response for this segment's angle
        """
        if len(segment) != self.segment_length:
            raise ValidationError(f"Segment {index} has {len(segment)} samples, "
                                  f"expected {self.segment_length}")

        convolved = linear_convolve(segment, transfer_function, self.method)
        self.add(index * self.segment_length, convolved)

    @property
    def output(self) -> MonoSignal:
        return self.buffer
