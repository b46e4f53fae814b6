"""
DXX Sample Format Module

This module reads and writes the DXX family of sample files. The format is
chosen by the three-letter file suffix:

    ====  ======  =========================
    Tag   Layout  Element
    ====  ======  =========================
    DSA   text    16-bit signed integer
    DFA   text    32-bit float
    DDA   text    64-bit float
    DSB   binary  little-endian int16
    DFB   binary  little-endian float32
    DDB   binary  little-endian float64
    ====  ======  =========================

Text files hold one decimal value per line. Every write rescales the buffer so
that its peak equals the format's target amplitude, 64-bit formats included.
"""

import logging
import os
from enum import Enum
from typing import Optional, Union

import numpy as np

from .config import INT16_TARGET_AMPLITUDE, FLOAT_TARGET_AMPLITUDE
from .exceptions import (
    UnknownFormatError, ParseError, FileIOError, DegenerateSignalError, ValidationError
)
from .utils import MonoSignal

# Set up logging
logger = logging.getLogger(__name__)


class DType(Enum):
    """
    DXX sample formats, keyed by file suffix.

    Attributes:
        DSA: Text, 16-bit integer amplitudes
        DFA: Text, 32-bit float amplitudes
        DDA: Text, 64-bit float amplitudes
        DSB: Binary little-endian int16
        DFB: Binary little-endian float32
        DDB: Binary little-endian float64
    """
    DSA = 'DSA'
    DFA = 'DFA'
    DDA = 'DDA'
    DSB = 'DSB'
    DFB = 'DFB'
    DDB = 'DDB'

    @classmethod
    def from_filename(cls, path: Union[str, os.PathLike]) -> 'DType':
        """
        Determine the format from the text after the last '.' of a path.

        Args:
            path: File path

        Returns:
            The matching DType

        Raises:
            UnknownFormatError: If the suffix is missing or not one of the six tags
        """
        path = str(path)
        if '.' not in path:
            raise UnknownFormatError(path, None)

        suffix = path.rsplit('.', 1)[1]
        try:
            return cls(suffix)
        except ValueError:
            raise UnknownFormatError(path, suffix) from None

    @property
    def is_text(self) -> bool:
        return self.value.endswith('A')

    @property
    def numpy_dtype(self) -> np.dtype:
        """Element type on disk (little-endian)."""
        return _ELEMENT_TYPES[self.value[1]]

    @property
    def width(self) -> int:
        """Element width in bytes."""
        return self.numpy_dtype.itemsize

    @property
    def target_amplitude(self) -> float:
        """Peak amplitude every write normalizes to."""
        if self.value[1] == 'S':
            return INT16_TARGET_AMPLITUDE
        return FLOAT_TARGET_AMPLITUDE


_ELEMENT_TYPES = {
    'S': np.dtype('<i2'),
    'F': np.dtype('<f4'),
    'D': np.dtype('<f8'),
}


def normalize(samples: MonoSignal, target_amplitude: float,
              path: Optional[str] = None) -> MonoSignal:
    """
    Rescale a buffer so that its largest absolute value equals target_amplitude.

    Args:
        samples: Input samples
        target_amplitude: Peak value after rescaling
        path: File being written, used in error reports

    Returns:
        Rescaled float64 samples

    Raises:
        DegenerateSignalError: If the buffer is empty, all zeros, or not finite
    """
    samples = np.asarray(samples, dtype=np.float64)
    if samples.size == 0:
        raise DegenerateSignalError(path)

    peak = np.max(np.abs(samples))
    # A NaN or infinite sample would turn every output value into NaN
    if not np.isfinite(peak) or peak == 0:
        raise DegenerateSignalError(path)

    return samples / peak * target_amplitude


def quantize(values: MonoSignal, dtype: DType) -> np.ndarray:
    """
    Convert float64 values to the element type of a format.

    Narrowing to int16 or float32 truncates toward zero.

    Args:
        values: Float64 values within the range of the element type
        dtype: Target format

    Returns:
        Array with dtype.numpy_dtype elements
    """
    values = np.asarray(values, dtype=np.float64)
    kind = dtype.value[1]

    if kind == 'S':
        return np.trunc(values).astype(dtype.numpy_dtype)

    if kind == 'F':
        narrowed = values.astype(np.float32)
        # float32 conversion rounds to nearest; step back toward zero where it overshot
        overshoot = np.abs(narrowed.astype(np.float64)) > np.abs(values)
        narrowed[overshoot] = np.nextafter(narrowed[overshoot], np.float32(0))
        return narrowed.astype(dtype.numpy_dtype)

    return values.astype(dtype.numpy_dtype)


def read_file(path: Union[str, os.PathLike]) -> MonoSignal:
    """
    Read a DXX file.

    Binary files that end with a partial element lose that element. Integer
    samples are widened without scaling.

    Args:
        path: Path to a file with one of the six DXX suffixes

    Returns:
        Samples as a float64 array

    Raises:
        UnknownFormatError: If the suffix is not a DXX tag
        ParseError: If a line of a text file is not a number
        FileIOError: If the file cannot be read
    """
    path = str(path)
    dtype = DType.from_filename(path)

    try:
        with open(path, 'rb') as f:
            raw = f.read()
    except OSError as e:
        raise FileIOError(path, e) from e

    if dtype.is_text:
        return _parse_text(path, raw)

    usable = len(raw) - len(raw) % dtype.width
    if usable != len(raw):
        logger.debug(f"Dropping {len(raw) - usable} trailing bytes from {path}")
    return np.frombuffer(raw[:usable], dtype=dtype.numpy_dtype).astype(np.float64)


def _parse_text(path: str, raw: bytes) -> MonoSignal:
    lines = raw.decode('latin-1').split('\n')
    # A final terminator does not start another line
    if lines[-1] == '':
        lines.pop()

    values = []
    for line_number, line in enumerate(lines, start=1):
        if line.endswith('\r'):
            line = line[:-1]
        # float() also accepts digit separators and padding; plain decimals only
        if '_' in line or line != line.strip():
            raise ParseError(path, line_number, line)
        try:
            values.append(float(line))
        except ValueError:
            raise ParseError(path, line_number, line) from None
    return np.array(values, dtype=np.float64)


def _format_value(value, dtype: DType) -> str:
    kind = dtype.value[1]
    if kind == 'S':
        return str(int(value))
    if kind == 'F':
        # numpy prints the shortest string that round-trips at float32 precision
        return str(value)
    return repr(float(value))


def write_file(path: Union[str, os.PathLike], samples: MonoSignal) -> None:
    """
    Write samples to a DXX file, normalizing to the format's target amplitude.

    The destination is created or overwritten. A failure part-way through
    leaves whatever was written in place.

    Args:
        path: Output path with one of the six DXX suffixes
        samples: One-dimensional sample buffer

    Raises:
        UnknownFormatError: If the suffix is not a DXX tag
        DegenerateSignalError: If the buffer is empty, all zeros, or not finite
        FileIOError: If the file cannot be written
    """
    path = str(path)
    dtype = DType.from_filename(path)

    samples = np.asarray(samples, dtype=np.float64)
    if samples.ndim != 1:
        raise ValidationError(f"Expected a one-dimensional buffer, got shape {samples.shape}")

    quantized = quantize(normalize(samples, dtype.target_amplitude, path), dtype)

    if dtype.is_text:
        payload = ''.join(f"{_format_value(v, dtype)}\n" for v in quantized).encode('ascii')
    else:
        payload = quantized.tobytes()

    try:
        with open(path, 'wb') as f:
            f.write(payload)
    except OSError as e:
        raise FileIOError(path, e) from e


def convert_file(input_file: Union[str, os.PathLike],
                 output_file: Union[str, os.PathLike]) -> MonoSignal:
    """
    Convert a DXX file to another DXX format.

    Args:
        input_file: Source path
        output_file: Destination path; its suffix selects the output format

    Returns:
        The samples read from input_file
    """
    samples = read_file(input_file)
    logger.info(f"Read {len(samples)} samples from {input_file}")
    write_file(output_file, samples)
    logger.info(f"Wrote {output_file}")
    return samples
