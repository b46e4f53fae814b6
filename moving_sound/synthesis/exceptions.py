"""
Custom Exceptions Module

This module defines the exception hierarchy for the moving sound synthesizer
and the DXX sample codec. Errors carry the context needed to report them
(path, offset, expected vs. actual) as attributes.
"""

from typing import Optional


class DXXError(Exception):
    """Base exception class for all synthesis and codec errors."""
    pass


class UnknownFormatError(DXXError):
    """File suffix does not name a DXX format."""

    def __init__(self, path: str, suffix: Optional[str]):
        self.path = path
        self.suffix = suffix
        super().__init__(f"Unknown DXX format {suffix!r} for file: {path}")


class ParseError(DXXError):
    """Non-numeric line in a text-format file."""

    def __init__(self, path: str, line_number: int, text: str):
        self.path = path
        self.line_number = line_number
        self.text = text
        super().__init__(f"{path}:{line_number}: cannot parse {text!r} as a number")


class FileIOError(DXXError):
    """Error during file I/O operations."""

    def __init__(self, path: str, cause: OSError):
        self.path = path
        self.cause = cause
        super().__init__(f"I/O error on {path}: {cause}")


class DegenerateSignalError(DXXError):
    """All-zero (or empty) buffer passed to peak normalization."""

    def __init__(self, path: Optional[str] = None):
        self.path = path
        where = f" for {path}" if path else ""
        super().__init__(f"Cannot normalize a signal with zero or non-finite peak{where}")


class ScheduleDegenerateError(DXXError):
    """Sweep width or segment length of zero."""

    def __init__(self, sweep_width: int, segment_length: Optional[int] = None):
        self.sweep_width = sweep_width
        self.segment_length = segment_length
        if segment_length is None:
            message = f"Sweep width must be positive, got {sweep_width}"
        else:
            message = (f"Segment length is {segment_length} for sweep width {sweep_width}; "
                       f"the sweep is too fast for the sampling rate")
        super().__init__(message)


class SignalTooShortError(DXXError):
    """Test signal holds fewer samples than the sweep consumes."""

    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Test signal has {actual} samples, sweep needs {expected}")


class SegmentOverflowError(DXXError):
    """Convolved segment would be written past the end of the accumulator."""

    def __init__(self, offset: int, length: int, capacity: int):
        self.offset = offset
        self.length = length
        self.capacity = capacity
        super().__init__(f"Segment of length {length} at offset {offset} "
                         f"overflows accumulator of length {capacity}")


class ValidationError(DXXError):
    """Error during parameter validation."""
    pass
