"""
Moving Sound Synthesis Module

This module renders a sound moving along an angular sweep. The test signal is
cut into equal segments, each segment is convolved with the sound-localization
transfer function (SLTF) measured at the angle the source occupies during that
segment, and the convolved segments are overlap-added into one output per
sweep direction and ear.

Transfer functions are located through a path-naming function, so the
directory layout of a measurement set is not fixed by the synthesizer.
"""

import os
import functools
import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

import numpy as np

from .angles import calc_angles
from .config import SynthesisConfig, SLTF_DIRECTORY, SLTF_FILENAME, OUTPUT_FILENAME
from .convolution import OverlapAddAccumulator
from .exceptions import ScheduleDegenerateError, SignalTooShortError, ValidationError
from .formats import read_file, write_file
from .utils import Angle, AngleSchedule, Channel, Direction, MonoSignal, MotionParameters

# Set up logging
logger = logging.getLogger(__name__)

TransferFunctionPath = Callable[[Angle, Channel], str]


def sltf_path(subject: str) -> TransferFunctionPath:
    """
    Path-naming function for a subject directory.

    Transfer functions live at <subject>/SLTF/SLTF_<angle>_<L|R>.DDB, with the
    angle written as a bare integer.

    Args:
        subject: Subject directory containing the SLTF directory

    Returns:
        Function mapping (angle, channel) to a file path
    """
    def path_for(angle: Angle, channel: Channel) -> str:
        filename = SLTF_FILENAME.format(angle=angle, channel=channel.value)
        return os.path.join(subject, SLTF_DIRECTORY, filename)

    return path_for


def output_path(output_dir: str, params: MotionParameters,
                direction: Direction, channel: Channel) -> str:
    """
    Output file path for one direction and channel.

    Returns:
        <output_dir>/move_judge_w<width>_mt<velocity>_<c|cc>_<angle>_<L|R>.DDB
    """
    filename = OUTPUT_FILENAME.format(
        width=params.sweep_width,
        velocity=params.sweep_velocity,
        direction=direction.value,
        angle=params.center_angle,
        channel=channel.value,
    )
    return os.path.join(output_dir, filename)


class TransferFunctionStore:
    """
    Loads transfer functions by angle and channel.

    Every call reads the file again unless caching is enabled, in which case
    the most recently used transfer functions are kept in memory.
    """

    def __init__(self, path_for: TransferFunctionPath, cache_size: Optional[int] = None):
        self.path_for = path_for
        self.loads = 0
        if cache_size:
            self.load = functools.lru_cache(maxsize=cache_size)(self._read)
        else:
            self.load = self._read

    def _read(self, angle: Angle, channel: Channel) -> MonoSignal:
        path = self.path_for(angle, channel)
        logger.debug(f"Loading transfer function {path}")
        self.loads += 1
        return read_file(path)


@dataclass
class SynthesisResult:
    """Outcome of one direction and channel."""
    direction: Direction
    channel: Channel
    path: str
    angles: AngleSchedule
    length: int


class MotionSynthesizer:
    """
    Overlap-add synthesizer for moving sounds.

    Each (direction, channel) combination owns its accumulator and its
    transfer-function store, so combinations can run on separate threads.
    """

    def __init__(self, transfer_function_path: TransferFunctionPath,
                 config: Optional[SynthesisConfig] = None):
        """
        Initialize the synthesizer.

        Args:
            transfer_function_path: Maps (angle, channel) to a transfer-function file
            config: Synthesis configuration (defaults if None)
        """
        self.transfer_function_path = transfer_function_path
        self.config = config if config is not None else SynthesisConfig()

    def _new_store(self) -> TransferFunctionStore:
        cache_size = None
        if self.config.cache_transfer_functions:
            cache_size = self.config.transfer_function_cache_size
        return TransferFunctionStore(self.transfer_function_path, cache_size)

    def schedule(self, params: MotionParameters, direction: Direction) -> AngleSchedule:
        """Angle of every segment for one sweep direction."""
        return calc_angles(params.sweep_width, params.center_angle,
                           direction.clockwise, self.config.angle_modulus)

    def _synthesize(self, signal: MonoSignal, params: MotionParameters,
                    direction: Direction, channel: Channel) -> Tuple[MonoSignal, AngleSchedule]:
        signal = np.asarray(signal, dtype=np.float64)
        if signal.ndim != 1:
            raise ValidationError(f"Test signal must be one-dimensional, got shape {signal.shape}")

        segment_length = params.segment_length(self.config.sampling_rate)
        if segment_length == 0:
            raise ScheduleDegenerateError(params.sweep_width, segment_length)

        needed = segment_length * params.sweep_width
        if signal.size < needed:
            raise SignalTooShortError(needed, signal.size)

        angles = self.schedule(params, direction)
        store = self._new_store()

        # The first transfer function sizes the accumulator
        transfer_function = store.load(angles[0], channel)
        accumulator = OverlapAddAccumulator(segment_length, params.sweep_width,
                                            len(transfer_function), self.config.convolution_mode)

        for i, angle in enumerate(angles):
            if i > 0:
                transfer_function = store.load(angle, channel)
            segment = signal[i * segment_length:(i + 1) * segment_length]
            accumulator.add_segment(i, segment, transfer_function)

        return accumulator.output, angles

    def synthesize_channel(self, signal: MonoSignal, params: MotionParameters,
                           direction: Direction, channel: Channel) -> MonoSignal:
        """
        Render one direction for one ear without writing it.

        Args:
            signal: Test signal; samples beyond sweep_width * segment_length are unused
            params: Sweep parameters
            direction: Sweep direction
            channel: Ear

        Returns:
            Un-normalized overlap-add output of length
            sweep_width * segment_length + filter_length - 1

        Raises:
            ScheduleDegenerateError: If the sweep leaves less than one sample per segment
            SignalTooShortError: If the signal is shorter than the sweep
        """
        output, _ = self._synthesize(signal, params, direction, channel)
        return output

    def _run_combination(self, signal: MonoSignal, params: MotionParameters,
                         direction: Direction, channel: Channel,
                         output_dir: str) -> SynthesisResult:
        output, angles = self._synthesize(signal, params, direction, channel)
        path = output_path(output_dir, params, direction, channel)
        write_file(path, output)

        logger.info(f"{path}, length={len(output)}")
        logger.info(f"angles={angles}")
        return SynthesisResult(direction, channel, path, angles, len(output))

    def run(self, signal: MonoSignal, params: MotionParameters,
            output_dir: str) -> List[SynthesisResult]:
        """
        Render and write every direction and channel.

        Combinations are processed clockwise before counterclockwise, left
        before right. The first error aborts the run; files written for
        earlier combinations are left in place. On threads, combinations
        already running finish and the rest are skipped.

        Args:
            signal: Test signal
            params: Sweep parameters
            output_dir: Directory receiving the output files

        Returns:
            One SynthesisResult per combination, in processing order
        """
        combinations = [(direction, channel) for direction in Direction for channel in Channel]

        if not self.config.use_threading:
            return [self._run_combination(signal, params, direction, channel, output_dir)
                    for direction, channel in combinations]

        failed = threading.Event()

        def guarded(direction: Direction, channel: Channel) -> Optional[SynthesisResult]:
            # Combinations that start after a failure are skipped
            if failed.is_set():
                return None
            try:
                return self._run_combination(signal, params, direction, channel, output_dir)
            except Exception:
                failed.set()
                raise

        workers = min(self.config.thread_count, len(combinations))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [executor.submit(guarded, direction, channel)
                       for direction, channel in combinations]
            try:
                return [future.result() for future in futures]
            except Exception:
                for future in futures:
                    future.cancel()
                raise


def synthesize_from_files(subject: str, sound_file: str, params: MotionParameters,
                          output_dir: str,
                          config: Optional[SynthesisConfig] = None) -> List[SynthesisResult]:
    """
    Run a synthesis from a subject directory and a test-signal file.

    Args:
        subject: Directory containing SLTF/SLTF_<angle>_<L|R>.DDB
        sound_file: DXX file holding the test signal (typically white noise)
        params: Sweep parameters
        output_dir: Directory receiving the output files
        config: Synthesis configuration (defaults if None)

    Returns:
        One SynthesisResult per direction and channel
    """
    signal = read_file(sound_file)
    logger.info(f"Loaded test signal {sound_file} ({len(signal)} samples)")

    synthesizer = MotionSynthesizer(sltf_path(subject), config)
    return synthesizer.run(signal, params, output_dir)
