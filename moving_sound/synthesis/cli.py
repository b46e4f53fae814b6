"""
Command-Line Interface Module

Entry points for the moving sound synthesizer (overlap-add-middle) and the
DXX format converter (dxx-convert).
"""

import os
import sys
import logging
import argparse
import dataclasses
from typing import List, Optional

from .config import SynthesisConfig
from .exceptions import DXXError, ValidationError
from .formats import convert_file
from .synthesizer import synthesize_from_files
from .utils import MotionParameters

# Set up logging
logger = logging.getLogger(__name__)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO,
                        format='%(asctime)s - %(levelname)s - %(message)s')


def build_parser() -> argparse.ArgumentParser:
    """Argument parser for overlap-add-middle."""
    parser = argparse.ArgumentParser(
        description='Calculate moving sounds through the angle from the specified '
                    'move width and move velocity.')

    # Main arguments
    parser.add_argument('subject',
                        help='Directory of SUBJECT that has SLTF directory, i.e. path/to/SUBJECTS/NAME')
    parser.add_argument('sound_file',
                        help='Sound file convolved with the transfer functions, '
                             'typically white noise, i.e. path/to/wXXs.DSB')
    parser.add_argument('move_width', type=int, help='Moving width [10^-1 deg], i.e. 0080')
    parser.add_argument('move_velocity', type=int, help='Moving velocity [10^-1 deg/sec], i.e. 0160')
    parser.add_argument('angle', type=int, help='Angle placed in the middle [10^-1 deg], i.e. 0450')
    parser.add_argument('output', help='Output directory where convolved sounds are placed')

    # Processing options
    parser.add_argument('--config', help='JSON synthesis configuration file')
    parser.add_argument('--threads', type=int,
                        help='Render direction/channel combinations on this many threads')
    parser.add_argument('--cache', action='store_true',
                        help='Keep loaded transfer functions in memory')
    parser.add_argument('--fft', action='store_true', help='Use FFT convolution')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')

    return parser


def _load_config(args: argparse.Namespace) -> SynthesisConfig:
    config = SynthesisConfig.load(args.config) if args.config else SynthesisConfig()

    overrides = {}
    if args.threads is not None:
        overrides['use_threading'] = True
        overrides['thread_count'] = args.threads
    if args.cache:
        overrides['cache_transfer_functions'] = True
    if args.fft:
        overrides['convolution_mode'] = 'fft'
    return dataclasses.replace(config, **overrides)


def _validate_paths(args: argparse.Namespace) -> None:
    if not os.path.isdir(args.subject):
        raise ValidationError(f"subject is not a directory: {args.subject}")
    if not os.path.isfile(args.sound_file):
        raise ValidationError(f"sound_file is not a file: {args.sound_file}")
    if not os.path.isdir(args.output):
        raise ValidationError(f"output is not a directory: {args.output}")


def main(argv: Optional[List[str]] = None) -> int:
    """Command-line entry point for overlap-add-middle."""
    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose)

    try:
        _validate_paths(args)
        config = _load_config(args)
        params = MotionParameters(args.move_width, args.move_velocity, args.angle)

        logger.info(f"Sweep of {params.sweep_width} steps at {params.sweep_velocity} "
                    f"[10^-1 deg/sec] around {params.center_angle}: "
                    f"{params.total_move_samples(config.sampling_rate)} samples")

        results = synthesize_from_files(args.subject, args.sound_file, params,
                                        args.output, config)
    except (DXXError, ValueError, OSError) as e:
        logger.error(f"Synthesis failed: {str(e)}")
        return 1

    logger.info(f"Wrote {len(results)} files to {args.output}")
    return 0


def convert_main(argv: Optional[List[str]] = None) -> int:
    """Command-line entry point for dxx-convert."""
    parser = argparse.ArgumentParser(description='DXX Sample Format Converter')
    parser.add_argument('input', help='Input DXX file, i.e. sine.DSB')
    parser.add_argument('output', help='Output DXX file, i.e. sine.DSA')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')
    args = parser.parse_args(argv)

    _configure_logging(args.verbose)

    try:
        convert_file(args.input, args.output)
    except DXXError as e:
        logger.error(f"Conversion failed: {str(e)}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
