"""
Moving Sound Synthesis Package

Overlap-add synthesis of sounds moving along an angular sweep, and the DXX
sample file formats used for test signals, transfer functions and outputs.
"""

from .angles import calc_angles
from .config import SynthesisConfig
from .convolution import linear_convolve, OverlapAddAccumulator
from .formats import DType, read_file, write_file, convert_file
from .synthesizer import MotionSynthesizer, sltf_path, output_path, synthesize_from_files
from .utils import Channel, Direction, MotionParameters

__version__ = '0.1.0'
