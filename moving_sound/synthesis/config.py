"""
Configuration Management Module

This module provides centralized configuration management for the moving
sound synthesizer, including constants, default settings, and configuration
utilities.
"""

from typing import Dict, Any
from dataclasses import dataclass


# =====================================================================================
# Constants
# =====================================================================================

# Sampling rate of test signals and transfer functions
SAMPLING_RATE = 48000  # Hz

# Angles are integers in tenths of a degree
ANGLE_MODULUS = 3600  # [10^-1 deg]

# Peak amplitude written by each format family
INT16_TARGET_AMPLITUDE = 32767
FLOAT_TARGET_AMPLITUDE = 10000.0

# Path conventions
SLTF_DIRECTORY = 'SLTF'
SLTF_FILENAME = 'SLTF_{angle}_{channel}.DDB'
OUTPUT_FILENAME = 'move_judge_w{width:04d}_mt{velocity:04d}_{direction}_{angle:04d}_{channel}.DDB'

SUPPORTED_CONVOLUTION_MODES = ['direct', 'fft']


# =====================================================================================
# Configuration Classes
# =====================================================================================

@dataclass
class SynthesisConfig:
    """Configuration for moving sound synthesis"""

    # General settings
    sampling_rate: int = SAMPLING_RATE
    angle_modulus: int = ANGLE_MODULUS

    # Convolution settings
    convolution_mode: str = 'direct'  # 'direct' or 'fft'

    # Transfer functions are loaded fresh per segment unless cached
    cache_transfer_functions: bool = False
    transfer_function_cache_size: int = 64

    # Performance settings
    use_threading: bool = False
    thread_count: int = 4

    def __post_init__(self):
        """Validate configuration after initialization"""
        if self.sampling_rate <= 0:
            raise ValueError(f"Sampling rate must be positive, got {self.sampling_rate}")

        if self.angle_modulus <= 0:
            raise ValueError(f"Angle modulus must be positive, got {self.angle_modulus}")

        if self.convolution_mode not in SUPPORTED_CONVOLUTION_MODES:
            raise ValueError(f"Convolution mode {self.convolution_mode} not supported. "
                             f"Use one of: {SUPPORTED_CONVOLUTION_MODES}")

        if self.transfer_function_cache_size <= 0:
            raise ValueError("Transfer function cache size must be positive")

        if self.thread_count <= 0:
            raise ValueError("Thread count must be positive")

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary for serialization"""
        return {
            'sampling_rate': self.sampling_rate,
            'angle_modulus': self.angle_modulus,
            'convolution_mode': self.convolution_mode,
            'cache_transfer_functions': self.cache_transfer_functions,
            'transfer_function_cache_size': self.transfer_function_cache_size,
            'use_threading': self.use_threading,
            'thread_count': self.thread_count,
        }

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'SynthesisConfig':
        """Create configuration from dictionary"""
        try:
            return cls(**config_dict)
        except TypeError as e:
            # Unknown keys, or values that cannot be compared during validation
            raise ValueError(f"Invalid configuration: {e}") from e

    def save(self, file_path: str) -> None:
        """Save configuration to file"""
        import json
        with open(file_path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, file_path: str) -> 'SynthesisConfig':
        """Load configuration from file"""
        import json
        with open(file_path, 'r') as f:
            return cls.from_dict(json.load(f))


# Create a default configuration
default_config = SynthesisConfig()
