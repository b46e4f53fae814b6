"""
Moving Sound Synthesis

Tools for synthesizing moving sound sources from measured
sound-localization transfer functions (SLTFs).
"""

__version__ = '0.1.0'
