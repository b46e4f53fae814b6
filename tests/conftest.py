"""
Pytest configuration file for moving sound synthesis tests.
"""

import pytest
import numpy as np
from moving_sound.synthesis.config import SynthesisConfig
from moving_sound.synthesis.utils import Channel


def _write_raw_ddb(path, values):
    np.asarray(values, dtype='<f8').tofile(str(path))


@pytest.fixture
def write_raw_ddb():
    """Return a function writing float64 samples without the normalization applied by write_file."""
    return _write_raw_ddb


@pytest.fixture
def test_config():
    """Return a configuration with a tiny sampling rate for hand-checkable outputs."""
    return SynthesisConfig(sampling_rate=8)


@pytest.fixture
def test_signal():
    """Nine samples; a sweep of 4 segments of 2 samples leaves the last one unused."""
    return np.arange(1.0, 10.0)


@pytest.fixture
def make_subject(tmp_path):
    """
    Return a factory building a subject directory with an SLTF directory.

    The factory takes a function mapping (angle, channel) to transfer-function
    samples and the angles to create, and returns the subject path.
    """
    def factory(transfer_function, angles=range(90, 111)):
        subject = tmp_path / 'SUBJECT'
        sltf_dir = subject / 'SLTF'
        sltf_dir.mkdir(parents=True, exist_ok=True)
        for angle in angles:
            for channel in Channel:
                _write_raw_ddb(sltf_dir / f'SLTF_{angle}_{channel.value}.DDB',
                              transfer_function(angle, channel))
        return str(subject)

    return factory


@pytest.fixture
def output_dir(tmp_path):
    """Return an empty output directory."""
    path = tmp_path / 'output'
    path.mkdir()
    return str(path)
