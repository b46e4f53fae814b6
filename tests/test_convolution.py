"""
Unit tests for the convolution module.

These tests verify linear convolution and overlap-add accumulation.
"""

import pytest
import numpy as np
from moving_sound.synthesis.convolution import linear_convolve, OverlapAddAccumulator
from moving_sound.synthesis.exceptions import SegmentOverflowError, ValidationError


class TestLinearConvolve:
    """Tests for linear convolution."""

    def test_two_by_two(self):
        """Test the closed form for two-element inputs."""
        x0, x1, h0, h1 = 2.0, 3.0, 5.0, 7.0
        result = linear_convolve([x0, x1], [h0, h1])
        assert result.tolist() == [x0 * h0, x0 * h1 + x1 * h0, x1 * h1]

    def test_length_and_commutativity(self):
        """Test output length and symmetry in the two arguments."""
        x = np.random.randn(17)
        h = np.random.randn(5)
        forward = linear_convolve(x, h)
        backward = linear_convolve(h, x)
        assert len(forward) == 17 + 5 - 1
        assert np.allclose(forward, backward)

    def test_matches_numpy(self):
        """Test against numpy's full convolution."""
        x = np.random.randn(64)
        h = np.random.randn(9)
        assert np.allclose(linear_convolve(x, h), np.convolve(x, h))

    def test_fft_method(self):
        """Test that FFT convolution agrees with the direct sum."""
        x = np.random.randn(200)
        h = np.random.randn(31)
        assert np.allclose(linear_convolve(x, h, 'fft'), linear_convolve(x, h, 'direct'))

    def test_impulse(self):
        """Test that a unit impulse returns the other input."""
        h = np.array([0.5, -1.0, 2.0])
        assert linear_convolve([1.0], h).tolist() == h.tolist()

    def test_invalid_input(self):
        """Test empty inputs and unknown methods."""
        with pytest.raises(ValidationError):
            linear_convolve([], [1.0])
        with pytest.raises(ValidationError):
            linear_convolve([1.0], [])
        with pytest.raises(ValidationError):
            linear_convolve([1.0], [1.0], 'winograd')


class TestOverlapAddAccumulator:
    """Tests for overlap-add accumulation."""

    def test_length(self):
        """Test the accumulator size."""
        accumulator = OverlapAddAccumulator(segment_length=100, segment_count=8, filter_length=32)
        assert len(accumulator) == 8 * 100 + 32 - 1
        assert np.all(accumulator.output == 0)

    def test_equals_full_convolution_for_fixed_filter(self):
        """Test that overlap-add with one filter reproduces a single long convolution."""
        signal = np.random.randn(60)
        h = np.random.randn(7)
        accumulator = OverlapAddAccumulator(segment_length=10, segment_count=6, filter_length=7)
        for i in range(6):
            accumulator.add_segment(i, signal[i * 10:(i + 1) * 10], h)
        assert np.allclose(accumulator.output, np.convolve(signal, h))

    def test_segment_offsets(self):
        """Test that each segment lands at index * segment_length."""
        accumulator = OverlapAddAccumulator(segment_length=2, segment_count=3, filter_length=2)
        accumulator.add_segment(0, np.array([1.0, 2.0]), np.array([1.0, 1.0]))
        accumulator.add_segment(2, np.array([5.0, 6.0]), np.array([2.0, 0.0]))
        assert accumulator.output.tolist() == [1.0, 3.0, 2.0, 0.0, 10.0, 12.0, 0.0]

    def test_no_normalization(self):
        """Test that accumulated values are the raw sum."""
        accumulator = OverlapAddAccumulator(segment_length=1, segment_count=2, filter_length=2)
        accumulator.add_segment(0, np.array([1000.0]), np.array([3.0, 4.0]))
        accumulator.add_segment(1, np.array([1000.0]), np.array([3.0, 4.0]))
        assert accumulator.output.tolist() == [3000.0, 7000.0, 4000.0]

    def test_overflow(self):
        """Test that a filter longer than planned is rejected at the last segment."""
        accumulator = OverlapAddAccumulator(segment_length=2, segment_count=2, filter_length=1)
        accumulator.add_segment(0, np.ones(2), np.ones(3))
        with pytest.raises(SegmentOverflowError) as info:
            accumulator.add_segment(1, np.ones(2), np.ones(3))
        assert info.value.offset == 2
        assert info.value.length == 4
        assert info.value.capacity == 4

    def test_wrong_segment_length(self):
        """Test that segments must have the configured length."""
        accumulator = OverlapAddAccumulator(segment_length=4, segment_count=2, filter_length=2)
        with pytest.raises(ValidationError):
            accumulator.add_segment(0, np.ones(3), np.ones(2))

    def test_invalid_dimensions(self):
        """Test that zero dimensions are rejected."""
        with pytest.raises(ValidationError):
            OverlapAddAccumulator(segment_length=0, segment_count=4, filter_length=2)
