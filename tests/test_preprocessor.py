import numpy as np
import pytest

from asl_translator.preprocessing.preprocessor import Preprocessor


def test_smoothing_reduces_jitter():
    rng = np.random.default_rng(1)
    clean = np.tile(np.linspace(0, 1, 21)[None, :, None], (30, 1, 3))
    noisy = clean + rng.normal(0, 0.05, size=clean.shape)

    smoothed = Preprocessor().preprocess(noisy)

    assert smoothed.shape == noisy.shape
    assert np.abs(smoothed - clean).mean() < np.abs(noisy - clean).mean()


def test_short_sequence_returned_unchanged():
    sequence = np.random.default_rng(2).random((3, 21, 3))
    np.testing.assert_array_equal(Preprocessor(window_size=5).preprocess(sequence), sequence)


def test_rejects_wrong_rank():
    with pytest.raises(ValueError):
        Preprocessor().preprocess(np.zeros((21, 3)))


def test_rejects_poly_order_not_below_window():
    with pytest.raises(ValueError):
        Preprocessor(window_size=3, poly_order=3)
