import numpy as np
import pytest


def make_hand(seed: int, spread: float = 0.1) -> np.ndarray:
    """A synthetic (21, 3) hand whose shape depends on the seed."""
    rng = np.random.default_rng(seed)
    wrist = np.array([0.5, 0.8, 0.0])
    offsets = rng.uniform(-spread, spread, size=(21, 3))
    offsets[0] = 0.0
    return wrist + offsets


@pytest.fixture
def hand_shapes():
    return {letter: make_hand(seed) for seed, letter in enumerate("ABC")}


@pytest.fixture
def noisy_samples(hand_shapes):
    """Jittered recordings of three letters, shape (frames, 21, 3) each."""
    rng = np.random.default_rng(0)
    return {
        letter: hand + rng.normal(0, 0.002, size=(40, 21, 3))
        for letter, hand in hand_shapes.items()
    }
