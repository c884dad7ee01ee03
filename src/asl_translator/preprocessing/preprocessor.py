import numpy as np
from scipy.signal import savgol_filter

from .. import config


class Preprocessor:
    def __init__(self, window_size: int = config.SMOOTHING_WINDOW,
                 poly_order: int = config.SMOOTHING_POLY_ORDER):
        """
        Initialize the preprocessor.

        Args:
            window_size: Window size for Savitzky-Golay filter
            poly_order: Polynomial order for Savitzky-Golay filter
        """
        if poly_order >= window_size:
            raise ValueError("poly_order must be less than window_size")
        self.window_size = window_size
        self.poly_order = poly_order

    def preprocess(self, landmarks: np.ndarray) -> np.ndarray:
        """
        Smooth a recorded sequence of hand landmarks.

        Args:
            landmarks: Array of shape (sequence_length, 21, 3)

        Returns:
            Smoothed landmarks with the same shape. Sequences shorter than
            the filter window are returned unchanged.
        """
        landmarks = np.asarray(landmarks, dtype=np.float64)
        if landmarks.ndim != 3:
            raise ValueError(f"Expected (frames, landmarks, coords), got shape {landmarks.shape}")
        if landmarks.shape[0] < self.window_size:
            return landmarks

        # Filter every landmark coordinate along the time axis
        return savgol_filter(
            landmarks,
            window_length=self.window_size,
            polyorder=self.poly_order,
            axis=0
        )
