import logging
from typing import Optional

import numpy as np

logger = logging.getLogger(__name__)

NUM_LANDMARKS = 21
WRIST = 0

# Finger joints fed to the classifier, tip first for each finger:
# thumb, index, middle, ring, little. The wrist only serves as origin.
FINGER_JOINTS = [
    4, 3, 2, 1,
    8, 7, 6, 5,
    12, 11, 10, 9,
    16, 15, 14, 13,
    20, 19, 18, 17,
]


class FeatureExtractor:
    def __init__(self):
        """Initialize the feature extractor."""
        # Feature dimension: (x, y) per finger joint
        self.feature_dim = len(FINGER_JOINTS) * 2

    def extract_features(self, landmarks: Optional[np.ndarray]) -> Optional[np.ndarray]:
        """Extract the classifier feature vector from one frame of hand landmarks.

        Args:
            landmarks: Array of shape (21, 2) or (21, 3) in image-normalized coordinates

        Returns:
            Feature vector of length feature_dim, or None if the landmarks are unusable
        """
        if landmarks is None:
            return None

        landmarks = np.asarray(landmarks, dtype=np.float64)
        if landmarks.ndim != 2 or landmarks.shape[0] != NUM_LANDMARKS or landmarks.shape[1] < 2:
            logger.warning(f"Unexpected landmark shape {landmarks.shape}")
            return None
        if not np.all(np.isfinite(landmarks[:, :2])):
            logger.warning("Landmarks contain non-finite values")
            return None

        # Relative to the wrist, x and y only
        relative = landmarks[FINGER_JOINTS, :2] - landmarks[WRIST, :2]
        features = relative.flatten()

        # Scale by the largest offset
        max_value = np.max(np.abs(features))
        if max_value > 0:
            features = features / max_value

        return features

    def extract_sequence(self, sequence: np.ndarray) -> np.ndarray:
        """Extract features for every usable frame of a (frames, 21, 3) sequence."""
        rows = []
        for frame_landmarks in sequence:
            features = self.extract_features(frame_landmarks)
            if features is not None:
                rows.append(features)

        if not rows:
            return np.empty((0, self.feature_dim))
        return np.array(rows)

    @staticmethod
    def landmarks_from_mediapipe(hand_landmarks) -> np.ndarray:
        """Convert a MediaPipe NormalizedLandmarkList to a (21, 3) array."""
        return np.array([[lm.x, lm.y, lm.z] for lm in hand_landmarks.landmark])
