import logging
import os
from typing import Optional

import cv2
import mediapipe as mp
import numpy as np

from .. import config
from ..exceptions import CameraError
from ..feature_extraction.extractor import FeatureExtractor

logger = logging.getLogger(__name__)


class LetterCollector:
    def __init__(self, output_dir: str = config.DATA_DIR, camera_index: int = config.CAMERA_INDEX):
        """Initialize the letter collector."""
        self.output_dir = output_dir
        self.camera_index = camera_index
        self.mp_hands = mp.solutions.hands
        self.hands = self.mp_hands.Hands(
            static_image_mode=False,
            max_num_hands=1,
            min_detection_confidence=0.7,
            min_tracking_confidence=0.5
        )

        # Create output directory if it doesn't exist
        os.makedirs(output_dir, exist_ok=True)

    def collect_letter(self, letter: str, num_frames: int = 30) -> Optional[np.ndarray]:
        """
        Record a held letter from the camera.

        Frames are recorded while a hand is visible, after 's' is pressed.
        Recording stops once num_frames frames have been captured.

        Args:
            letter: Letter being signed
            num_frames: Number of frames to collect

        Returns:
            Array of hand landmarks if enough frames were captured, None otherwise
        """
        cap = cv2.VideoCapture(self.camera_index)
        if not cap.isOpened():
            raise CameraError(f"Could not open camera {self.camera_index}")

        frames = []
        recording = False

        logger.info(f"Collecting letter: {letter}. Press 's' to start, 'q' to quit")

        try:
            while len(frames) < num_frames:
                ret, frame = cap.read()
                if not ret:
                    logger.warning("Failed to read frame from camera")
                    break

                # Convert to RGB for MediaPipe
                frame_rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
                results = self.hands.process(frame_rgb)

                if results.multi_hand_landmarks:
                    hand_landmarks = results.multi_hand_landmarks[0]
                    mp.solutions.drawing_utils.draw_landmarks(
                        frame, hand_landmarks, self.mp_hands.HAND_CONNECTIONS)
                    if recording:
                        frames.append(FeatureExtractor.landmarks_from_mediapipe(hand_landmarks))

                status = f"Recording {letter}: {len(frames)}/{num_frames}" if recording \
                    else f"Letter {letter}: press 's' to record"
                cv2.putText(frame, status, (10, 30),
                            cv2.FONT_HERSHEY_SIMPLEX, 1, (0, 0, 255) if recording else (0, 255, 0), 2)
                cv2.imshow('Letter Collection', frame)

                key = cv2.waitKey(1) & 0xFF
                if key == ord('q'):
                    break
                elif key == ord('s'):
                    recording = True
        finally:
            cap.release()
            cv2.destroyAllWindows()

        if len(frames) < num_frames:
            logger.warning(f"Only captured {len(frames)}/{num_frames} frames for {letter}, discarding")
            return None

        landmarks = np.array(frames)
        self.save_letter(letter, landmarks)
        return landmarks

    def save_letter(self, letter: str, landmarks: np.ndarray) -> str:
        """
        Save a recorded letter to disk.

        Args:
            letter: Letter that was signed
            landmarks: Array of hand landmarks, shape (frames, 21, 3)

        Returns:
            Path to the saved file
        """
        letter_dir = os.path.join(self.output_dir, letter.upper())
        os.makedirs(letter_dir, exist_ok=True)

        # Save as numpy array
        save_path = os.path.join(letter_dir, f"{len(os.listdir(letter_dir))}.npy")
        np.save(save_path, landmarks)
        logger.info(f"Saved letter data to {save_path}")

        return save_path

    def close(self):
        """Release the MediaPipe hand tracker."""
        self.hands.close()
