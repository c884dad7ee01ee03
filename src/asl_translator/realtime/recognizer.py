import logging
from typing import Optional

import cv2
import mediapipe as mp
import numpy as np

from .. import config
from ..exceptions import CameraError, TranslatorError
from ..feature_extraction.extractor import FeatureExtractor
from ..models.letter_model import LetterModel
from .sampler import FrameSampler
from .stabilizer import LetterStabilizer, RawClassification
from .transcript import TranslationSession

logger = logging.getLogger(__name__)


class LetterRecognizer:
    def __init__(self, model: LetterModel,
                 session: Optional[TranslationSession] = None,
                 sampler: Optional[FrameSampler] = None,
                 min_hand_score: float = config.JOINT_CONFIDENCE_THRESHOLD,
                 camera_index: int = config.CAMERA_INDEX):
        """
        Initialize the letter recognizer.

        Args:
            model: Trained letter classifier
            session: Translation session receiving the observations
            sampler: Throttle deciding which captured frames get classified
            min_hand_score: Hands detected with a lower score count as no hand
            camera_index: OpenCV capture device index
        """
        self.model = model
        self.session = session or TranslationSession()
        self.sampler = sampler or FrameSampler()
        self.min_hand_score = min_hand_score
        self.camera_index = camera_index

        self.feature_extractor = FeatureExtractor()
        self.last_classification: Optional[RawClassification] = None

        # MediaPipe is set up lazily so the classification path needs no camera
        self.mp_hands = None
        self.hands = None

    @property
    def stabilizer(self) -> LetterStabilizer:
        return self.session.stabilizer

    def process_landmarks(self, landmarks: Optional[np.ndarray],
                          hand_score: Optional[float] = None) -> RawClassification:
        """
        Classify one sampled frame and feed the result to the session.

        Args:
            landmarks: (21, 3) hand landmarks, or None when no hand was found
            hand_score: Detection score reported for the hand

        Returns:
            The raw classification that was observed
        """
        if landmarks is None or (hand_score is not None and hand_score < self.min_hand_score):
            classification = RawClassification(label=None)
        else:
            try:
                features = self.feature_extractor.extract_features(landmarks)
                classification = self.model.predict(features)
            except TranslatorError:
                raise
            except Exception as e:
                # Skip the frame entirely; the stabilizer state stays as it was
                logger.error(f"Inference failed, skipping frame: {e}")
                return RawClassification(label=None)

        self.last_classification = classification
        self.session.observe(classification.label, classification.confidence)
        return classification

    def _process_frame(self, frame: np.ndarray):
        frame_rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        results = self.hands.process(frame_rgb)

        if not results.multi_hand_landmarks:
            self.process_landmarks(None)
            return

        hand_landmarks = results.multi_hand_landmarks[0]
        hand_score = None
        if results.multi_handedness:
            hand_score = results.multi_handedness[0].classification[0].score

        mp.solutions.drawing_utils.draw_landmarks(
            frame, hand_landmarks, self.mp_hands.HAND_CONNECTIONS)
        self.process_landmarks(FeatureExtractor.landmarks_from_mediapipe(hand_landmarks), hand_score)

    def _draw_overlay(self, frame: np.ndarray):
        if self.last_classification is not None and self.last_classification.label is not None:
            confidence = self.last_classification.confidence or 0.0
            cv2.putText(frame, f"{self.last_classification.label}: {confidence:.2f}", (10, 30),
                        cv2.FONT_HERSHEY_SIMPLEX, 1, (0, 255, 0), 2)

        stabilizer = self.stabilizer
        if stabilizer.current_candidate is not None:
            cv2.putText(frame, f"Holding {stabilizer.current_candidate} "
                               f"({stabilizer.streak}/{stabilizer.commit_threshold})", (10, 70),
                        cv2.FONT_HERSHEY_SIMPLEX, 0.8, (255, 255, 0), 2)

        # Only the tail of long transcripts fits on screen
        text = self.session.text[-40:]
        cv2.putText(frame, text, (10, frame.shape[0] - 20),
                    cv2.FONT_HERSHEY_SIMPLEX, 1, (255, 255, 255), 2)

    def edit_transcript(self):
        """Let the user rewrite the transcript from the terminal."""
        print(f"Current text: {self.session.text}")
        edited = input("Enter corrected text (empty keeps it): ")
        if edited:
            self.session.transcript.replace(edited)

    def recognize_realtime(self) -> str:
        """
        Run the camera loop until 'q' is pressed.

        Returns:
            The final transcript text
        """
        cap = cv2.VideoCapture(self.camera_index)
        if not cap.isOpened():
            raise CameraError(f"Could not open camera {self.camera_index}")

        self.mp_hands = mp.solutions.hands
        self.hands = self.mp_hands.Hands(
            static_image_mode=False,
            max_num_hands=1,
            min_detection_confidence=0.7,
            min_tracking_confidence=0.5
        )
        self.sampler.reset()

        logger.info("Real-time letter recognition started")
        print("Press 'n' to start a new translation")
        print("Press 'e' to edit the text")
        print("Press 's' to save the text")
        print("Press 'q' to quit")

        try:
            while True:
                ret, frame = cap.read()
                if not ret:
                    logger.warning("Failed to read frame from camera")
                    break

                frame = cv2.flip(frame, 1)
                if self.sampler.should_sample():
                    self._process_frame(frame)

                self._draw_overlay(frame)
                cv2.imshow('ASL Translator', frame)

                key = cv2.waitKey(1) & 0xFF
                if key == ord('q'):
                    break
                elif key == ord('n'):
                    self.session.start_new_translation()
                    self.last_classification = None
                elif key == ord('e'):
                    self.edit_transcript()
                elif key == ord('s'):
                    self.session.transcript.save()
        finally:
            cap.release()
            cv2.destroyAllWindows()
            self.hands.close()

        return self.session.text
