import logging
import os
from typing import Iterable, List, Optional, Tuple

import numpy as np
import pandas as pd

from .. import config
from ..exceptions import DatasetError
from ..feature_extraction.extractor import FeatureExtractor
from ..preprocessing.preprocessor import Preprocessor

logger = logging.getLogger(__name__)


class DatasetLoader:
    def __init__(self, dataset_path: str = config.DATA_DIR,
                 alphabet: Iterable[str] = config.ALPHABET,
                 preprocessor: Optional[Preprocessor] = None,
                 feature_extractor: Optional[FeatureExtractor] = None):
        """
        Initialize the dataset loader.

        Args:
            dataset_path: Directory holding one sub-directory of .npy recordings per letter
            alphabet: Letters to load, other directories are skipped
        """
        self.dataset_path = dataset_path
        self.alphabet = set(alphabet)
        self.preprocessor = preprocessor or Preprocessor()
        self.feature_extractor = feature_extractor or FeatureExtractor()

    def list_recordings(self) -> List[Tuple[str, str]]:
        """Return (letter, path) for every recording in the dataset directory."""
        if not os.path.isdir(self.dataset_path):
            raise DatasetError(f"Dataset directory not found: {self.dataset_path}")

        recordings = []
        for letter in sorted(os.listdir(self.dataset_path)):
            letter_dir = os.path.join(self.dataset_path, letter)
            if not os.path.isdir(letter_dir):
                continue
            if letter not in self.alphabet:
                logger.warning(f"Skipping directory for unsupported letter: {letter}")
                continue
            for name in sorted(os.listdir(letter_dir)):
                if name.endswith('.npy'):
                    recordings.append((letter, os.path.join(letter_dir, name)))
        return recordings

    def load_recording(self, path: str) -> np.ndarray:
        """Load one recording and return its per-frame feature rows."""
        landmarks = np.load(path)
        if landmarks.ndim == 2:
            landmarks = landmarks.reshape(1, *landmarks.shape)
        smoothed = self.preprocessor.preprocess(landmarks)
        return self.feature_extractor.extract_sequence(smoothed)

    def load_dataset(self) -> Tuple[np.ndarray, np.ndarray]:
        """
        Load the dataset.

        Returns:
            Tuple of (features, labels) with one row per recorded frame
        """
        X = []
        y = []

        for letter, path in self.list_recordings():
            try:
                features = self.load_recording(path)
            except (OSError, ValueError) as e:
                logger.warning(f"Skipping unreadable recording {path}: {e}")
                continue
            X.extend(features)
            y.extend([letter] * len(features))

        if not X:
            raise DatasetError(f"No usable recordings found in {self.dataset_path}")

        logger.info(f"Loaded {len(X)} samples for {len(set(y))} letters")
        return np.array(X), np.array(y)

    def to_dataframe(self, X: np.ndarray, y: np.ndarray) -> pd.DataFrame:
        columns = [f"f{i}" for i in range(X.shape[1])]
        df = pd.DataFrame(X, columns=columns)
        df.insert(0, 'label', y)
        return df

    def export_csv(self, csv_path: str) -> pd.DataFrame:
        """Load the dataset and write it as a label + feature table."""
        X, y = self.load_dataset()
        df = self.to_dataframe(X, y)
        df.to_csv(csv_path, index=False)
        logger.info(f"Exported {len(df)} rows to {csv_path}")
        return df

    @staticmethod
    def load_csv(csv_path: str) -> Tuple[np.ndarray, np.ndarray]:
        """Read a table written by export_csv."""
        if not os.path.exists(csv_path):
            raise DatasetError(f"Feature table not found: {csv_path}")
        df = pd.read_csv(csv_path)
        if 'label' not in df.columns or len(df) == 0:
            raise DatasetError(f"Feature table {csv_path} has no labelled rows")
        y = df['label'].astype(str).to_numpy()
        X = df.drop(columns=['label']).to_numpy(dtype=np.float64)
        return X, y
