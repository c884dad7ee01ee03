import logging
import os
from typing import Dict, Optional, Sequence

import joblib
import numpy as np
from sklearn.linear_model import LogisticRegression
from sklearn.metrics import accuracy_score, classification_report, confusion_matrix
from sklearn.model_selection import train_test_split
from sklearn.pipeline import Pipeline
from sklearn.preprocessing import StandardScaler

from .. import config
from ..exceptions import DatasetError, ModelNotFoundError, ModelNotTrainedError
from ..realtime.stabilizer import RawClassification

logger = logging.getLogger(__name__)


class LetterModel:
    def __init__(self, max_iter: int = 1000, C: float = 1.0):
        """
        Initialize the letter classifier.

        Args:
            max_iter: Maximum solver iterations for logistic regression
            C: Inverse regularization strength
        """
        self.max_iter = max_iter
        self.C = C
        self.model = self._build_model()
        self.trained = False

    def _build_model(self) -> Pipeline:
        """Build the scaler + logistic regression pipeline."""
        return Pipeline([
            ('scaler', StandardScaler()),
            ('classifier', LogisticRegression(max_iter=self.max_iter, C=self.C))
        ])

    @property
    def classes(self) -> Sequence[str]:
        if not self.trained:
            return []
        return [str(c) for c in self.model.classes_]

    def train(self, X: np.ndarray, y: np.ndarray,
              test_size: float = config.TEST_SIZE, random_state: int = 42) -> Dict:
        """
        Train the model.

        Args:
            X: Feature matrix of shape (samples, features)
            y: Letter labels
            test_size: Fraction held out for evaluation, 0 trains on everything
            random_state: Seed for the split

        Returns:
            Evaluation report with accuracy, per-class metrics and confusion matrix
        """
        X = np.asarray(X, dtype=np.float64)
        y = np.asarray(y)
        if len(X) == 0 or len(X) != len(y):
            raise DatasetError(f"Need matching non-empty features and labels, got {len(X)} and {len(y)}")
        if len(np.unique(y)) < 2:
            raise DatasetError("Need samples for at least two letters to train")

        if test_size > 0:
            try:
                X_train, X_test, y_train, y_test = train_test_split(
                    X, y, test_size=test_size, random_state=random_state, stratify=y
                )
            except ValueError as e:
                raise DatasetError(f"Cannot split dataset for evaluation: {e}") from e
        else:
            X_train, X_test, y_train, y_test = X, X, y, y

        logger.info(f"Training on {len(X_train)} samples, evaluating on {len(X_test)}")
        self.model.fit(X_train, y_train)
        self.trained = True

        y_pred = self.model.predict(X_test)
        labels = [str(c) for c in self.model.classes_]
        report = {
            'accuracy': float(accuracy_score(y_test, y_pred)),
            'report': classification_report(y_test, y_pred, labels=labels,
                                            output_dict=True, zero_division=0),
            'confusion_matrix': confusion_matrix(y_test, y_pred, labels=labels).tolist(),
            'labels': labels
        }
        logger.info(f"Accuracy: {report['accuracy']:.3f}")

        return report

    def predict_proba(self, features: np.ndarray) -> np.ndarray:
        if not self.trained:
            raise ModelNotTrainedError("Model has not been trained or loaded")
        return self.model.predict_proba(np.atleast_2d(features))

    def predict(self, features: Optional[np.ndarray]) -> RawClassification:
        """
        Classify one feature vector.

        Args:
            features: Feature vector, or None when no hand was found

        Returns:
            Top label and its probability, or an empty classification for None
        """
        if features is None:
            return RawClassification(label=None)

        probabilities = self.predict_proba(features)[0]
        best = int(np.argmax(probabilities))
        return RawClassification(label=str(self.model.classes_[best]),
                                 confidence=float(probabilities[best]))

    def save(self, filepath: str):
        """Save the model to disk."""
        if not self.trained:
            raise ModelNotTrainedError("Refusing to save an untrained model")
        os.makedirs(os.path.dirname(os.path.abspath(filepath)), exist_ok=True)
        joblib.dump(self.model, filepath)
        logger.info(f"Model saved to {filepath}")

    def load(self, filepath: str):
        """Load the model from disk."""
        if not os.path.exists(filepath):
            raise ModelNotFoundError(f"Model file {filepath} not found")
        self.model = joblib.load(filepath)
        self.trained = True
        logger.info(f"Loaded model with classes {list(self.model.classes_)}")
