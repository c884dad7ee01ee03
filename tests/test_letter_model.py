import numpy as np
import pytest

from asl_translator.exceptions import DatasetError, ModelNotFoundError, ModelNotTrainedError
from asl_translator.feature_extraction.extractor import FeatureExtractor
from asl_translator.models.letter_model import LetterModel


@pytest.fixture
def training_data(noisy_samples):
    extractor = FeatureExtractor()
    X, y = [], []
    for letter, sequence in noisy_samples.items():
        rows = extractor.extract_sequence(sequence)
        X.extend(rows)
        y.extend([letter] * len(rows))
    return np.array(X), np.array(y)


@pytest.fixture
def trained_model(training_data):
    model = LetterModel()
    model.train(*training_data)
    return model


def test_train_reports_metrics(training_data):
    report = LetterModel().train(*training_data)
    assert report["accuracy"] > 0.9
    assert report["labels"] == ["A", "B", "C"]
    assert len(report["confusion_matrix"]) == 3
    assert "A" in report["report"]


def test_predict_returns_label_and_confidence(trained_model, hand_shapes):
    features = FeatureExtractor().extract_features(hand_shapes["B"])
    classification = trained_model.predict(features)
    assert classification.label == "B"
    assert 0.5 < classification.confidence <= 1.0


def test_predict_none_is_no_detection(trained_model):
    classification = trained_model.predict(None)
    assert classification.label is None
    assert classification.confidence is None


def test_untrained_model_refuses_to_predict():
    with pytest.raises(ModelNotTrainedError):
        LetterModel().predict(np.zeros(40))


def test_save_and_load(tmp_path, trained_model, hand_shapes):
    path = tmp_path / "models" / "letters.joblib"
    trained_model.save(str(path))

    loaded = LetterModel()
    loaded.load(str(path))
    features = FeatureExtractor().extract_features(hand_shapes["C"])
    assert loaded.predict(features) == trained_model.predict(features)
    assert loaded.classes == ["A", "B", "C"]


def test_load_missing_file(tmp_path):
    with pytest.raises(ModelNotFoundError):
        LetterModel().load(str(tmp_path / "missing.joblib"))


def test_single_letter_dataset_rejected():
    with pytest.raises(DatasetError):
        LetterModel().train(np.zeros((10, 40)), np.array(["A"] * 10))


def test_empty_dataset_rejected():
    with pytest.raises(DatasetError):
        LetterModel().train(np.empty((0, 40)), np.array([]))
