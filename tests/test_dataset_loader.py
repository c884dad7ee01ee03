import numpy as np
import pytest

from asl_translator.data_collection.dataset_loader import DatasetLoader
from asl_translator.exceptions import DatasetError


@pytest.fixture
def dataset_dir(tmp_path, noisy_samples):
    for letter, sequence in noisy_samples.items():
        letter_dir = tmp_path / letter
        letter_dir.mkdir()
        np.save(letter_dir / "0.npy", sequence[:20])
        np.save(letter_dir / "1.npy", sequence[20:])
    # Motion letters are not part of the static alphabet
    (tmp_path / "J").mkdir()
    np.save(tmp_path / "J" / "0.npy", noisy_samples["A"])
    return tmp_path


def test_load_dataset(dataset_dir):
    X, y = DatasetLoader(dataset_path=str(dataset_dir)).load_dataset()
    assert X.shape == (120, 40)
    assert sorted(set(y)) == ["A", "B", "C"]


def test_unreadable_recording_skipped(dataset_dir):
    (dataset_dir / "A" / "2.npy").write_bytes(b"garbage")
    X, y = DatasetLoader(dataset_path=str(dataset_dir)).load_dataset()
    assert len(X) == 120


def test_csv_round_trip(dataset_dir, tmp_path):
    csv_path = tmp_path / "features.csv"
    df = DatasetLoader(dataset_path=str(dataset_dir)).export_csv(str(csv_path))
    assert list(df.columns[:2]) == ["label", "f0"]

    X, y = DatasetLoader.load_csv(str(csv_path))
    assert X.shape == (120, 40)
    assert set(y) == {"A", "B", "C"}


def test_missing_directory(tmp_path):
    with pytest.raises(DatasetError):
        DatasetLoader(dataset_path=str(tmp_path / "nope")).load_dataset()


def test_empty_directory(tmp_path):
    with pytest.raises(DatasetError):
        DatasetLoader(dataset_path=str(tmp_path)).load_dataset()
