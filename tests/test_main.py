import json

import numpy as np
import pytest

from asl_translator.exceptions import DatasetError
from asl_translator.main import main, read_observations


def test_read_observations(tmp_path):
    path = tmp_path / "frames.txt"
    path.write_text("# recorded session\nA,0.9\nA\n-\nnone,0.7\nB, 0.3\n")
    assert read_observations(str(path)) == [
        ("A", 0.9), ("A", None), (None, None), (None, 0.7), ("B", 0.3)
    ]


def test_read_observations_bad_confidence(tmp_path):
    path = tmp_path / "frames.txt"
    path.write_text("A,high\n")
    with pytest.raises(DatasetError):
        read_observations(str(path))


def test_replay_prints_transcript(tmp_path, capsys):
    path = tmp_path / "frames.txt"
    path.write_text("\n".join(["A"] * 4 + ["B"] * 2 + ["C,0.9"] * 4) + "\n")
    log_path = tmp_path / "log.json"

    assert main(["replay", str(path), "--save", str(log_path)]) == 0

    out = capsys.readouterr().out
    assert "Committed 2 letters" in out
    assert "A C" in out
    assert json.loads(log_path.read_text())["transcripts"][0]["text"] == "A C"


def test_replay_with_custom_thresholds(tmp_path, capsys):
    path = tmp_path / "frames.txt"
    path.write_text("A,0.6\nA,0.6\nA,0.4\n")
    assert main(["replay", str(path), "--commit-threshold", "2", "--confidence-threshold", "0.5"]) == 0
    assert "Committed 1 letters" in capsys.readouterr().out


def test_missing_replay_file_fails(tmp_path):
    assert main(["replay", str(tmp_path / "missing.txt")]) == 1


def test_train_from_recordings(tmp_path, noisy_samples):
    data_dir = tmp_path / "data"
    for letter, sequence in noisy_samples.items():
        (data_dir / letter).mkdir(parents=True)
        np.save(data_dir / letter / "0.npy", sequence)
    model_path = tmp_path / "models" / "letters.joblib"

    assert main(["train", "--dataset-path", str(data_dir), "--model-path", str(model_path)]) == 0
    assert model_path.exists()
    report = json.loads((tmp_path / "models" / "letters_report.json").read_text())
    assert report["labels"] == ["A", "B", "C"]


def test_train_without_data_fails(tmp_path):
    assert main(["train", "--dataset-path", str(tmp_path), "--model-path", str(tmp_path / "m.joblib")]) == 1


def test_no_command_prints_help(capsys):
    assert main([]) == 0
    assert "usage" in capsys.readouterr().out


@pytest.mark.parametrize("argv", [
    ["replay", "frames.txt", "--commit-threshold", "0"],
    ["recognize", "--sample-interval", "0"],
    ["collect", "--letters", "A", "--num-frames", "-3"],
])
def test_non_positive_counts_rejected(argv, capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(argv)
    assert excinfo.value.code == 2
    assert "must be a positive integer" in capsys.readouterr().err


def test_invalid_training_options_exit_cleanly(tmp_path, noisy_samples):
    data_dir = tmp_path / "data"
    for letter, sequence in noisy_samples.items():
        (data_dir / letter).mkdir(parents=True)
        np.save(data_dir / letter / "0.npy", sequence)

    argv = ["train", "--dataset-path", str(data_dir),
            "--model-path", str(tmp_path / "m.joblib"), "--C", "-1"]
    assert main(argv) == 1


def test_replay_save_into_unexpected_log(tmp_path):
    path = tmp_path / "frames.txt"
    path.write_text("A\n" * 4)
    log_path = tmp_path / "log.json"
    log_path.write_text("[]")

    assert main(["replay", str(path), "--save", str(log_path)]) == 0
    assert json.loads(log_path.read_text())["transcripts"][0]["text"] == "A"


def test_collect_closes_tracker_on_failure(monkeypatch):
    pytest.importorskip("cv2")
    pytest.importorskip("mediapipe")
    from asl_translator.data_collection import collector
    from asl_translator.exceptions import CameraError

    instances = []

    class FakeCollector:
        def __init__(self, output_dir, camera_index):
            self.closed = False
            instances.append(self)

        def collect_letter(self, letter, num_frames):
            raise CameraError("no camera")

        def close(self):
            self.closed = True

    monkeypatch.setattr(collector, "LetterCollector", FakeCollector)
    assert main(["collect", "--letters", "B"]) == 1
    assert instances[0].closed
