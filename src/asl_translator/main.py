import argparse
import json
import logging
import os
import sys
from typing import List, Optional, Tuple

from . import config
from .data_collection.dataset_loader import DatasetLoader
from .exceptions import DatasetError, TranslatorError
from .models.letter_model import LetterModel
from .realtime.sampler import FrameSampler
from .realtime.stabilizer import LetterStabilizer
from .realtime.transcript import TranslationSession

logger = logging.getLogger(__name__)

NO_DETECTION_MARKERS = {"", "-", "none"}


def read_observations(path: str) -> List[Tuple[Optional[str], Optional[float]]]:
    """
    Read a replay file with one observation per line.

    Each line is a label optionally followed by a comma and a confidence.
    An empty label, '-' or 'none' means no hand was detected.
    """
    observations = []
    with open(path, "r") as f:
        for line_number, line in enumerate(f, start=1):
            line = line.strip()
            if line.startswith("#"):
                continue
            label, _, confidence = line.partition(",")
            label = label.strip()
            if label.lower() in NO_DETECTION_MARKERS:
                label = None
            try:
                value = float(confidence) if confidence.strip() else None
            except ValueError:
                raise DatasetError(f"{path}:{line_number}: bad confidence {confidence!r}")
            observations.append((label, value))
    return observations


def positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {value}")
    return number


def make_session(args) -> TranslationSession:
    stabilizer = LetterStabilizer(
        commit_threshold=args.commit_threshold,
        confidence_threshold=args.confidence_threshold
    )
    return TranslationSession(stabilizer=stabilizer)


def train_model(args):
    """Train the letter classifier."""
    if args.features_csv:
        X, y = DatasetLoader.load_csv(args.features_csv)
    else:
        X, y = DatasetLoader(dataset_path=args.dataset_path).load_dataset()

    model = LetterModel(max_iter=args.max_iter, C=args.C)
    report = model.train(X, y, test_size=args.test_size)
    model.save(args.model_path)

    report_path = os.path.splitext(args.model_path)[0] + "_report.json"
    with open(report_path, "w") as f:
        json.dump(report, f, indent=2)

    print(f"\nTraining completed! Accuracy: {report['accuracy']:.3f}")
    print(f"Model saved to '{args.model_path}'")
    print(f"Report saved to '{report_path}'")


def recognize_realtime(args):
    """Perform real-time letter recognition."""
    # Camera and MediaPipe are only needed here
    from .realtime.recognizer import LetterRecognizer

    model = LetterModel()
    model.load(args.model_path)

    recognizer = LetterRecognizer(
        model=model,
        session=make_session(args),
        sampler=FrameSampler(interval=args.sample_interval, min_gap=args.min_gap),
        camera_index=args.camera
    )
    text = recognizer.recognize_realtime()
    print(f"Translated text: {text}")


def collect_data(args):
    """Collect letter recordings from the camera."""
    from .data_collection.collector import LetterCollector

    collector = LetterCollector(output_dir=args.output_dir, camera_index=args.camera)
    try:
        for letter in args.letters:
            letter = letter.upper()
            if letter not in config.ALPHABET:
                logger.warning(f"Skipping unsupported letter: {letter}")
                continue
            for repetition in range(args.repetitions):
                print(f"\nCollecting letter {letter} ({repetition + 1}/{args.repetitions})")
                collector.collect_letter(letter, num_frames=args.num_frames)
    finally:
        collector.close()


def export_features(args):
    DatasetLoader(dataset_path=args.dataset_path).export_csv(args.output)


def replay(args):
    """Feed recorded observations through the stabilizer and print the transcript."""
    session = make_session(args)
    committed = session.feed(read_observations(args.input))
    print(f"Committed {len(committed)} letters")
    print(session.text)
    if args.save:
        session.transcript.save(args.save)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="ASL Letter Translator")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    stabilizer_parent = argparse.ArgumentParser(add_help=False)
    stabilizer_parent.add_argument("--commit-threshold", type=positive_int, default=config.COMMIT_THRESHOLD,
                                   help="Consecutive sampled frames needed to commit a letter")
    stabilizer_parent.add_argument("--confidence-threshold", type=float, default=config.CONFIDENCE_THRESHOLD,
                                   help="Classifier confidence below which frames are ignored")

    # Collect command
    collect_parser = subparsers.add_parser("collect", help="Collect letter recordings")
    collect_parser.add_argument("--letters", type=str, nargs="+", required=True, help="Letters to collect")
    collect_parser.add_argument("--num-frames", type=positive_int, default=30, help="Frames per recording")
    collect_parser.add_argument("--repetitions", type=positive_int, default=1, help="Recordings per letter")
    collect_parser.add_argument("--output-dir", type=str, default=config.DATA_DIR, help="Where recordings go")
    collect_parser.add_argument("--camera", type=int, default=config.CAMERA_INDEX, help="Camera index")

    # Export command
    export_parser = subparsers.add_parser("export", help="Export recordings as a feature table")
    export_parser.add_argument("--dataset-path", type=str, default=config.DATA_DIR, help="Recordings directory")
    export_parser.add_argument("--output", type=str, default="features.csv", help="CSV file to write")

    # Train command
    train_parser = subparsers.add_parser("train", help="Train the letter classifier")
    train_parser.add_argument("--dataset-path", type=str, default=config.DATA_DIR, help="Recordings directory")
    train_parser.add_argument("--features-csv", type=str, default=None, help="Train from an exported table instead")
    train_parser.add_argument("--model-path", type=str, default=config.MODEL_PATH, help="Where to save the model")
    train_parser.add_argument("--test-size", type=float, default=config.TEST_SIZE, help="Held-out fraction")
    train_parser.add_argument("--max-iter", type=positive_int, default=1000, help="Solver iterations")
    train_parser.add_argument("--C", type=float, default=1.0, help="Inverse regularization strength")

    # Recognize command
    recognize_parser = subparsers.add_parser("recognize", parents=[stabilizer_parent],
                                             help="Translate letters from the camera")
    recognize_parser.add_argument("--model-path", type=str, default=config.MODEL_PATH, help="Trained model")
    recognize_parser.add_argument("--sample-interval", type=positive_int, default=config.FRAME_SAMPLE_INTERVAL,
                                  help="Classify one of every N frames")
    recognize_parser.add_argument("--min-gap", type=float, default=config.MIN_SAMPLE_GAP,
                                  help="Minimum seconds between classified frames")
    recognize_parser.add_argument("--camera", type=int, default=config.CAMERA_INDEX, help="Camera index")

    # Replay command
    replay_parser = subparsers.add_parser("replay", parents=[stabilizer_parent],
                                          help="Stabilize a file of recorded classifications")
    replay_parser.add_argument("input", type=str, help="File with one 'label[,confidence]' per line")
    replay_parser.add_argument("--save", type=str, default=None, help="Append the result to this transcript log")

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    commands = {
        "collect": collect_data,
        "export": export_features,
        "train": train_model,
        "recognize": recognize_realtime,
        "replay": replay,
    }
    command = commands.get(args.command)
    if command is None:
        parser.print_help()
        return 0

    try:
        command(args)
    except (TranslatorError, OSError, ValueError) as e:
        logger.error(str(e))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
