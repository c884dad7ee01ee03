import os

# Path setup
BASE_DIR = os.getcwd()
DATA_DIR = os.path.join(BASE_DIR, 'collected_data')
MODEL_DIR = os.path.join(BASE_DIR, 'models')
MODEL_PATH = os.path.join(MODEL_DIR, 'letter_classifier.joblib')
TRANSCRIPT_DIR = os.path.join(BASE_DIR, 'transcripts')

# Static ASL letters. J and Z need motion and cannot be read from one frame.
ALPHABET = tuple(letter for letter in "ABCDEFGHIJKLMNOPQRSTUVWXYZ" if letter not in "JZ")

# Stabilizer
COMMIT_THRESHOLD = 4  # consecutive sampled frames before a letter commits
CONFIDENCE_THRESHOLD = 0.5  # classifier probability below this is ignored
DELIMITER = " "  # appended after every committed letter

# Capture
JOINT_CONFIDENCE_THRESHOLD = 0.5  # minimum MediaPipe hand score
FRAME_SAMPLE_INTERVAL = 10  # classify one of every N captured frames
MIN_SAMPLE_GAP = 0.0  # seconds between sampled frames, 0 disables
CAMERA_INDEX = 0

# Training
SMOOTHING_WINDOW = 5
SMOOTHING_POLY_ORDER = 2
TEST_SIZE = 0.2
