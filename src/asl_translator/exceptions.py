class TranslatorError(Exception):
    """Base class for errors raised by the translator pipeline."""


class ModelNotFoundError(TranslatorError):
    """Raised when a saved classifier cannot be found on disk."""


class ModelNotTrainedError(TranslatorError):
    """Raised when predicting with a classifier that was never fitted."""


class DatasetError(TranslatorError):
    """Raised when training data is missing or malformed."""


class CameraError(TranslatorError):
    """Raised when the capture device cannot be opened."""
