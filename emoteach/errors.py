"""Exception taxonomy for the adaptation engine."""


class EmoTeachError(Exception):
    """Base class for all engine errors."""


class CameraUnavailableError(EmoTeachError):
    """The video source could not be acquired (denied, missing or busy)."""


class ClassifierNotLoadedError(EmoTeachError):
    """classify() was called before the models finished loading."""


class QuizValidationError(EmoTeachError, ValueError):
    """A question or quiz was built from malformed data."""
