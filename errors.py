# errors.py


class EngineError(ValueError):
    """
    Base class for every error raised by the scoring engine.

    `kind` is the stable, machine-readable error name the HTTP layer
    returns to clients (e.g. "InvalidScoreRange").
    """

    kind = "EngineError"

    def __init__(self, message: str, field: str = ""):
        super().__init__(message)
        self.message = message
        self.field = field


class InvalidInput(EngineError):
    """A numeric field is missing, non-numeric, or not finite (NaN / +-inf)."""

    kind = "InvalidInput"


class InvalidScoreRange(EngineError):
    """A score lies outside [0, 100] where clamping is not the documented policy."""

    kind = "InvalidScoreRange"


class InvalidWeights(EngineError):
    """A weighting scheme has a negative component or does not sum to 1."""

    kind = "InvalidWeights"
