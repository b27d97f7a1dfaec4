"""Exceptions raised while converting TTML documents."""


class ParseError(ValueError):
    """Raised when a TTML document is not well-formed XML."""

    def __init__(self, message: str = "Invalid TTML file.") -> None:
        super().__init__(message)


class CueError(ValueError):
    """A single cue that cannot be emitted.

    Cue errors never abort a document. The converter collects them and
    carries on with the next cue.

    Attributes:
        index: 1-based position of the cue element in the document.
        reason: Human-readable description of the problem.
    """

    def __init__(self, index: int, reason: str) -> None:
        self.index = index
        self.reason = reason
        super().__init__(f"Cue {index}: {reason}")
