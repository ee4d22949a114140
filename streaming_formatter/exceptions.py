"""Package-specific exception types."""

from __future__ import annotations


class DeltaLogError(ValueError):
    """Base class for errors raised while loading recorded deltas.

    The formatter itself never raises; these errors come from reading replay
    input from disk.
    """


class MalformedDeltaLogError(DeltaLogError):
    """Raised when a delta log is not a JSON array of strings.

    Args:
        source: Name of the file being loaded.
        reason: Description of the problem.
        index: Zero-based position of the offending entry, when known.
    """

    def __init__(self, source: str, reason: str, index: int | None = None):
        self.source = source
        self.reason = reason
        self.index = index
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        if self.index is None:
            return f"{self.source} is not a valid delta log: {self.reason}"
        return f"{self.source} is not a valid delta log: entry {self.index} {self.reason}"
