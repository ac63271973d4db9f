"""Exception types raised by the streak and heatmap engine."""


class StreakEngineError(ValueError):
    """Base class for structurally invalid engine input."""


class InvalidDateKey(StreakEngineError):
    """A calendar day key is malformed or out of range."""


class InvalidHistory(StreakEngineError):
    """An activity history is unsorted, has duplicate days, or bad entries."""
