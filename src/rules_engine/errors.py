"""Exceptions raised by the rules engine's orchestration layer."""


class RulesEngineError(Exception):
    """Base class for rule violations detected outside the pure calculations."""

    pass


class EpisodeCloseError(RulesEngineError):
    """Raised when an episode cannot be closed from the given snapshot."""

    pass


class PickSubmissionError(RulesEngineError):
    """Raised when a pick submission violates the game rules."""

    pass
