"""Exceptions raised by the intent agent and the reference engine."""


class HanabiError(Exception):
    """Base exception for this package."""
    pass


class ReplayError(HanabiError):
    """Raised when a historical action cannot be reconstructed."""
    pass


class InconsistentBeliefError(HanabiError):
    """Raised when a belief with no remaining mass is asked for a probability."""
    pass


class InvalidActionError(HanabiError):
    """Raised by the engine when a player makes an illegal move."""
    pass


class NoCandidateError(HanabiError):
    """Raised when the policy cannot produce any action at all."""
    pass
