"""Exception types raised by the blackjack core."""
from __future__ import annotations


class BlackjackError(Exception):
    """Base class for blackjack core errors."""


class EmptyDeckError(BlackjackError):
    """Raised when a card is requested from an empty deck."""


class BetRejected(BlackjackError):
    """A wager could not be placed against the current chip balance."""


class InvariantViolation(BlackjackError):
    """The round sequence reached a state the house rules rule out."""


__all__ = ["BlackjackError", "EmptyDeckError", "BetRejected", "InvariantViolation"]
