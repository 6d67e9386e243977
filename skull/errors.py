"""Error taxonomy shared by the Skull engine."""


class SkullError(RuntimeError):
    """Base class for engine errors."""


class InvalidMove(SkullError):
    """Raised when an action is illegal right now. Nothing is mutated."""


class NoValidBidder(SkullError):
    """Raised when a round can no longer produce a bidder and must be voided."""


class MatchAlreadyOver(SkullError):
    """Raised for any action submitted after the match has been decided."""


class InvalidRules(SkullError, ValueError):
    """Raised when a seat list or rule configuration cannot start a match."""
