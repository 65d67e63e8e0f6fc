# starnotary/errors.py
"""
Errors raised by the chain controller and block entity.
Each one aborts only the call that raised it; nothing is retried.
"""


class StarNotaryError(Exception):
    """Base class for every starnotary failure."""


class ChainCorruptedError(StarNotaryError):
    """The chain failed full validation, so the append was refused."""

    def __init__(self, error: str):
        self.error = error
        super().__init__(f"chain invalid: {error}")


class InvalidIdentityError(StarNotaryError):
    def __init__(self, reason: str = ""):
        self.reason = reason
        msg = "invalid identity message"
        super().__init__(f"{msg}: {reason}" if reason else msg)


class MessageExpiredError(StarNotaryError):
    def __init__(self, elapsed: int):
        self.elapsed = elapsed
        super().__init__(f"message has expired ({elapsed}s elapsed)")


class InvalidSignatureError(StarNotaryError):
    def __init__(self):
        super().__init__("invalid signature")


class GenesisAccessError(StarNotaryError):
    def __init__(self):
        super().__init__("can't get genesis block data")


class PayloadDecodeError(StarNotaryError):
    """Stored block body is not a recognised payload encoding."""
