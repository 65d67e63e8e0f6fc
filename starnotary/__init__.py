# starnotary/__init__.py
"""
starnotary — in-memory, tamper-evident star registry.

A hash-linked chain of blocks where every star registration is backed by a
Bitcoin signed-message proof of address ownership.
"""

__version__ = "0.1.0"

from starnotary.errors import (
    StarNotaryError,
    ChainCorruptedError,
    InvalidIdentityError,
    MessageExpiredError,
    InvalidSignatureError,
    GenesisAccessError,
    PayloadDecodeError,
)
from starnotary.core.block import Block
from starnotary.chain.blockchain import Blockchain, ChainState, MAX_ELAPSED_TIME

__all__ = [
    "Block",
    "Blockchain",
    "ChainState",
    "MAX_ELAPSED_TIME",
    "StarNotaryError",
    "ChainCorruptedError",
    "InvalidIdentityError",
    "MessageExpiredError",
    "InvalidSignatureError",
    "GenesisAccessError",
    "PayloadDecodeError",
]
