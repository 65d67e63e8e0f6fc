# starnotary/chain/blockchain.py
import enum
import logging
import re
import threading
import time
from typing import Any, Callable, List, Optional

from starnotary.config import Settings
from starnotary.core.block import Block
from starnotary.core.payload import GenesisPayload, StarPayload
from starnotary.crypto.signatures import BitcoinMessageVerifier, SignatureVerifier
from starnotary.errors import (
    ChainCorruptedError,
    InvalidIdentityError,
    MessageExpiredError,
    InvalidSignatureError,
)
from starnotary.verify.verifier import ChainVerifier, VerificationResult

logger = logging.getLogger(__name__)

MAX_ELAPSED_TIME = 5 * 60  # seconds an ownership message stays valid
REGISTRY_TAG = "starRegistry"
_TIMESTAMP_RE = re.compile(r"-?[0-9]+")


class ChainState(enum.Enum):
    EMPTY = "empty"
    INITIALIZING = "initializing"
    READY = "ready"


class Blockchain:
    """
    In-memory chain of blocks with a star registry on top.

    The genesis block is created by the constructor, so a Blockchain is ready
    to use as soon as it exists. Every write goes through _add_block(), which
    revalidates the whole chain first (O(n) per append) and holds the writer
    lock for the whole validate-then-append step.
    """

    def __init__(
        self,
        verifier: Optional[SignatureVerifier] = None,
        clock: Optional[Callable[[], float]] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or Settings.from_env()
        self.verifier = verifier or BitcoinMessageVerifier(self.settings.network)
        self.clock = clock or time.time

        self.chain: List[Block] = []
        self.height = -1
        self.state = ChainState.EMPTY
        self._lock = threading.RLock()
        self._checker = ChainVerifier()

        self.initialize_chain()

    @property
    def initialized(self) -> bool:
        return self.state is ChainState.READY

    def _now(self) -> int:
        return int(self.clock())

    def initialize_chain(self) -> None:
        """Append the genesis block if the chain is still empty."""
        with self._lock:
            if self.height == -1:
                self.state = ChainState.INITIALIZING
                genesis = self._add_block(Block(GenesisPayload()))
                logger.info("[starnotary] Genesis block created: %s", genesis.hash)
            self.state = ChainState.READY

    def get_chain_height(self) -> int:
        return self.height

    def get_chain(self) -> List[Block]:
        """Snapshot copy of the chain; never contains a half-appended block."""
        with self._lock:
            return self.chain.copy()

    def get_last_hash(self) -> Optional[str]:
        with self._lock:
            if not self.chain:
                return None
            return self.chain[-1].hash

    def _add_block(self, block: Block) -> Block:
        """
        The only write path: validate the chain, finalize the block, append.
        Raises ChainCorruptedError (with the first error) without touching
        the chain if validation fails.
        """
        with self._lock:
            errors = self.validate_chain()
            if errors:
                logger.warning("[starnotary] Refusing append, chain is corrupted: %s", errors)
                raise ChainCorruptedError(errors[0])

            block.height = self.height + 1
            block.timestamp = self._now()
            block.previous_hash = self.chain[-1].hash if self.chain else None
            block.compute_digest(persist=True)

            self.chain.append(block)
            self.height += 1
            logger.info("[starnotary] Appended block %d (%s)", block.height, block.hash)
            return block

    def request_ownership_message(self, address: str) -> str:
        """Message the wallet owner must sign before submitting a star."""
        return f"{address}:{self._now()}:{REGISTRY_TAG}"

    def submit_star(self, address: str, message: str, signature: str, star: Any) -> Block:
        """
        Register `star` for `address`.

        Checks, in order: message shape and owner, age of the message
        (MAX_ELAPSED_TIME), then the signature. Nothing is appended unless
        all three pass.
        """
        parts = message.split(":")
        if len(parts) != 3:
            raise InvalidIdentityError(f"expected 3 fields, got {len(parts)}")
        msg_address, msg_time, tag = parts
        if not _TIMESTAMP_RE.fullmatch(msg_time):
            raise InvalidIdentityError(f"timestamp {msg_time!r} is not an integer")
        issued_at = int(msg_time)
        if msg_address != address:
            raise InvalidIdentityError("address does not match message")
        if tag != REGISTRY_TAG:
            raise InvalidIdentityError(f"unexpected tag {tag!r}")

        elapsed = self._now() - issued_at
        if elapsed > MAX_ELAPSED_TIME:
            logger.warning("[starnotary] Expired ownership message for %s (%ds old)", address, elapsed)
            raise MessageExpiredError(elapsed)

        try:
            verified = self.verifier(message, address, signature)
        except Exception as e:
            logger.warning("[starnotary] Signature verifier failed for %s: %s", address, e)
            verified = False
        if not verified:
            logger.warning("[starnotary] Invalid signature for %s", address)
            raise InvalidSignatureError()

        return self._add_block(Block(StarPayload(owner=address, star=star)))

    def get_block_by_hash(self, hash: str) -> Optional[Block]:
        return next((b for b in self.get_chain() if b.hash == hash), None)

    def get_block_by_height(self, height: int) -> Optional[Block]:
        return next((b for b in self.get_chain() if b.height == height), None)

    def get_stars_by_address(self, address: str) -> List[Any]:
        """Stars owned by `address`, in chain order (genesis excluded)."""
        stars = []
        for block in self.get_chain():
            if block.height == 0:
                continue
            payload = block.get_decoded_payload()
            if isinstance(payload, StarPayload) and payload.owner == address:
                stars.append(payload.star)
        return stars

    def verify(self) -> VerificationResult:
        """Full categorised report over the current chain."""
        return self._checker.verify(self.get_chain())

    def validate_chain(self) -> List[str]:
        """List of "block {i} is invalid" descriptors; empty when the chain is intact."""
        return self.verify().errors
