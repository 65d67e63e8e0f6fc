# starnotary/core/block.py
from typing import Any, Dict, Optional, Union

from starnotary.core.payload import Payload, DataPayload, encode_payload, decode_payload
from starnotary.crypto.hashing import content_hash
from starnotary.errors import GenesisAccessError


class Block:
    """
    One record in the chain.

    Created with a payload only; height, timestamp, previous_hash and hash are
    filled in by the chain when the block is appended. Fields stay writable so
    that tampering is possible, and validate() is what detects it.
    """
    def __init__(self, payload: Union[Payload, Any]):
        if not isinstance(payload, Payload):
            payload = DataPayload(payload)
        self.body = encode_payload(payload)
        self.height: int = 0
        self.timestamp: Optional[int] = None
        self.previous_hash: Optional[str] = None
        self.hash: Optional[str] = None

    def _snapshot(self, for_hash: bool = False) -> Dict[str, Any]:
        snap = {
            "body": self.body,
            "height": self.height,
            "timestamp": self.timestamp,
            "previous_hash": self.previous_hash,
            "hash": self.hash,
        }
        if for_hash:
            # a block's digest never covers its own digest
            snap["hash"] = None
        return snap

    def compute_digest(self, persist: bool = False) -> str:
        """
        Digest of the block's current fields with `hash` held at None.
        With persist=True the result is also stored as the block's hash.
        """
        digest = content_hash(self._snapshot(for_hash=True))
        if persist:
            self.hash = digest
        return digest

    def validate(self) -> bool:
        """True iff the stored hash still matches the block's content."""
        if self.hash is None:
            return False
        return self.compute_digest() == self.hash

    def get_decoded_payload(self) -> Payload:
        if self.height == 0:
            raise GenesisAccessError()
        return decode_payload(self.body)

    def to_dict(self) -> dict:
        return self._snapshot()

    def __eq__(self, other):
        if not isinstance(other, Block):
            return NotImplemented
        return self._snapshot() == other._snapshot()

    __hash__ = None

    def __repr__(self):
        h = self.hash[:12] if self.hash else None
        return f"Block(height={self.height}, timestamp={self.timestamp}, hash={h})"
