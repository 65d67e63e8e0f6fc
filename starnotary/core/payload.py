# starnotary/core/payload.py
"""
Payload variants carried by blocks.

Blocks never hold caller data directly: the payload is tagged with its kind,
serialised to JSON and hex-encoded into the block body, and decoded back on read.
"""
from dataclasses import dataclass, asdict
from typing import Any, Dict, Type

from starnotary.core.encoding import hex_encode, hex_decode, to_json_value
from starnotary.errors import PayloadDecodeError


GENESIS_DATA = "Genesis Block"


@dataclass(frozen=True)
class Payload:
    kind = "abstract"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class GenesisPayload(Payload):
    """Sentinel stored in block 0. Never handed back to callers."""
    kind = "genesis"
    data: str = GENESIS_DATA


@dataclass(frozen=True)
class StarPayload(Payload):
    """
    A star claimed by a verified wallet address.

    `star` must be JSON-serialisable and is normalised to JSON types on
    construction (tuples become lists), so the value held here is exactly
    the value decoded from the block.
    """
    kind = "star"
    owner: str
    star: Any

    def __post_init__(self):
        object.__setattr__(self, "star", to_json_value(self.star))


@dataclass(frozen=True)
class DataPayload(Payload):
    kind = "data"
    data: Any

    def __post_init__(self):
        object.__setattr__(self, "data", to_json_value(self.data))


_KINDS: Dict[str, Type[Payload]] = {
    cls.kind: cls for cls in (GenesisPayload, StarPayload, DataPayload)
}


def encode_payload(payload: Payload) -> str:
    if payload.kind not in _KINDS:
        raise TypeError(f"Unsupported payload type: {type(payload).__name__}")
    return hex_encode({"kind": payload.kind, "value": payload.to_dict()})


def decode_payload(body: str) -> Payload:
    try:
        envelope = hex_decode(body)
        kind = envelope["kind"]
        value = envelope["value"]
    except (ValueError, KeyError, TypeError) as e:
        raise PayloadDecodeError(f"Malformed block body: {e}") from e

    cls = _KINDS.get(kind)
    if cls is None:
        raise PayloadDecodeError(f"Unknown payload kind: {kind!r}")
    try:
        return cls(**value)
    except TypeError as e:
        raise PayloadDecodeError(f"Bad fields for {kind!r} payload: {e}") from e
