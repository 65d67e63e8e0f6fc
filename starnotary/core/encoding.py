# starnotary/core/encoding.py
import binascii
import json
from typing import Any


def _dumps(obj: Any) -> str:
    # plain json keeps ints exact; jcs would round anything past 2**53
    return json.dumps(obj, sort_keys=True, separators=(",", ":"), ensure_ascii=False, allow_nan=False)


def to_json_value(obj: Any) -> Any:
    """obj as it will read back from a block body (tuples become lists, ...)."""
    return json.loads(_dumps(obj))


def hex_encode(obj: Any) -> str:
    """Sorted-key compact JSON of obj as a lowercase hex string (the stored block body)."""
    return _dumps(obj).encode("utf-8").hex()


def hex_decode(s: str) -> Any:
    """Inverse of hex_encode. Raises ValueError on malformed input."""
    try:
        raw = bytes.fromhex(s)
    except (TypeError, binascii.Error) as e:
        raise ValueError(f"body is not hex: {e}") from e
    return json.loads(raw.decode("utf-8"))
