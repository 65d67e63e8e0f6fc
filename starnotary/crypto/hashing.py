# starnotary/crypto/hashing.py
import hashlib
from typing import Any, Mapping

from starnotary.core.canon import canonical_json


def content_hash(fields: Mapping[str, Any]) -> str:
    """hex(sha256(canonical_json(fields)))"""
    return hashlib.sha256(canonical_json(dict(fields))).hexdigest()
