# starnotary/verify/verifier.py
from typing import List, Optional, Sequence
from dataclasses import dataclass

from starnotary.core.block import Block


@dataclass
class VerificationFailure:
    index: int
    message: str
    category: str = "block"  # "block" (self-check) or "hash_chain" (link to predecessor)


@dataclass
class VerificationResult:
    is_valid: bool
    message: str = ""
    failures: List[VerificationFailure] = None

    def __post_init__(self):
        if self.failures is None:
            self.failures = []

    @property
    def first_failure(self) -> Optional[VerificationFailure]:
        return self.failures[0] if self.failures else None

    @property
    def errors(self) -> List[str]:
        return [f.message for f in self.failures]

    def __bool__(self):
        return self.is_valid

    def __str__(self):
        if self.is_valid:
            return "Chain is valid ✓"
        lines = [f"Verification FAILED ({len(self.failures)} issues):"]
        for f in self.failures:
            lines.append(f"  • [{f.index}] {f.category}: {f.message}")
        return "\n".join(lines)


class ChainVerifier:
    """
    Walks a chain of blocks and reports every block that fails either its
    own digest check or the link to its predecessor.
    """

    def verify(self, chain: Sequence[Block]) -> VerificationResult:
        if not chain:
            return VerificationResult(True, "Empty chain is valid")

        result = VerificationResult(True)

        for i, block in enumerate(chain):
            # 1. Self digest; a block that fails it gets no link check
            if not block.validate():
                result.failures.append(VerificationFailure(i, f"block {i} is invalid", "block"))
                result.is_valid = False
                continue

            if i == 0:
                continue

            # 2. Link, recomputed fresh so a tampered predecessor is caught too
            if block.previous_hash != chain[i - 1].compute_digest():
                result.failures.append(VerificationFailure(i, f"block {i} is invalid", "hash_chain"))
                result.is_valid = False

        result.message = "Valid chain" if result.is_valid else f"Failed with {len(result.failures)} issues"
        return result
