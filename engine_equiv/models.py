from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional

import xxhash

from .errors import DivergenceError


class Outcome(str, enum.Enum):
    PASSED = "passed"        # both models agree on every checked value
    EXEMPT = "exempt"        # documented relaxation, nothing left to compare
    REJECTED = "rejected"    # input rejected before comparison (agreeing failure)
    DIVERGED = "diverged"


class Invariant(str, enum.Enum):
    DECODE_AGREEMENT = "A"
    ENCODE_AGREEMENT = "B"
    VALUE_EQUALITY = "C"
    ROUNDTRIP = "ROUNDTRIP"      # re-decoding a model's own output failed
    FIELD = "FIELD"              # structural equivalence vs the untyped map
    TX_HASH = "TX_HASH"


class TxHashVerdict(str, enum.Enum):
    CONSISTENT = "consistent"
    MALFORMED_ENTRY = "malformed-entry"   # element is not a JSON object
    STRIPPED_HASH = "stripped-hash"       # convenience field removed from input
    HASH_MISMATCH = "hash-mismatch"


def fingerprint(blob: bytes) -> str:
    """Stable content id for corpus and finding files."""
    return xxhash.xxh64(blob).hexdigest()


@dataclass
class Finding:
    """One divergence between the models, with the input that reproduces it."""
    target: str
    invariant: Invariant
    message: str
    blob: bytes

    @property
    def fingerprint(self) -> str:
        return fingerprint(self.blob)

    def describe(self) -> str:
        return (f"[{self.target}] invariant {self.invariant.value} broken: {self.message}"
                f" (input 0x{self.blob.hex()})")


@dataclass
class TrialResult:
    target: str
    outcome: Outcome
    finding: Optional[Finding] = None
    detail: str = ""

    @property
    def diverged(self) -> bool:
        return self.outcome is Outcome.DIVERGED

    def raise_for_divergence(self) -> "TrialResult":
        if self.finding is not None:
            raise DivergenceError(self.finding)
        return self
