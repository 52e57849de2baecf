"""Dual decode/encode comparators.

Each comparator is a pure function of one input blob: decode it into the
reference (wide) and the client (narrow) model, require both to agree on
failure, re-encode both, feed the bytes back into the reference model and
compare the results.  Divergences come back as a :class:`TrialResult`
carrying a :class:`Finding`; nothing is retried.
"""
from __future__ import annotations

import logging
from dataclasses import fields
from typing import Any, Optional, Tuple

from . import client, reference
from .config import CHECK_CONFIG
from .errors import EngineEquivError, FieldMismatchError
from .json_util import load_object
from .models import Finding, Invariant, Outcome, TrialResult, TxHashVerdict
from .structural import (
    classify_transaction_hashes,
    json_fields_are_valid,
    validate_block_consistency,
)

logger = logging.getLogger(__name__)


def _attempt(fn, *args) -> Tuple[Any, Optional[EngineEquivError]]:
    try:
        return fn(*args), None
    except EngineEquivError as e:
        return None, e


def normalize_validation_error(err: Optional[str]) -> Optional[str]:
    """Absent and empty validation errors mean the same thing."""
    return err or None


class DualComparator:
    """Shared decode-agreement / encode-agreement steps."""

    target = ""
    wide: Any = None
    narrow: Any = None

    # ------------------------------------------------------------------
    def check(self, blob: bytes) -> TrialResult:
        raise NotImplementedError

    def check_or_raise(self, blob: bytes) -> TrialResult:
        return self.check(blob).raise_for_divergence()

    # ------------------------------------------------------------------
    def _decode_both(self, blob: bytes):
        wide_obj, wide_err = _attempt(self.wide.decode, blob)
        narrow_obj, narrow_err = _attempt(self.narrow.decode, blob)
        if (wide_err is None) != (narrow_err is None):
            return None, None, self._diverged(
                blob, Invariant.DECODE_AGREEMENT,
                f"reference and client unmarshallers return inconsistent errors. "
                f"{wide_err} and {narrow_err}")
        if wide_err is not None:
            logger.debug("%s: both models rejected input: %s", self.target, wide_err)
            return None, None, TrialResult(self.target, Outcome.REJECTED, detail=str(wide_err))
        return wide_obj, narrow_obj, None

    def _encode_both(self, blob: bytes, wide_obj, narrow_obj):
        wide_blob, wide_err = _attempt(wide_obj.encode)
        narrow_blob, narrow_err = _attempt(narrow_obj.encode)
        if (wide_err is None) != (narrow_err is None):
            return None, None, self._diverged(
                blob, Invariant.ENCODE_AGREEMENT,
                f"reference and client marshallers return inconsistent errors. "
                f"{wide_err} and {narrow_err}")
        if wide_err is not None:
            return None, None, TrialResult(self.target, Outcome.REJECTED, detail=str(wide_err))
        return wide_blob, narrow_blob, None

    def _redecode(self, blob: bytes, encoded: bytes, origin: str):
        obj, err = _attempt(self.wide.decode, encoded)
        if err is not None:
            return None, self._diverged(
                blob, Invariant.ROUNDTRIP,
                f"reference model cannot decode the {origin} encoding {encoded!r}: {err}")
        return obj, None

    def _diverged(self, blob: bytes, invariant: Invariant, message: str) -> TrialResult:
        finding = Finding(self.target, invariant, message, bytes(blob))
        logger.warning("%s", finding.describe())
        return TrialResult(self.target, Outcome.DIVERGED, finding=finding, detail=message)

    def _passed(self) -> TrialResult:
        return TrialResult(self.target, Outcome.PASSED)


# ---------------------------------------------------------------------------
# forkchoiceUpdated response
# ---------------------------------------------------------------------------
class ForkchoiceComparator(DualComparator):
    target = "forkchoice"
    wide = reference.ForkChoiceResponse
    narrow = client.ForkchoiceUpdatedResponse

    def __init__(self, sentinel: Optional[str] = None,
                 exempt_payload_id: Optional[bool] = None):
        self.sentinel = sentinel or CHECK_CONFIG["sentinel_status"]
        if exempt_payload_id is None:
            exempt_payload_id = CHECK_CONFIG["exempt_payload_id_on_unknown"]
        self.exempt_payload_id = exempt_payload_id

    def check(self, blob: bytes) -> TrialResult:
        wide_obj, narrow_obj, early = self._decode_both(blob)
        if early is not None:
            return early
        wide_blob, narrow_blob, early = self._encode_both(blob, wide_obj, narrow_obj)
        if early is not None:
            return early

        round_a, early = self._redecode(blob, narrow_blob, "client")
        if early is not None:
            return early
        unknown = round_a.payload_status.status == self.sentinel
        if unknown and self.exempt_payload_id:
            logger.debug("%s: %s status, nothing to compare", self.target, self.sentinel)
            return TrialResult(self.target, Outcome.EXEMPT, detail=f"status {self.sentinel}")

        round_b, early = self._redecode(blob, wide_blob, "reference")
        if early is not None:
            return early

        if round_a.payload_id != round_b.payload_id:
            return self._mismatch(blob, "payloadId", round_a.payload_id, round_b.payload_id)
        if unknown:
            return TrialResult(self.target, Outcome.EXEMPT, detail=f"status {self.sentinel}")

        sa, sb = round_a.payload_status, round_b.payload_status
        if sa.status != sb.status:
            return self._mismatch(blob, "status", sa.status, sb.status)
        if sa.latest_valid_hash != sb.latest_valid_hash:
            return self._mismatch(blob, "latestValidHash", sa.latest_valid_hash, sb.latest_valid_hash)
        ea = normalize_validation_error(sa.validation_error)
        eb = normalize_validation_error(sb.validation_error)
        if ea != eb:
            return self._mismatch(blob, "validationError", sa.validation_error, sb.validation_error)
        return self._passed()

    def _mismatch(self, blob, name, via_client, via_reference) -> TrialResult:
        return self._diverged(
            blob, Invariant.VALUE_EQUALITY,
            f"{name}: {via_client!r} (via client) != {via_reference!r} (via reference)")


# ---------------------------------------------------------------------------
# block header
# ---------------------------------------------------------------------------
class HeaderComparator(DualComparator):
    target = "header"
    wide = reference.Header
    narrow = client.Header

    def check(self, blob: bytes) -> TrialResult:
        wide_obj, narrow_obj, early = self._decode_both(blob)
        if early is not None:
            return early
        wide_blob, narrow_blob, early = self._encode_both(blob, wide_obj, narrow_obj)
        if early is not None:
            return early
        round_a, early = self._redecode(blob, narrow_blob, "client")
        if early is not None:
            return early
        round_b, early = self._redecode(blob, wide_blob, "reference")
        if early is not None:
            return early

        if round_a != round_b:
            diff = [f.name for f in fields(round_a)
                    if getattr(round_a, f.name) != getattr(round_b, f.name)]
            return self._diverged(
                blob, Invariant.VALUE_EQUALITY,
                "headers differ in " + ", ".join(
                    f"{n}: {getattr(round_a, n)!r} != {getattr(round_b, n)!r}" for n in diff))
        return self._passed()


# ---------------------------------------------------------------------------
# execution block envelope
# ---------------------------------------------------------------------------
class BlockComparator(DualComparator):
    """Client block vs the untyped JSON it came from, then the header check.

    The untyped decoder accepts far more than the client model, so decode
    failures on either side simply end the trial.  Transactions whose JSON
    ``hash`` is missing or wrong put the input outside the contract and are
    exempt, unless ``strict_tx_hashes`` is set, in which case a wrong hash is
    reported (useful when replaying responses captured from a live node).
    """

    target = "block"
    narrow = client.ExecutionBlock

    def __init__(self, header_comparator: Optional[HeaderComparator] = None,
                 strict_tx_hashes: bool = False):
        self.headers = header_comparator or HeaderComparator()
        self.strict_tx_hashes = strict_tx_hashes

    def check(self, blob: bytes) -> TrialResult:
        json_map, err = _attempt(load_object, blob)
        if err is None:
            block, err = _attempt(self.narrow.decode, blob)
        if err is not None:
            return TrialResult(self.target, Outcome.REJECTED, detail=str(err))

        verdict = classify_transaction_hashes(block, json_map)
        if verdict is TxHashVerdict.HASH_MISMATCH and self.strict_tx_hashes:
            return self._diverged(blob, Invariant.TX_HASH,
                                  "transaction hash does not match its canonical encoding")
        if verdict is not TxHashVerdict.CONSISTENT:
            logger.debug("%s: transactions outside the contract (%s)", self.target, verdict.value)
            return TrialResult(self.target, Outcome.EXEMPT, detail=verdict.value)

        if not json_fields_are_valid(block, json_map):
            return TrialResult(self.target, Outcome.REJECTED, detail="missing wire fields")
        try:
            validate_block_consistency(block, json_map)
        except FieldMismatchError as e:
            return self._diverged(blob, Invariant.FIELD, str(e))

        result = self.headers.check(blob)
        if result.diverged:
            return result
        return self._passed()
