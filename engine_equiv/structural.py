"""Structural checks of a decoded client block against its untyped JSON.

The checks walk ``dataclasses.fields`` of the client model, so they follow
the model automatically as fields are added or removed.  Every non-embedded
field has to carry a wire name in ``metadata["json"]``; a field without one
raises :class:`SchemaError`.
"""
from __future__ import annotations

import logging
from dataclasses import Field, fields
from typing import Any, Callable, Dict, Iterator, Mapping, Tuple

from . import hexutil
from .errors import DecodeError, FieldMismatchError, SchemaError
from .models import TxHashVerdict

logger = logging.getLogger(__name__)

# fields checked elsewhere: the header by the header comparator,
# transactions by classify_transaction_hashes
SKIP_VALUE_CHECK = frozenset({"transactions"})

# untyped-value coercions applied before comparing, keyed by field name
COERCIONS: Dict[str, Callable[[Any], Any]] = {
    "hash": hexutil.to_hash,
}


def _wire_fields(block) -> Iterator[Tuple[Field, str]]:
    for f in fields(block):
        if f.metadata.get("embedded"):
            continue
        name = f.metadata.get("json", "")
        if not name:
            raise SchemaError(f"Field {f.name} had no json tag")
        yield f, name


def validate_block_consistency(block, json_map: Mapping[str, Any]) -> None:
    """Raise :class:`FieldMismatchError` if a decoded field differs from the map.

    ``json_map`` is the untyped decode of the same bytes *block* came from.
    """
    for f, name in _wire_fields(block):
        if name not in json_map:
            raise FieldMismatchError(f"{name} doesn't exist in json map for field {f.name}")
        if f.name in SKIP_VALUE_CHECK:
            continue
        json_val = json_map[name]
        coerce = COERCIONS.get(f.name)
        if coerce is not None:
            try:
                json_val = coerce(json_val)
            except DecodeError as e:
                raise FieldMismatchError(f"field {f.name}: {e}") from e
        block_val = getattr(block, f.name)
        if json_val != block_val:
            raise FieldMismatchError(
                f"fields don't match, {json_val!r} and {block_val!r} are not equal for field {f.name}")


def json_fields_are_valid(block, json_map: Mapping[str, Any]) -> bool:
    """True iff every declared wire name is a key of *json_map*."""
    for f, name in _wire_fields(block):
        if name not in json_map:
            logger.debug("wire name %s missing for field %s", name, f.name)
            return False
    return True


def classify_transaction_hashes(block, json_map: Mapping[str, Any]) -> TxHashVerdict:
    """Compare each transaction's recomputed hash with ``transactions[i].hash``."""
    if not block.transactions:
        return TxHashVerdict.CONSISTENT
    raw_txs = json_map.get("transactions")
    if not isinstance(raw_txs, list) or len(raw_txs) < len(block.transactions):
        return TxHashVerdict.MALFORMED_ENTRY

    for i, tx in enumerate(block.transactions):
        entry = raw_txs[i]
        if not isinstance(entry, dict):
            return TxHashVerdict.MALFORMED_ENTRY
        if "hash" not in entry:
            # fuzzer removed the convenience field
            return TxHashVerdict.STRIPPED_HASH
        if tx.hash_hex() != entry["hash"]:
            logger.debug("tx %d: hash %s, json says %r", i, tx.hash_hex(), entry["hash"])
            return TxHashVerdict.HASH_MISMATCH
    return TxHashVerdict.CONSISTENT


def is_bogus_transaction_hash(block, json_map: Mapping[str, Any]) -> bool:
    return classify_transaction_hashes(block, json_map) is not TxHashVerdict.CONSISTENT
