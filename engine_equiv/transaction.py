"""Execution-layer transactions as they appear in ``eth_getBlockBy*`` output.

Both data models embed this type unchanged, the same way both clients share
the execution client's transaction type. Only the legacy (``0x0``) and the
dynamic-fee (``0x2``) envelopes are understood; anything else is a decode
error.

The ``hash`` key of the JSON form is an API convenience: it is ignored on
decode and recomputed from the canonical encoding on encode.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import rlp

from . import hexutil
from .errors import DecodeError
from .hashing import prefixed_rlp_hash, rlp_hash

LEGACY_TX_TYPE = 0x0
DYNAMIC_FEE_TX_TYPE = 0x2


@dataclass
class AccessTuple:
    address: bytes
    storage_keys: List[bytes] = field(default_factory=list)

    @classmethod
    def from_json(cls, obj: Any) -> "AccessTuple":
        if not isinstance(obj, dict):
            raise DecodeError("access list entry: expected JSON object")
        address = obj.get("address")
        keys = obj.get("storageKeys")
        if address is None:
            raise DecodeError("missing required field 'address' in access list entry")
        if keys is None:
            raise DecodeError("missing required field 'storageKeys' in access list entry")
        if not isinstance(keys, list):
            raise DecodeError("access list entry: 'storageKeys' must be an array")
        return cls(
            address=hexutil.decode_address(address),
            storage_keys=[hexutil.decode_hash(k) for k in keys],
        )

    def to_json(self) -> Dict[str, Any]:
        return {
            "address": hexutil.encode_bytes(self.address),
            "storageKeys": [hexutil.encode_bytes(k) for k in self.storage_keys],
        }


@dataclass
class Transaction:
    type: int = LEGACY_TX_TYPE
    nonce: int = 0
    gas: int = 0
    to: Optional[bytes] = None          # None = contract creation
    value: int = 0
    input: bytes = b""
    v: int = 0
    r: int = 0
    s: int = 0
    # legacy only
    gas_price: Optional[int] = None
    # dynamic-fee only
    chain_id: Optional[int] = None
    max_priority_fee_per_gas: Optional[int] = None
    max_fee_per_gas: Optional[int] = None
    access_list: List[AccessTuple] = field(default_factory=list)

    # ------------------------------------------------------------------
    # canonical encoding
    # ------------------------------------------------------------------
    def _payload(self) -> list:
        to = self.to if self.to is not None else b""
        if self.type == LEGACY_TX_TYPE:
            return [self.nonce, self.gas_price or 0, self.gas, to, self.value,
                    self.input, self.v, self.r, self.s]
        access = [[t.address, list(t.storage_keys)] for t in self.access_list]
        return [self.chain_id or 0, self.nonce, self.max_priority_fee_per_gas or 0,
                self.max_fee_per_gas or 0, self.gas, to, self.value, self.input,
                access, self.v, self.r, self.s]

    def canonical_bytes(self) -> bytes:
        """Consensus encoding: plain RLP for legacy, ``type || rlp`` otherwise."""
        body = rlp.encode(self._payload())
        if self.type == LEGACY_TX_TYPE:
            return body
        return bytes([self.type]) + body

    def hash(self) -> bytes:
        if self.type == LEGACY_TX_TYPE:
            return rlp_hash(self._payload())
        return prefixed_rlp_hash(self.type, self._payload())

    def hash_hex(self) -> str:
        return hexutil.encode_bytes(self.hash())

    # ------------------------------------------------------------------
    # JSON
    # ------------------------------------------------------------------
    @classmethod
    def from_json(cls, obj: Any) -> "Transaction":
        if not isinstance(obj, dict):
            raise DecodeError("transaction: expected JSON object")

        def req(key, conv):
            raw = obj.get(key)
            if raw is None:
                raise DecodeError(f"missing required field '{key}' in transaction")
            return conv(raw)

        def opt(key, conv):
            raw = obj.get(key)
            return None if raw is None else conv(raw)

        tx_type = req("type", hexutil.decode_uint64)
        common = dict(
            type=tx_type,
            nonce=req("nonce", hexutil.decode_uint64),
            gas=req("gas", hexutil.decode_uint64),
            to=opt("to", hexutil.decode_address),
            value=req("value", hexutil.decode_big),
            input=req("input", hexutil.decode_bytes),
        )
        if tx_type == LEGACY_TX_TYPE:
            tx = cls(gas_price=req("gasPrice", hexutil.decode_big), **common)
        elif tx_type == DYNAMIC_FEE_TX_TYPE:
            access = req("accessList", _access_list)
            tx = cls(
                chain_id=req("chainId", hexutil.decode_big),
                max_priority_fee_per_gas=req("maxPriorityFeePerGas", hexutil.decode_big),
                max_fee_per_gas=req("maxFeePerGas", hexutil.decode_big),
                access_list=access,
                **common,
            )
        else:
            raise DecodeError(f"transaction type {tx_type:#x} not supported")
        tx.v = req("v", hexutil.decode_big)
        tx.r = req("r", hexutil.decode_big)
        tx.s = req("s", hexutil.decode_big)
        return tx

    def to_json(self) -> Dict[str, Any]:
        enc = hexutil.encode_quantity
        out: Dict[str, Any] = {
            "type": enc(self.type),
            "nonce": enc(self.nonce),
            "gas": enc(self.gas),
            "to": None if self.to is None else hexutil.encode_bytes(self.to),
            "value": enc(self.value),
            "input": hexutil.encode_bytes(self.input),
        }
        if self.type == LEGACY_TX_TYPE:
            out["gasPrice"] = enc(self.gas_price or 0)
        else:
            out["chainId"] = enc(self.chain_id or 0)
            out["maxPriorityFeePerGas"] = enc(self.max_priority_fee_per_gas or 0)
            out["maxFeePerGas"] = enc(self.max_fee_per_gas or 0)
            out["accessList"] = [t.to_json() for t in self.access_list]
        out["v"] = enc(self.v)
        out["r"] = enc(self.r)
        out["s"] = enc(self.s)
        out["hash"] = self.hash_hex()
        return out


def _access_list(raw: Any) -> List[AccessTuple]:
    if not isinstance(raw, list):
        raise DecodeError("transaction: 'accessList' must be an array")
    return [AccessTuple.from_json(t) for t in raw]
