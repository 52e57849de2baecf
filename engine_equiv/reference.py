"""Reference (wide) data model: the execution client's view of the engine API.

Every type is decoded by hand, field by field, the way the execution client's
generated JSON marshallers do it.  This model is treated as ground truth.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from . import hexutil
from .errors import DecodeError
from .hashing import rlp_hash
from .json_util import dumps, load_object


def _optional(obj: Dict[str, Any], key: str, conv: Callable[[Any], Any]):
    raw = obj.get(key)
    return None if raw is None else conv(raw)


def _string(value: Any) -> str:
    if not isinstance(value, str):
        raise DecodeError(f"expected string, got {type(value).__name__}")
    return value


# ---------------------------------------------------------------------------
# forkchoiceUpdated response
# ---------------------------------------------------------------------------
@dataclass
class PayloadStatusV1:
    status: str = ""
    latest_valid_hash: Optional[bytes] = None
    validation_error: Optional[str] = None

    @classmethod
    def from_json(cls, obj: Any) -> "PayloadStatusV1":
        if obj is None:
            return cls()
        if not isinstance(obj, dict):
            raise DecodeError("payloadStatus: expected JSON object")
        return cls(
            status=_optional(obj, "status", _string) or "",
            latest_valid_hash=_optional(obj, "latestValidHash", hexutil.decode_hash),
            validation_error=_optional(obj, "validationError", _string),
        )

    def to_json(self) -> Dict[str, Any]:
        return {
            "status": self.status,
            "latestValidHash": None if self.latest_valid_hash is None
            else hexutil.encode_bytes(self.latest_valid_hash),
            "validationError": self.validation_error,
        }


@dataclass
class ForkChoiceResponse:
    payload_status: PayloadStatusV1
    payload_id: Optional[bytes] = None

    @classmethod
    def from_json(cls, obj: Dict[str, Any]) -> "ForkChoiceResponse":
        return cls(
            payload_status=PayloadStatusV1.from_json(obj.get("payloadStatus")),
            payload_id=_optional(obj, "payloadId", hexutil.decode_payload_id),
        )

    @classmethod
    def decode(cls, blob: bytes) -> "ForkChoiceResponse":
        return cls.from_json(load_object(blob))

    def to_json(self) -> Dict[str, Any]:
        return {
            "payloadStatus": self.payload_status.to_json(),
            "payloadId": None if self.payload_id is None
            else hexutil.encode_bytes(self.payload_id),
        }

    def encode(self) -> bytes:
        return dumps(self.to_json())


# ---------------------------------------------------------------------------
# block header
# ---------------------------------------------------------------------------
@dataclass
class Header:
    parent_hash: bytes = hexutil.ZERO_HASH
    uncle_hash: bytes = hexutil.ZERO_HASH
    coinbase: bytes = hexutil.ZERO_ADDRESS
    root: bytes = hexutil.ZERO_HASH
    tx_hash: bytes = hexutil.ZERO_HASH
    receipt_hash: bytes = hexutil.ZERO_HASH
    bloom: bytes = hexutil.ZERO_BLOOM
    difficulty: int = 0
    number: int = 0
    gas_limit: int = 0
    gas_used: int = 0
    time: int = 0
    extra: bytes = b""
    mix_digest: bytes = hexutil.ZERO_HASH
    nonce: bytes = hexutil.ZERO_NONCE
    base_fee: Optional[int] = None

    @classmethod
    def from_json(cls, obj: Dict[str, Any]) -> "Header":
        def req(key, conv):
            raw = obj.get(key)
            if raw is None:
                raise DecodeError(f"missing required field '{key}' for Header")
            return conv(raw)

        h = cls(
            parent_hash=req("parentHash", hexutil.decode_hash),
            uncle_hash=req("sha3Uncles", hexutil.decode_hash),
            coinbase=req("miner", hexutil.decode_address),
            root=req("stateRoot", hexutil.decode_hash),
            tx_hash=req("transactionsRoot", hexutil.decode_hash),
            receipt_hash=req("receiptsRoot", hexutil.decode_hash),
            bloom=req("logsBloom", hexutil.decode_bloom),
            difficulty=req("difficulty", hexutil.decode_big),
            number=req("number", hexutil.decode_big),
            gas_limit=req("gasLimit", hexutil.decode_uint64),
            gas_used=req("gasUsed", hexutil.decode_uint64),
            time=req("timestamp", hexutil.decode_uint64),
            extra=req("extraData", hexutil.decode_bytes),
        )
        mix = _optional(obj, "mixHash", hexutil.decode_hash)
        if mix is not None:
            h.mix_digest = mix
        nonce = _optional(obj, "nonce", hexutil.decode_nonce)
        if nonce is not None:
            h.nonce = nonce
        h.base_fee = _optional(obj, "baseFeePerGas", hexutil.decode_big)
        return h

    @classmethod
    def decode(cls, blob: bytes) -> "Header":
        return cls.from_json(load_object(blob))

    def hash(self) -> bytes:
        fields = [
            self.parent_hash, self.uncle_hash, self.coinbase, self.root,
            self.tx_hash, self.receipt_hash, self.bloom, self.difficulty,
            self.number, self.gas_limit, self.gas_used, self.time, self.extra,
            self.mix_digest, self.nonce,
        ]
        if self.base_fee is not None:
            fields.append(self.base_fee)
        return rlp_hash(fields)

    def to_json(self) -> Dict[str, Any]:
        q, b = hexutil.encode_quantity, hexutil.encode_bytes
        return {
            "parentHash": b(self.parent_hash),
            "sha3Uncles": b(self.uncle_hash),
            "miner": b(self.coinbase),
            "stateRoot": b(self.root),
            "transactionsRoot": b(self.tx_hash),
            "receiptsRoot": b(self.receipt_hash),
            "logsBloom": b(self.bloom),
            "difficulty": q(self.difficulty),
            "number": q(self.number),
            "gasLimit": q(self.gas_limit),
            "gasUsed": q(self.gas_used),
            "timestamp": q(self.time),
            "extraData": b(self.extra),
            "mixHash": b(self.mix_digest),
            "nonce": b(self.nonce),
            "baseFeePerGas": None if self.base_fee is None else q(self.base_fee),
            "hash": b(self.hash()),
        }

    def encode(self) -> bytes:
        return dumps(self.to_json())
