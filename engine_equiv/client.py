"""Client (narrow) data model: the consensus client's view of the engine API.

Fields declare their JSON wire name in dataclass metadata (``metadata["json"]``)
and are decoded and encoded generically from that declaration, so the
structural checkers can walk them with :func:`dataclasses.fields`.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass, field, fields
from typing import Any, Callable, Dict, List, Optional

from . import hexutil
from .errors import DecodeError
from .json_util import dumps, load_object
from .transaction import Transaction


def wire(name: str, decode: Callable[[Any], Any], encode: Callable[[Any], Any], *,
         default: Any = None, default_factory: Any = None,
         required: bool = False, nullable: bool = True):
    """Declare a field carried on the wire under *name*.

    ``nullable=False`` makes an explicit JSON ``null`` a decode error; otherwise
    ``null`` is handled like an absent key.
    """
    meta = {"json": name, "decode": decode, "encode": encode,
            "required": required, "nullable": nullable}
    if default_factory is not None:
        return field(default_factory=default_factory, metadata=meta)
    return field(default=default, metadata=meta)


def embedded():
    """Mark a field whose own fields sit at the top level of the JSON object."""
    return field(default=None, metadata={"embedded": True})


def _decode_fields(cls, obj: Dict[str, Any]) -> Dict[str, Any]:
    kwargs: Dict[str, Any] = {}
    for f in fields(cls):
        if f.metadata.get("embedded"):
            continue
        meta = f.metadata
        name = meta["json"]
        if name in obj and obj[name] is None and not meta["nullable"]:
            raise DecodeError(f"field '{name}' must not be null")
        raw = obj.get(name)
        if raw is None:
            if meta["required"]:
                raise DecodeError(f"missing required field '{name}' for {cls.__name__}")
            continue
        kwargs[f.name] = meta["decode"](raw)
    return kwargs


def _encode_fields(obj) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for f in fields(obj):
        value = getattr(obj, f.name)
        if f.metadata.get("embedded"):
            out.update(value.to_json())
            continue
        out[f.metadata["json"]] = None if value is None else f.metadata["encode"](value)
    return out


_hash = (hexutil.decode_hash, hexutil.encode_bytes)
_big = (hexutil.decode_big, hexutil.encode_quantity)
_uint64 = (hexutil.decode_uint64, hexutil.encode_quantity)


# ---------------------------------------------------------------------------
# forkchoiceUpdated response
# ---------------------------------------------------------------------------
class Status(enum.IntEnum):
    UNKNOWN = 0
    VALID = 1
    INVALID = 2
    SYNCING = 3
    ACCEPTED = 4
    INVALID_BLOCK_HASH = 5
    INVALID_TERMINAL_BLOCK = 6


def _decode_status(raw: Any) -> Status:
    if not isinstance(raw, str):
        raise DecodeError(f"status: expected string, got {type(raw).__name__}")
    return Status.__members__.get(raw, Status.UNKNOWN)


def _decode_string(raw: Any) -> str:
    if not isinstance(raw, str):
        raise DecodeError(f"expected string, got {type(raw).__name__}")
    return raw


@dataclass
class PayloadStatus:
    status: Status = wire("status", _decode_status, lambda s: s.name,
                          default=Status.UNKNOWN)
    latest_valid_hash: Optional[bytes] = wire("latestValidHash", *_hash)
    # empty string means "no error" and goes back out as null
    validation_error: str = wire("validationError", _decode_string,
                                 lambda e: e or None, default="")

    @classmethod
    def from_json(cls, obj: Any) -> "PayloadStatus":
        if obj is None:
            return cls()
        if not isinstance(obj, dict):
            raise DecodeError("payloadStatus: expected JSON object")
        return cls(**_decode_fields(cls, obj))

    def to_json(self) -> Dict[str, Any]:
        return _encode_fields(self)


@dataclass
class ForkchoiceUpdatedResponse:
    status: PayloadStatus = wire("payloadStatus", PayloadStatus.from_json,
                                 lambda p: p.to_json(), default_factory=PayloadStatus)
    payload_id: Optional[bytes] = wire("payloadId", hexutil.decode_payload_id,
                                       hexutil.encode_bytes)

    @classmethod
    def decode(cls, blob: bytes) -> "ForkchoiceUpdatedResponse":
        return cls(**_decode_fields(cls, load_object(blob)))

    def encode(self) -> bytes:
        return dumps(_encode_fields(self))


# ---------------------------------------------------------------------------
# block header and execution block
# ---------------------------------------------------------------------------
@dataclass
class Header:
    parent_hash: bytes = wire("parentHash", *_hash, default=hexutil.ZERO_HASH, required=True)
    uncle_hash: bytes = wire("sha3Uncles", *_hash, default=hexutil.ZERO_HASH, required=True)
    coinbase: bytes = wire("miner", hexutil.decode_address, hexutil.encode_bytes,
                           default=hexutil.ZERO_ADDRESS, required=True)
    root: bytes = wire("stateRoot", *_hash, default=hexutil.ZERO_HASH, required=True)
    tx_hash: bytes = wire("transactionsRoot", *_hash, default=hexutil.ZERO_HASH, required=True)
    receipt_hash: bytes = wire("receiptsRoot", *_hash, default=hexutil.ZERO_HASH, required=True)
    bloom: bytes = wire("logsBloom", hexutil.decode_bloom, hexutil.encode_bytes,
                        default=hexutil.ZERO_BLOOM, required=True)
    difficulty: int = wire("difficulty", *_big, default=0, required=True)
    number: int = wire("number", *_big, default=0, required=True)
    gas_limit: int = wire("gasLimit", *_uint64, default=0, required=True)
    gas_used: int = wire("gasUsed", *_uint64, default=0, required=True)
    time: int = wire("timestamp", *_uint64, default=0, required=True)
    extra: bytes = wire("extraData", hexutil.decode_bytes, hexutil.encode_bytes,
                        default=b"", required=True)
    mix_digest: bytes = wire("mixHash", *_hash, default=hexutil.ZERO_HASH)
    nonce: bytes = wire("nonce", hexutil.decode_nonce, hexutil.encode_bytes,
                        default=hexutil.ZERO_NONCE)
    base_fee: Optional[int] = wire("baseFeePerGas", *_big)

    @classmethod
    def from_json(cls, obj: Dict[str, Any]) -> "Header":
        return cls(**_decode_fields(cls, obj))

    @classmethod
    def decode(cls, blob: bytes) -> "Header":
        return cls.from_json(load_object(blob))

    def to_json(self) -> Dict[str, Any]:
        return _encode_fields(self)

    def encode(self) -> bytes:
        return dumps(self.to_json())


def _decode_transactions(raw: Any) -> List[Transaction]:
    if not isinstance(raw, list):
        raise DecodeError("transactions: expected JSON array")
    return [Transaction.from_json(tx) for tx in raw]


@dataclass
class ExecutionBlock:
    header: Header = embedded()
    hash: bytes = wire("hash", *_hash, default=hexutil.ZERO_HASH,
                       required=True, nullable=False)
    transactions: List[Transaction] = wire(
        "transactions", _decode_transactions, lambda txs: [tx.to_json() for tx in txs],
        default_factory=list, nullable=False)
    total_difficulty: str = wire("totalDifficulty", _decode_string, lambda td: td,
                                 default="", nullable=False)

    @classmethod
    def from_json(cls, obj: Dict[str, Any]) -> "ExecutionBlock":
        kwargs = _decode_fields(cls, obj)
        kwargs["header"] = Header.from_json(obj)
        return cls(**kwargs)

    @classmethod
    def decode(cls, blob: bytes) -> "ExecutionBlock":
        return cls.from_json(load_object(blob))

    def to_json(self) -> Dict[str, Any]:
        return _encode_fields(self)

    def encode(self) -> bytes:
        return dumps(self.to_json())
