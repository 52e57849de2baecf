"""Hex codecs for execution-API JSON values.

Follows the go-ethereum ``hexutil`` rules both data models rely on:

* **quantity**: ``0x`` prefix, at least one digit, no leading zeros
  (``0x0`` is fine), bounded by a bit width;
* **data**: ``0x`` prefix followed by an even number of hex digits;
* **fixed data**: data with an exact byte length (hashes, addresses and so on).

``None`` is never accepted here; callers decide what a JSON ``null`` means.
"""
from __future__ import annotations

import re
from typing import Any, Callable

from .errors import DecodeError

_HEX_DIGITS = re.compile(r"[0-9a-fA-F]+")
_HEX_PAIRS = re.compile(r"(?:[0-9a-fA-F]{2})*")

HASH_LENGTH = 32
ADDRESS_LENGTH = 20
BLOOM_LENGTH = 256
NONCE_LENGTH = 8
PAYLOAD_ID_LENGTH = 8

ZERO_HASH = bytes(HASH_LENGTH)
ZERO_ADDRESS = bytes(ADDRESS_LENGTH)
ZERO_BLOOM = bytes(BLOOM_LENGTH)
ZERO_NONCE = bytes(NONCE_LENGTH)


def has_0x_prefix(s: str) -> bool:
    return len(s) >= 2 and s[0] == "0" and s[1] in "xX"


def _strip_prefix(value: Any, what: str) -> str:
    if not isinstance(value, str):
        raise DecodeError(f"{what}: expected hex string, got {type(value).__name__}")
    if not value:
        raise DecodeError(f"{what}: empty hex string")
    if not has_0x_prefix(value):
        raise DecodeError(f"{what}: hex string without 0x prefix")
    return value[2:]


# ---------------------------------------------------------------------------
# quantities
# ---------------------------------------------------------------------------
def decode_quantity(value: Any, bits: int = 256) -> int:
    digits = _strip_prefix(value, "quantity")
    if not digits:
        raise DecodeError("quantity: hex string \"0x\"")
    if len(digits) > 1 and digits[0] == "0":
        raise DecodeError("quantity: hex number with leading zero digits")
    if not _HEX_DIGITS.fullmatch(digits):
        raise DecodeError(f"quantity: invalid hex string {value!r}")
    if len(digits) > bits // 4:
        raise DecodeError(f"quantity: hex number > {bits} bits")
    return int(digits, 16)


def decode_uint64(value: Any) -> int:
    return decode_quantity(value, 64)


def decode_big(value: Any) -> int:
    return decode_quantity(value, 256)


def encode_quantity(n: int) -> str:
    if n < 0:
        raise ValueError("negative quantity")
    return hex(n)


# ---------------------------------------------------------------------------
# byte strings
# ---------------------------------------------------------------------------
def decode_bytes(value: Any) -> bytes:
    digits = _strip_prefix(value, "bytes")
    if len(digits) % 2:
        raise DecodeError("bytes: hex string of odd length")
    if not _HEX_PAIRS.fullmatch(digits):
        raise DecodeError(f"bytes: invalid hex string {value!r}")
    return bytes.fromhex(digits)


def fixed_bytes(size: int) -> Callable[[Any], bytes]:
    """Return a decoder for hex data of exactly *size* bytes."""

    def decode(value: Any) -> bytes:
        raw = decode_bytes(value)
        if len(raw) != size:
            raise DecodeError(f"hex string has length {len(raw) * 2}, want {size * 2}")
        return raw

    decode.__name__ = f"decode_bytes{size}"
    return decode


decode_hash = fixed_bytes(HASH_LENGTH)
decode_address = fixed_bytes(ADDRESS_LENGTH)
decode_bloom = fixed_bytes(BLOOM_LENGTH)
decode_nonce = fixed_bytes(NONCE_LENGTH)
decode_payload_id = fixed_bytes(PAYLOAD_ID_LENGTH)


def encode_bytes(b: bytes) -> str:
    return "0x" + bytes(b).hex()


def to_hash(value: str) -> bytes:
    """Lenient hash conversion: odd lengths are padded, short input is
    left-padded and long input keeps its last 32 bytes."""
    if not isinstance(value, str):
        raise DecodeError(f"hash: expected string, got {type(value).__name__}")
    digits = value[2:] if has_0x_prefix(value) else value
    if len(digits) % 2:
        digits = "0" + digits
    if not _HEX_PAIRS.fullmatch(digits):
        raise DecodeError(f"hash: invalid hex string {value!r}")
    raw = bytes.fromhex(digits)[-HASH_LENGTH:]
    return raw.rjust(HASH_LENGTH, b"\x00")
