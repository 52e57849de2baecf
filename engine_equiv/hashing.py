"""Keccak-256 / RLP helpers for content-derived hashes."""
from __future__ import annotations

from typing import Any

import rlp
from web3 import Web3


def keccak256(data: bytes) -> bytes:
    return bytes(Web3.keccak(data))


def rlp_hash(obj: Any) -> bytes:
    """keccak256(rlp(obj)), the hash geth uses for headers and legacy txs."""
    return keccak256(rlp.encode(obj))


def prefixed_rlp_hash(prefix: int, obj: Any) -> bytes:
    """Hash of a typed (EIP-2718) envelope: keccak256(type || rlp(payload))."""
    return keccak256(bytes([prefix]) + rlp.encode(obj))
