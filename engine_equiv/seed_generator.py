"""Initial fuzz corpus: one fully populated example per compared type.

Every field carries a representative non-default value (non-zero hashes,
populated payload id, non-sentinel status, non-empty validation error) so
the fuzzer starts from an input that reaches every comparison.
"""
from __future__ import annotations

from typing import Dict, List

from . import client, reference
from .transaction import AccessTuple, DYNAMIC_FEE_TX_TYPE, LEGACY_TX_TYPE, Transaction

SEED_STATUS = "INVALID_TERMINAL_BLOCK"
SEED_LATEST_VALID_HASH = bytes([0xFF, 0x01]).ljust(32, b"\x00")
SEED_VALIDATION_ERROR = "asjajshjahsaj"
SEED_PAYLOAD_ID = bytes([0x01, 0xFF, 0xAA, 0x00, 0xEE, 0xFE, 0x00, 0x00])

# keccak256(rlp([])): uncle hash of a block without uncles
EMPTY_UNCLE_HASH = bytes.fromhex(
    "1dcc4de8dec75d7aab85b567b6ccd41ad312451b948a7413f0a142fd40d49347")


class SeedGenerator:
    """Build and serialise the seed objects, one per comparator target."""

    def forkchoice(self) -> reference.ForkChoiceResponse:
        return reference.ForkChoiceResponse(
            payload_status=reference.PayloadStatusV1(
                status=SEED_STATUS,
                latest_valid_hash=SEED_LATEST_VALID_HASH,
                validation_error=SEED_VALIDATION_ERROR,
            ),
            payload_id=SEED_PAYLOAD_ID,
        )

    def header(self) -> reference.Header:
        return reference.Header(
            parent_hash=bytes.fromhex("d4e56740f876aef8c010b86a40d5f56745a118d0906a34e69aec8c0db1cb8fa3"),
            uncle_hash=EMPTY_UNCLE_HASH,
            coinbase=bytes.fromhex("05a56e2d52c817161883f50c441c3228cfe54d9f"),
            root=bytes.fromhex("d67e4d450343046425ae4271474353857ab860dbc0a1dde64b41b5cd3a532bf3"),
            tx_hash=bytes(range(32)),
            receipt_hash=bytes(range(32, 64)),
            bloom=bytes([0x01]) + bytes(254) + bytes([0x80]),
            difficulty=0x3ff800000,
            number=0x11a8f3b,
            gas_limit=30_000_000,
            gas_used=12_345_678,
            time=1_681_338_455,
            extra=b"engine-equiv seed",
            mix_digest=bytes.fromhex("969b900de27b6ac6a67742365dd65f55a0526c41fd18e1b16f1a1215c2e66f59"),
            nonce=bytes.fromhex("539bd4979fef1ec4"),
            base_fee=7 * 10**9,
        )

    def transactions(self) -> List[Transaction]:
        recipient = bytes.fromhex("3535353535353535353535353535353535353535")
        return [
            Transaction(
                type=LEGACY_TX_TYPE, nonce=9, gas_price=20 * 10**9, gas=21_000,
                to=recipient, value=10**18, input=b"",
                v=37, r=0x28EF61340BD939BC2195FE537567866003E1A15D3C71FF63E1590620AA636276,
                s=0x67CBE9D8997F761AECB703304B3800CCF555C9F3DC64214B297FB1966A3B6D83,
            ),
            Transaction(
                type=DYNAMIC_FEE_TX_TYPE, chain_id=1, nonce=10,
                max_priority_fee_per_gas=2 * 10**9, max_fee_per_gas=30 * 10**9,
                gas=60_000, to=None, value=0, input=bytes.fromhex("6080604052"),
                access_list=[AccessTuple(address=recipient, storage_keys=[bytes(31) + b"\x01"])],
                v=1, r=0x1, s=0x2,
            ),
        ]

    def block(self) -> client.ExecutionBlock:
        wide = self.header()
        return client.ExecutionBlock(
            header=client.Header.from_json(wide.to_json()),
            hash=wide.hash(),
            transactions=self.transactions(),
            total_difficulty="0xc70d815d562d3cfa955",
        )

    # ------------------------------------------------------------------
    def generate(self) -> Dict[str, bytes]:
        """target name → serialised seed."""
        return {
            "forkchoice": self.forkchoice().encode(),
            "header": self.header().encode(),
            "block": self.block().encode(),
        }
