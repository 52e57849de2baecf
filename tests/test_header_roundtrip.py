"""
Block header: reference ↔ client differential round trip.

The client's re-encoding, decoded by the reference model, must deep-equal the
reference model's own round trip, field by field.
"""
import copy

import orjson
import pytest
from hypothesis import example, given, settings, strategies as st

from engine_equiv import client, reference
from engine_equiv.comparator import HeaderComparator
from engine_equiv.config import CHECK_CONFIG
from engine_equiv.models import Invariant, Outcome
from engine_equiv.seed_generator import SeedGenerator

SEED = SeedGenerator().generate()["header"]
REQUIRED = ["parentHash", "sha3Uncles", "miner", "stateRoot", "transactionsRoot",
            "receiptsRoot", "logsBloom", "difficulty", "number", "gasLimit",
            "gasUsed", "timestamp", "extraData"]
OPTIONAL = ["mixHash", "nonce", "baseFeePerGas"]

hex_values = st.one_of(
    st.none(),
    st.integers(min_value=0, max_value=2**64 - 1),
    st.integers(min_value=0, max_value=2**300).map(hex),
    st.binary(max_size=300).map(lambda b: "0x" + b.hex()),
    st.binary(min_size=1, max_size=8).map(lambda b: "0x0" + b.hex()),
    st.sampled_from(["", "0x", "0X0", "0xZZ", "0x" + "ff" * 32, "0x" + "f" * 17]),
    st.text(max_size=10),
    st.lists(st.integers(min_value=-10, max_value=10), max_size=2),
)


@st.composite
def mutated_header(draw):
    obj = orjson.loads(SEED)
    for key in draw(st.lists(st.sampled_from(sorted(obj)), unique=True, max_size=4)):
        if draw(st.booleans()):
            del obj[key]
        else:
            obj[key] = draw(hex_values)
    return obj


@given(st.binary(max_size=512))
@example(SEED)
@example(b"{}")
@settings(deadline=None, max_examples=CHECK_CONFIG["max_examples"])
def test_fuzz_header_bytes(blob):
    HeaderComparator().check_or_raise(blob)


@given(mutated_header())
@settings(deadline=None, max_examples=CHECK_CONFIG["max_examples"])
def test_fuzz_header_mutations(obj):
    HeaderComparator().check_or_raise(orjson.dumps(obj))


def test_seed_passes():
    assert HeaderComparator().check(SEED).outcome is Outcome.PASSED


@pytest.mark.parametrize("key", REQUIRED)
def test_required_field_missing_rejected_by_both(key):
    obj = orjson.loads(SEED)
    del obj[key]
    assert HeaderComparator().check(orjson.dumps(obj)).outcome is Outcome.REJECTED
    obj[key] = None
    assert HeaderComparator().check(orjson.dumps(obj)).outcome is Outcome.REJECTED


@pytest.mark.parametrize("key", OPTIONAL)
def test_optional_field_may_be_absent(key):
    obj = orjson.loads(SEED)
    del obj[key]
    blob = orjson.dumps(obj)
    assert HeaderComparator().check(blob).outcome is Outcome.PASSED
    assert reference.Header.decode(blob) == reference.Header.decode(client.Header.decode(blob).encode())


def test_derived_hash_key_ignored():
    obj = orjson.loads(SEED)
    obj["hash"] = "not even hex"
    assert HeaderComparator().check(orjson.dumps(obj)).outcome is Outcome.PASSED


def test_uppercase_hex_normalised():
    obj = orjson.loads(SEED)
    obj["parentHash"] = obj["parentHash"].upper().replace("0X", "0x")
    assert HeaderComparator().check(orjson.dumps(obj)).outcome is Outcome.PASSED


def test_reference_encoding_carries_hash():
    header = SeedGenerator().header()
    assert orjson.loads(header.encode())["hash"] == "0x" + header.hash().hex()


class _LosesBaseFee(client.Header):
    def encode(self):
        self.base_fee = None
        return super().encode()


def test_lost_field_is_reported():
    comparator = type("Broken", (HeaderComparator,), {"narrow": _LosesBaseFee})()
    result = comparator.check(SEED)
    assert result.outcome is Outcome.DIVERGED
    assert result.finding.invariant is Invariant.VALUE_EQUALITY
    assert "base_fee" in result.finding.message


def test_field_order_is_irrelevant():
    obj = orjson.loads(SEED)
    reordered = dict(reversed(list(copy.deepcopy(obj).items())))
    assert client.Header.decode(orjson.dumps(reordered)) == client.Header.decode(SEED)
