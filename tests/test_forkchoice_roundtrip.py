"""
forkchoiceUpdated response: reference ↔ client differential round trip.

• arbitrary bytes never make the models disagree
• seed mutations (dropped / replaced / retyped fields) never make them disagree
• a client model with a deliberate bug is caught by the right invariant
"""
import copy

import orjson
import pytest
from hypothesis import example, given, settings, strategies as st

from engine_equiv import client
from engine_equiv.comparator import ForkchoiceComparator, normalize_validation_error
from engine_equiv.config import CHECK_CONFIG
from engine_equiv.errors import DecodeError, DivergenceError, EncodeError
from engine_equiv.models import Invariant, Outcome
from engine_equiv.seed_generator import SeedGenerator

SEED = SeedGenerator().generate()["forkchoice"]

# ── strategies ────────────────────────────────────────────────
hex_strings = st.one_of(
    st.binary(max_size=40).map(lambda b: "0x" + b.hex()),
    st.sampled_from(["", "0x", "0x0", "0x00", "0X1f", "0xg1", "ff01"]),
)
leaves = st.one_of(
    st.none(),
    st.booleans(),
    st.integers(min_value=-(2**63), max_value=2**64 - 1),
    st.floats(allow_nan=False, allow_infinity=False),
    st.text(max_size=20),
    hex_strings,
    st.sampled_from([s.name for s in client.Status] + ["valid", "BOGUS"]),
)
json_values = st.recursive(
    leaves,
    lambda children: st.one_of(
        st.lists(children, max_size=3),
        st.dictionaries(st.text(max_size=8), children, max_size=3),
    ),
    max_leaves=6,
)


@st.composite
def mutated(draw, base):
    """Drop, replace or keep every key of *base*, recursing into objects."""
    obj = copy.deepcopy(base)
    for key in list(obj):
        action = draw(st.sampled_from(["keep", "keep", "drop", "replace", "descend"]))
        if action == "drop":
            del obj[key]
        elif action == "replace":
            obj[key] = draw(json_values)
        elif action == "descend" and isinstance(obj[key], dict):
            obj[key] = draw(mutated(obj[key]))
    extra = draw(st.dictionaries(st.text(max_size=8), json_values, max_size=2))
    for key, value in extra.items():
        obj.setdefault(key, value)
    return obj


def _blob(obj) -> bytes:
    return orjson.dumps(obj)


# ── fuzz targets ──────────────────────────────────────────────
@given(st.binary(max_size=512))
@example(SEED)
@example(b"null")
@example(b"{}")
@example(b'{"payloadStatus": null}')
@settings(deadline=None, max_examples=CHECK_CONFIG["max_examples"])
def test_fuzz_forkchoice_bytes(blob):
    ForkchoiceComparator().check_or_raise(blob)


@given(mutated(orjson.loads(SEED)))
@settings(deadline=None, max_examples=CHECK_CONFIG["max_examples"])
def test_fuzz_forkchoice_mutations(obj):
    ForkchoiceComparator().check_or_raise(_blob(obj))


# ── fixed cases ───────────────────────────────────────────────
def _seed_with(**status):
    obj = orjson.loads(SEED)
    obj["payloadStatus"].update(status)
    return _blob(obj)


def test_seed_passes():
    assert ForkchoiceComparator().check(SEED).outcome is Outcome.PASSED


@pytest.mark.parametrize("status", ["UNKNOWN", "NOT_A_STATUS", "valid", None])
def test_unrecognised_status_is_exempt(status):
    result = ForkchoiceComparator().check(_seed_with(status=status))
    assert result.outcome is Outcome.EXEMPT
    assert result.finding is None


def test_payload_id_compared_on_unknown_only_when_not_exempt():
    blob = _seed_with(status="BOGUS")
    lax = _with_client(_DropsPayloadId).check(blob)
    assert lax.outcome is Outcome.EXEMPT

    strict = _with_client(_DropsPayloadId, exempt_payload_id=False).check(blob)
    assert strict.outcome is Outcome.DIVERGED
    assert strict.finding.invariant is Invariant.VALUE_EQUALITY
    assert "payloadId" in strict.finding.message

    # a clean client still gets the exemption on the strict path
    clean = ForkchoiceComparator(exempt_payload_id=False).check(blob)
    assert clean.outcome is Outcome.EXEMPT


@pytest.mark.parametrize("err", ["", None])
def test_empty_and_absent_validation_error_agree(err):
    assert ForkchoiceComparator().check(_seed_with(validationError=err)).outcome is Outcome.PASSED


def test_normalize_validation_error():
    assert normalize_validation_error(None) is None
    assert normalize_validation_error("") is None
    assert normalize_validation_error("boom") == "boom"


@pytest.mark.parametrize("blob", [
    b"", b"{", b"[]", b'"x"', b"1",
    b'{"payloadStatus": []}',
    b'{"payloadStatus": {"status": 1}}',
    b'{"payloadId": "0x01"}',
    b'{"payloadStatus": {"latestValidHash": "0x00"}}',
    b'{"payloadStatus": {"validationError": false}}',
])
def test_both_models_reject(blob):
    assert ForkchoiceComparator().check(blob).outcome is Outcome.REJECTED


# ── broken client models ──────────────────────────────────────
class _DropsPayloadId(client.ForkchoiceUpdatedResponse):
    def encode(self):
        self.payload_id = None
        return super().encode()


class _RejectsExtraKeys(client.ForkchoiceUpdatedResponse):
    @classmethod
    def decode(cls, blob):
        obj = orjson.loads(blob)
        if isinstance(obj, dict) and set(obj) - {"payloadStatus", "payloadId"}:
            raise DecodeError("unknown field")
        return super().decode(blob)


class _CannotEncode(client.ForkchoiceUpdatedResponse):
    def encode(self):
        raise EncodeError("nope")


class _WritesGarbage(client.ForkchoiceUpdatedResponse):
    def encode(self):
        return b"[1, 2, 3]"


def _with_client(narrow, **kwargs):
    return type("BrokenComparator", (ForkchoiceComparator,), {"narrow": narrow})(**kwargs)


@pytest.mark.parametrize("narrow, blob, invariant", [
    (_DropsPayloadId, SEED, Invariant.VALUE_EQUALITY),
    (_RejectsExtraKeys, _blob({**orjson.loads(SEED), "extra": 1}), Invariant.DECODE_AGREEMENT),
    (_CannotEncode, SEED, Invariant.ENCODE_AGREEMENT),
    (_WritesGarbage, SEED, Invariant.ROUNDTRIP),
])
def test_broken_client_is_reported(narrow, blob, invariant):
    result = _with_client(narrow).check(blob)
    assert result.outcome is Outcome.DIVERGED
    assert result.finding.invariant is invariant
    assert result.finding.blob == blob
    with pytest.raises(DivergenceError, match=blob.hex()):
        result.raise_for_divergence()
