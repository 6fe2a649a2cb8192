import io
import random
from datetime import datetime, timedelta, timezone

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from ulidkit.ulid import (
    ENCODED_SIZE,
    ENCODING,
    ZERO,
    BigTimeError,
    DataSizeError,
    InvalidCharactersError,
    ScanValueError,
    ULID,
    ULIDOverflowError,
    max_time,
    new,
    now,
    parse,
    parse_strict,
    timestamp,
    to_datetime,
)

ulids = st.binary(min_size=16, max_size=16).map(ULID)
raw_ids = st.binary(min_size=16, max_size=16)
BASE = "0000XSNJG0MQJHBF4QX1EFD6Y3"


class HalfReader:
    """Returns at most half of what is asked on each read."""

    def __init__(self, data):
        self._inner = io.BytesIO(data)

    def read(self, n):
        return self._inner.read((n + 1) // 2)


def _sign(value):
    return (value > 0) - (value < 0)


def _str_cmp(a, b):
    return (a > b) - (a < b)


def test_new_without_entropy():
    want = ULID(bytes([0, 0, 0, 0x01, 0x86, 0xA0]) + bytes(10))
    assert new(100_000, None) == want


def test_new_with_entropy():
    want = ULID(bytes([0, 0, 0, 0x01, 0x86, 0xA0]) + b"\xff" * 10)
    assert new(100_000, io.BytesIO(b"\xff" * 16)) == want


def test_new_big_time():
    with pytest.raises(BigTimeError):
        new(max_time() + 1, None)


def test_new_empty_reader():
    with pytest.raises(EOFError):
        new(0, io.BytesIO(b""))


def test_new_with_randbytes_source():
    id_ = new(5, random.Random(1))
    assert id_.entropy() == random.Random(1).randbytes(10)
    assert id_.time() == 5


def test_parse_empty_raises_data_size():
    with pytest.raises(DataSizeError):
        parse("")
    with pytest.raises(DataSizeError):
        parse_strict("")


@given(ulids)
@settings(max_examples=500)
def test_round_trips(id_):
    assert ULID.from_bytes(bytes(id_)) == id_
    assert parse(str(id_)) == id_
    assert parse_strict(str(id_)) == id_
    assert parse(str(id_).encode()) == id_


def test_marshaling_errors():
    with pytest.raises(DataSizeError):
        ULID.from_bytes(b"")
    with pytest.raises(DataSizeError):
        parse(b"")


@pytest.mark.parametrize("index", range(ENCODED_SIZE))
@pytest.mark.parametrize("bad", ["\xff", "\x00"])
def test_parse_strict_invalid_characters(index, bad):
    text = BASE[:index] + bad + BASE[index + 1 :]
    with pytest.raises(InvalidCharactersError):
        parse_strict(text)


def test_alizain_compatibility():
    got = new(1469918176385, io.BytesIO(bytes(16)))
    assert got == parse("01ARYZ6S410000000000000000")
    assert str(got) == "01ARYZ6S410000000000000000"


def test_example_time():
    assert parse(BASE).time() == 1_000_000_000


@given(raw_ids)
@settings(max_examples=500)
def test_encoding_alphabet(raw):
    text = str(ULID(raw))
    assert len(text) == ENCODED_SIZE
    assert set(text) <= set(ENCODING)


def test_lexicographical_order_upper_boundary():
    top = new(max_time(), None)
    for _ in range(10):
        nxt = new(top.time() - 1, None)
        assert nxt.time() == top.time() - 1
        assert str(top) > str(nxt)
        assert top.compare(nxt) == 1
        assert nxt.compare(top) == -1
        assert nxt < top
        top = nxt


@given(raw_ids, raw_ids)
@settings(max_examples=500)
def test_lexicographical_order(raw_a, raw_b):
    a, b = ULID(raw_a), ULID(raw_b)
    t1, t2 = a.time(), b.time()
    expected = _sign(t1 - t2)
    assert t1 == t2 or a.compare(b) == expected
    assert t1 == t2 or _str_cmp(str(a), str(b)) == expected
    assert t1 == t2 or (a < b) == (expected == -1)


@given(ulids)
def test_case_insensitivity(id_):
    assert parse(str(id_).upper()) == parse(str(id_).lower())


def test_parse_robustness_case():
    raw = bytes(
        [0x1, 0xC0, 0x73, 0x62, 0x4A, 0xAF, 0x39, 0x78, 0x51, 0x4E, 0xF8, 0x44, 0x3B,
         0xB2, 0xA8, 0x59, 0xC7, 0x5F, 0xC3, 0xCC, 0x6A, 0xF2, 0x6D, 0x5A, 0xAA, 0x20]
    )
    assert len(bytes(parse(raw))) == 16


@given(st.binary(min_size=26, max_size=26))
@settings(max_examples=500)
def test_parse_robustness(raw):
    if raw[0] > ord("7"):
        raw = bytes([raw[0] % ord("7")]) + raw[1:]
    assert len(bytes(parse(raw))) == 16


def test_now():
    before = now()
    after = timestamp(datetime.now(timezone.utc) + timedelta(milliseconds=1))
    assert before < after


def test_timestamp_truncates():
    dt = datetime(1970, 1, 1, 0, 0, 1, 1, tzinfo=timezone.utc)
    assert timestamp(dt) == 1000


def test_timestamp_before_epoch_is_too_big():
    ms = timestamp(datetime(1, 1, 1, tzinfo=timezone.utc))
    assert ms > max_time()
    with pytest.raises(BigTimeError):
        new(ms, None)


def test_time_recovery():
    original = datetime.now(timezone.utc)
    diff = original - to_datetime(timestamp(original))
    assert timedelta(0) <= diff < timedelta(milliseconds=1)


@given(st.integers(min_value=0, max_value=253_402_300_799_999))
def test_timestamp_round_trips(ms):
    assert timestamp(to_datetime(ms)) == ms


def test_with_time_too_big():
    with pytest.raises(BigTimeError):
        ZERO.with_time(max_time() + 1)


@given(st.integers(min_value=0, max_value=(1 << 48) - 1))
@settings(max_examples=1000)
def test_with_time_round_trip(ms):
    assert ZERO.with_time(ms).time() == ms


def test_ulid_timestamp():
    current = datetime.now(timezone.utc)
    id_ = new(timestamp(current), io.BytesIO(bytes(10)))
    assert id_.timestamp() == current.replace(microsecond=current.microsecond // 1000 * 1000)
    assert id_.timestamp() == to_datetime(id_.time())


def test_zero():
    assert ULID().is_zero()
    assert ZERO.is_zero()
    assert not new(now(), io.BytesIO(b"\x01" * 10)).is_zero()


def test_set_entropy_size():
    with pytest.raises(DataSizeError):
        ZERO.with_entropy(b"")


@given(st.binary(min_size=10, max_size=10))
def test_entropy_round_trip(entropy):
    assert ZERO.with_entropy(entropy).entropy() == entropy


@given(st.binary(min_size=10, max_size=10))
def test_entropy_read_short_reads(entropy):
    assert new(now(), HalfReader(entropy)).entropy() == entropy


def test_short_entropy_raises_eof():
    with pytest.raises(EOFError):
        new(0, io.BytesIO(b"\x01\x02\x03"))


@given(raw_ids, raw_ids)
@settings(max_examples=500)
def test_compare(raw_a, raw_b):
    a, b = ULID(raw_a), ULID(raw_b)
    assert a.compare(b) == _str_cmp(str(a), str(b))


@pytest.mark.parametrize(
    "text, error",
    [
        ("00000000000000000000000000", None),
        ("70000000000000000000000000", None),
        ("7ZZZZZZZZZZZZZZZZZZZZZZZZZ", None),
        ("80000000000000000000000000", ULIDOverflowError),
        ("80000000000000000000000001", ULIDOverflowError),
        ("ZZZZZZZZZZZZZZZZZZZZZZZZZZ", ULIDOverflowError),
    ],
)
def test_overflow_handling(text, error):
    if error is None:
        assert str(parse(text)) == text
    else:
        with pytest.raises(error):
            parse(text)


def test_max_value_parses_to_all_ones():
    assert bytes(parse("7ZZZZZZZZZZZZZZZZZZZZZZZZZ")) == b"\xff" * 16


@pytest.fixture
def sample_id():
    return new(123, io.BytesIO(bytes(range(10))))


def test_scan_string(sample_id):
    assert ULID.scan(str(sample_id)) == sample_id


def test_scan_bytes(sample_id):
    assert ULID.scan(bytes(sample_id)) == sample_id


def test_scan_none():
    assert ULID.scan(None) == ZERO


def test_scan_other():
    with pytest.raises(ScanValueError) as info:
        ULID.scan(44)
    assert str(info.value) == "ulid: source value must be a string or byte slice"


def test_value_is_binary(sample_id):
    assert sample_id.value() == bytes(sample_id)
    assert len(sample_id.value()) == 16


def test_repr_and_hash(sample_id):
    assert repr(sample_id) == f"ULID('{sample_id}')"
    assert hash(sample_id) == hash(ULID(bytes(sample_id)))
    assert len({sample_id, ULID(bytes(sample_id))}) == 1


def test_constructor_rejects_wrong_size():
    with pytest.raises(DataSizeError):
        ULID(b"\x00" * 15)