import pytest

from proxysession.offset import KVOffset, Offset


def test_from_length_keeps_length():
    offset = Offset.from_length(2, 3)
    assert len(offset) == 3
    assert offset.start == 2


def test_get_slices_buffer():
    assert Offset.from_length(2, 3).get(b"abcdefgh") == b"cde"


def test_adjacent_offsets_cover_buffer():
    buf = b"GET / HTTP/1.1\r\n\r\nbody"
    split = 18
    head = Offset(0, split).get(buf)
    body = Offset(split, len(buf)).get(buf)
    assert head + body == buf


def test_is_empty():
    assert Offset(4, 4).is_empty()
    assert len(Offset(4, 4)) == 0
    assert not Offset(0, 1).is_empty()


def test_get_out_of_range_raises():
    with pytest.raises(IndexError):
        Offset(0, 10).get(b"short")


def test_end_before_start_rejected():
    with pytest.raises(ValueError):
        Offset(5, 2)


def test_offsets_compare_by_value():
    assert Offset.from_length(1, 4) == Offset(1, 5)


def test_kv_offset_extracts_key_and_value():
    buf = b"Host: example.com"
    kv = KVOffset.from_lengths(0, 4, 6, 11)
    assert kv.get_key(buf) == b"Host"
    assert kv.get_value(buf) == b"example.com"
    assert len(kv.value) == 11