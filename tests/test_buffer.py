from proxysession.buffer import StorageBuffer


def test_empty_buffer_has_no_value():
    buf = StorageBuffer(16)
    assert buf.is_empty()
    assert buf.getvalue() is None
    assert not buf.is_truncated()


def test_writes_accumulate():
    buf = StorageBuffer(16)
    buf.write(b"hello ")
    buf.write(b"world")
    assert buf.getvalue() == b"hello " + b"world"
    assert not buf.is_empty()


def test_write_exactly_capacity_fits():
    buf = StorageBuffer(4)
    buf.write(b"abcd")
    assert buf.getvalue() == b"abcd"
    assert not buf.is_truncated()


def test_overflow_truncates_and_keeps_earlier_data():
    buf = StorageBuffer(4)
    buf.write(b"ab")
    buf.write(b"cde")
    assert buf.is_truncated()
    assert buf.getvalue() == b"ab"


def test_no_writes_after_truncation():
    buf = StorageBuffer(4)
    buf.write(b"abcdef")
    buf.write(b"a")
    assert buf.is_truncated()
    assert buf.getvalue() is None


def test_clear_resets_state():
    buf = StorageBuffer(4)
    buf.write(b"ab")
    buf.write(b"cdef")
    buf.clear()
    assert not buf.is_truncated()
    assert buf.is_empty()
    buf.write(b"xy")
    assert buf.getvalue() == b"xy"