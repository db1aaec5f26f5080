import pytest

from proxysession.keepalive import ConnectionValue, KeepaliveMode, KeepaliveStatus


def test_none_turns_keepalive_off():
    status = KeepaliveStatus.from_seconds(None)
    assert status.mode is KeepaliveMode.OFF
    assert not status.is_active()


def test_zero_is_infinite():
    status = KeepaliveStatus.from_seconds(0)
    assert status.mode is KeepaliveMode.INFINITE
    assert status.timeout is None
    assert status.is_active()


def test_positive_sets_timeout():
    status = KeepaliveStatus.from_seconds(30)
    assert status.mode is KeepaliveMode.TIMEOUT
    assert status.timeout == 30
    assert status.is_active()


def test_negative_rejected():
    with pytest.raises(ValueError):
        KeepaliveStatus.from_seconds(-1)


def test_default_status_is_off():
    assert KeepaliveStatus() == KeepaliveStatus.from_seconds(None)


def test_connection_value_flags():
    value = ConnectionValue().with_close()
    assert value.close and not value.upgrade and not value.keep_alive


def test_connection_value_chaining_leaves_original():
    base = ConnectionValue()
    both = base.with_upgrade().with_close()
    assert both.upgrade and both.close
    assert base == ConnectionValue(False, False, False)
    assert ConnectionValue().with_keep_alive().keep_alive