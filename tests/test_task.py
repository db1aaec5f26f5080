import pytest

from proxysession.errors import SessionError
from proxysession.headers import HeaderMap
from proxysession.response import ResponseHeader
from proxysession.task import (
    BodyTask,
    DoneTask,
    FailedTask,
    HeaderTask,
    Task,
    TrailerTask,
)


@pytest.mark.parametrize("end", [True, False])
def test_header_task_follows_flag(end):
    task = HeaderTask(ResponseHeader(200), end)
    assert task.is_end() is end


@pytest.mark.parametrize("end", [True, False])
def test_body_task_follows_flag(end):
    assert BodyTask(b"data", end).is_end() is end


def test_body_task_without_body():
    task = BodyTask(None, False)
    assert task.body is None
    assert task.is_end() is False


def test_trailer_task_always_ends():
    trailers = HeaderMap()
    trailers.append("X-Checksum", "abc")
    task = TrailerTask(trailers)
    assert task.is_end() is True
    assert task.trailers.get("x-checksum") == b"abc"


def test_done_task_ends():
    assert DoneTask().is_end() is True


def test_failed_task_ends_and_keeps_error():
    error = SessionError("connection closed")
    task = FailedTask(error)
    assert task.is_end() is True
    assert task.error is error


def test_all_tasks_share_base():
    tasks = [
        HeaderTask(ResponseHeader(204), True),
        BodyTask(b"x", False),
        TrailerTask(),
        DoneTask(),
        FailedTask(SessionError("boom")),
    ]
    assert all(isinstance(task, Task) for task in tasks)
    assert [task.is_end() for task in tasks] == [True, False, True, True, True]