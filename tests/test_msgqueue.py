import itertools
import threading
import time

import pytest

from streamd.command import COMMAND_SIZE, Command
from streamd.msgqueue import MessageQueue, QueueClosedError

_keys = itertools.count(0x5D000)


@pytest.fixture
def queue():
    handle = MessageQueue(next(_keys))
    yield handle
    handle.close()


def test_send_and_read_between_handles(queue):
    other = MessageQueue(queue.key)
    queue.send(1, Command(7, [1, 2, 3, 4]))
    received = other.read(1)
    assert received.id == 7
    assert received.params == [1, 2, 3, 4]
    assert received.type == 1


def test_read_filters_by_type(queue):
    queue.send(2, Command(20))
    queue.send(1, Command(10))
    assert queue.read(1).id == 10
    assert queue.read(2).id == 20


def test_type_zero_reads_first_message(queue):
    queue.send(3, Command(30))
    queue.send(1, Command(10))
    assert queue.read(0).id == 30


def test_negative_type_reads_lowest_type(queue):
    queue.send(5, Command(50))
    queue.send(3, Command(30))
    queue.send(2, Command(20))
    assert queue.read(-4).id == 20
    assert queue.read(-4).id == 30
    assert queue.peek(-4) is False


def test_read_timeout_returns_none(queue):
    began = time.monotonic()
    assert queue.read(1, 30) is None
    assert time.monotonic() - began >= 0.029


def test_read_with_timeout_gets_waiting_message(queue):
    queue.send(1, Command(9))
    assert queue.read(1, 100).id == 9


def test_blocking_read_wakes_on_send(queue):
    result = {}

    def reader():
        result["cmd"] = MessageQueue(queue.key).read(1)

    worker = threading.Thread(target=reader)
    worker.start()
    time.sleep(0.02)
    queue.send(1, Command(42))
    worker.join(5)
    assert result["cmd"].id == 42
    assert queue.peek(1) is False


def test_peek_does_not_consume(queue):
    assert queue.peek(1) is False
    queue.send(1, Command(4))
    assert queue.peek(1) is True
    assert queue.peek(1) is True
    assert queue.read(1).id == 4


def test_peek_read(queue):
    assert queue.peek_read(1) is None
    queue.send(1, Command(6, [9]))
    got = queue.peek_read(1)
    assert (got.id, got.params[0]) == (6, 9)
    assert queue.peek(1) is False


def test_sent_message_is_a_snapshot(queue):
    cmd = Command(1, [5])
    queue.send(1, cmd)
    cmd.set_data(99, 0)
    assert queue.read(1).params[0] == 5


def test_send_rejects_non_positive_type(queue):
    with pytest.raises(ValueError):
        queue.send(0, Command(1))


def test_close_removes_queue_for_all_handles(queue):
    other = MessageQueue(queue.key)
    queue.send(1, Command(1))
    queue.close()
    assert queue.valid() is False
    assert other.valid() is False
    with pytest.raises(QueueClosedError):
        other.read(1)
    reopened = MessageQueue(other.key)
    try:
        assert reopened.peek(1) is False
    finally:
        reopened.close()


def test_close_wakes_blocked_reader(queue):
    errors = []

    def reader():
        try:
            MessageQueue(queue.key).read(1)
        except QueueClosedError as exc:
            errors.append(exc)

    worker = threading.Thread(target=reader)
    worker.start()
    time.sleep(0.02)
    queue.close()
    worker.join(5)
    assert queue.valid() is False
    assert len(errors) == 1
    assert isinstance(errors[0], QueueClosedError)


def test_unopened_queue_raises():
    handle = MessageQueue()
    assert handle.valid() is False
    with pytest.raises(QueueClosedError):
        handle.send(1, Command(1))
    with pytest.raises(QueueClosedError):
        handle.peek(1)


def test_open_twice_raises(queue):
    with pytest.raises(RuntimeError):
        queue.open(queue.key)


def test_private_key_queues_are_separate():
    first, second = MessageQueue(0), MessageQueue(0)
    try:
        first.send(1, Command(1))
        assert second.peek(1) is False
        assert first.peek(1) is True
    finally:
        first.close()
        second.close()


def test_display_prints_hexdump(queue, capsys):
    cmd = Command(3, [1, 2, 3, 4])
    text = queue.display(cmd)
    assert text == cmd.hexdump()
    assert capsys.readouterr().out == text
    assert len(text) == COMMAND_SIZE * 3 + 1