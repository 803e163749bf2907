import threading
import time

import pytest

from simon.errors import ProtocolViolation, TransportError
from simon.services.game import protocol
from simon.services.game.deadline import Deadline
from simon.services.game.outbound import OutboundGate


def test_decode_liveness():
    message = protocol.decode('here')
    assert message.is_liveness
    assert message.value is None


@pytest.mark.parametrize('value', protocol.BUTTONS)
def test_decode_buttons(value):
    message = protocol.decode(f'button{value}')
    assert not message.is_liveness
    assert message.value == value
    assert protocol.button(value) == f'button{value}'


@pytest.mark.parametrize('frame', ['button3', 'button', 'HERE', '', None, {'x': 1}, b'here'])
def test_decode_rejects_unknown_frames(frame):
    with pytest.raises(ProtocolViolation) as excinfo:
        protocol.decode(frame)
    assert excinfo.value.to_dict()['type'] == 'ProtocolViolation'


def test_disconnect_is_not_a_button():
    assert protocol.DISCONNECT not in protocol.BUTTONS


def test_gate_sends_until_closed():
    sent = []
    gate = OutboundGate('s1', sent.append)
    gate.send('seen')
    gate.close()
    with pytest.raises(TransportError):
        gate.send('win')
    assert sent == ['seen']
    assert gate.closed


def test_gate_allows_one_send_in_flight():
    in_flight = []
    peak = []
    delivered = []
    counter_lock = threading.Lock()

    def slow_send(message):
        with counter_lock:
            in_flight.append(message)
            peak.append(len(in_flight))
        time.sleep(0.01)
        with counter_lock:
            in_flight.remove(message)
            delivered.append(message)

    gate = OutboundGate('s1', slow_send)
    start = threading.Barrier(6)

    def sender(n):
        start.wait()
        for i in range(5):
            gate.send(f'button{n}-{i}')

    workers = [threading.Thread(target=sender, args=(n,)) for n in range(6)]
    for worker in workers:
        worker.start()
    for worker in workers:
        worker.join(timeout=5.0)
    assert len(delivered) == 30
    assert max(peak) == 1


def test_gate_closes_after_failed_send():
    calls = []

    def flaky(message):
        calls.append(message)
        raise OSError('broken pipe')

    gate = OutboundGate('s1', flaky)
    with pytest.raises(TransportError) as excinfo:
        gate.send('starty')
    assert excinfo.value.to_dict()['sid'] == 's1'
    with pytest.raises(TransportError):
        gate.send('win')
    assert calls == ['starty']


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now


def test_deadline_counts_down_and_resets():
    clock = FakeClock()
    deadline = Deadline(30.0, clock=clock)
    assert deadline.remaining() == 30.0
    clock.now += 29.5
    assert deadline.remaining() == pytest.approx(0.5)
    assert not deadline.expired
    deadline.reset(1.0)
    assert deadline.budget == 1.0
    assert deadline.remaining() == 1.0
    clock.now += 2.0
    assert deadline.remaining() == 0.0
    assert deadline.expired


def test_stopped_deadline_has_no_remaining_time():
    deadline = Deadline(1.0, clock=FakeClock())
    deadline.stop()
    assert deadline.stopped
    assert deadline.remaining() is None
    assert not deadline.expired
