import queue
import threading
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from simon.services.game.outbound import OutboundGate
from simon.services.game.protocol import DISCONNECT


class Player:
    """Per-connection state shared by the reader and the match engine.

    Every action goes through ``submit``. Before pairing, disconnects wait
    in a pending queue and presses are dropped; once ``join`` binds the
    player to a match inbox, actions are delivered there as
    ``(player, action)``. All of it happens under the player's lock, so the
    reader never sees a half-updated ``in_match``.
    """

    def __init__(self, sid: str, outbound: OutboundGate):
        self.sid = sid
        self.outbound = outbound
        self._lock = threading.Lock()
        self._pending: 'queue.Queue[int]' = queue.Queue()
        self._inbox: Optional['queue.Queue[Tuple[Player, int]]'] = None
        self._closed = False

    def __repr__(self):
        return f"<Player {self.sid}>"

    @property
    def in_match(self) -> bool:
        with self._lock:
            return self._inbox is not None

    @property
    def closed(self) -> bool:
        return self._closed

    def submit(self, action: int) -> bool:
        """Deliver an action; returns False if it was dropped."""
        with self._lock:
            if self._closed:
                return False
            if self._inbox is not None:
                self._inbox.put((self, action))
                return True
            if action == DISCONNECT:
                self._pending.put(action)
                return True
            return False

    def join(self, inbox: 'queue.Queue[Tuple[Player, int]]') -> bool:
        """Bind to a match inbox unless a disconnect is already pending."""
        with self._lock:
            if self._closed:
                return False
            left = False
            while True:
                try:
                    action = self._pending.get_nowait()
                except queue.Empty:
                    break
                if action == DISCONNECT:
                    left = True
            if left:
                return False
            self._inbox = inbox
            return True

    def leave(self) -> None:
        """Unbind from a match that never started; the player stays open."""
        with self._lock:
            self._inbox = None

    def close(self) -> None:
        with self._lock:
            self._inbox = None
            self._closed = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            'sid': self.sid,
            'in_match': self.in_match,
            'closed': self.closed,
        }


class SequenceStep(Enum):
    NEW_ROUND = 'new_round'
    CORRECT = 'correct'
    MISMATCH = 'mismatch'


class Sequence:
    """Growing list of expected presses with a replay cursor.

    The cursor sits either on a confirmed value awaiting replay or on the
    open slot (``cursor == len(values)``) where the next value is appended.
    Values are never removed.
    """

    def __init__(self):
        self._values: List[int] = []
        self.cursor = 0

    def __len__(self):
        return len(self._values)

    @property
    def values(self) -> Tuple[int, ...]:
        return tuple(self._values)

    @property
    def at_open_slot(self) -> bool:
        return self.cursor == len(self._values)

    def apply(self, value: int) -> SequenceStep:
        if self.at_open_slot:
            self._values.append(value)
            self.cursor = 0
            return SequenceStep.NEW_ROUND
        if self._values[self.cursor] == value:
            self.cursor += 1
            return SequenceStep.CORRECT
        return SequenceStep.MISMATCH
