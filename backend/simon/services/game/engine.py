import logging
import queue
import time
from enum import Enum
from typing import Any, Callable, Dict, Optional

from simon.errors import TransportError
from simon.models import Player, Sequence, SequenceStep
from .deadline import Deadline
from .protocol import DISCONNECT, LOSE, START_ACTIVE, START_WAITING, WIN, button


class MatchState(Enum):
    STARTING = 'starting'
    IN_PROGRESS = 'in_progress'
    ENDED = 'ended'


class EndReason(Enum):
    TIMER_EXPIRED = 'timer_expired'
    WRONG_PRESS = 'wrong_press'
    ACTIVE_DISCONNECTED = 'active_disconnected'
    OTHER_DISCONNECTED = 'other_disconnected'
    # a paired player was already gone; survivors went back to the queue
    ABORTED = 'aborted'


class MatchEngine:
    """Runs one match between two paired players, start to teardown.

    - Starting: bind both players to the match inbox; a pending disconnect
      aborts the match and requeues whoever is still connected
    - InProgress: wait on the inbox for at most the deadline's remaining time
    - Ended: announce the outcome, close both players, stop the deadline

    The engine is the only consumer of the inbox, so presses from one
    connection are judged in the order they were received.
    """

    def __init__(
        self,
        first: Player,
        second: Player,
        requeue: Callable[[Player], None],
        first_press_timeout: float = 30.0,
        press_timeout: float = 1.0,
        logger=None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.active = first
        self.other = second
        self.requeue = requeue
        self.first_press_timeout = first_press_timeout
        self.press_timeout = press_timeout
        self.logger = logger or logging.getLogger(__name__)
        self.sequence = Sequence()
        self.deadline: Optional[Deadline] = None
        self.state = MatchState.STARTING
        self.reason: Optional[EndReason] = None
        self._clock = clock
        self._inbox: 'queue.Queue' = queue.Queue()

    def run(self) -> Optional[EndReason]:
        if not self._start():
            return self.reason
        reason = None
        try:
            reason = self._play()
        finally:
            self._end(reason)
        return self.reason

    def to_dict(self) -> Dict[str, Any]:
        return {
            'state': self.state.value,
            'reason': self.reason.value if self.reason else None,
            'active': self.active.sid,
            'other': self.other.sid,
            'sequence_length': len(self.sequence),
            'cursor': self.sequence.cursor,
        }

    def _start(self) -> bool:
        players = (self.active, self.other)
        joined = [p for p in players if p.join(self._inbox)]
        if len(joined) == len(players):
            self.deadline = Deadline(self.first_press_timeout, clock=self._clock)
            self._tell(self.active, START_ACTIVE)
            self._tell(self.other, START_WAITING)
            self.state = MatchState.IN_PROGRESS
            self.logger.info(
                f"[match-start] active={self.active.sid} other={self.other.sid} "
                f"first_press_timeout={self.first_press_timeout}s"
            )
            return True

        for p in joined:
            p.leave()
        # A disconnect may have landed in the inbox between join and leave
        gone = set()
        while True:
            try:
                player, action = self._inbox.get_nowait()
            except queue.Empty:
                break
            if action == DISCONNECT:
                gone.add(player)
        for p in players:
            if p in joined and p not in gone:
                self.logger.info(f"[match-abort] partner left before start, requeue {p.sid}")
                self.requeue(p)
            else:
                p.close()
        self.state = MatchState.ENDED
        self.reason = EndReason.ABORTED
        return False

    def _play(self) -> EndReason:
        while True:
            try:
                player, action = self._inbox.get(timeout=self.deadline.remaining())
            except queue.Empty:
                return EndReason.TIMER_EXPIRED

            if player is self.active:
                if action == DISCONNECT:
                    return EndReason.ACTIVE_DISCONNECTED
                self._tell(self.other, button(action))
                if not self._judge(action):
                    return EndReason.WRONG_PRESS
            elif player is self.other:
                if action == DISCONNECT:
                    return EndReason.OTHER_DISCONNECTED
                # shown to the active player, never judged
                self._tell(self.active, button(action))

    def _judge(self, value: int) -> bool:
        step = self.sequence.apply(value)
        if step is SequenceStep.MISMATCH:
            return False
        if step is SequenceStep.NEW_ROUND:
            self.active, self.other = self.other, self.active
        self.deadline.reset(self.press_timeout)
        return True

    def _end(self, reason: Optional[EndReason]) -> None:
        if self.state is MatchState.ENDED:
            return
        self.state = MatchState.ENDED
        self.reason = reason

        if reason in (EndReason.TIMER_EXPIRED, EndReason.WRONG_PRESS):
            self._tell(self.active, LOSE)
            self._tell(self.other, WIN)
        elif reason is EndReason.ACTIVE_DISCONNECTED:
            self._tell(self.other, WIN)
        elif reason is EndReason.OTHER_DISCONNECTED:
            self._tell(self.active, WIN)

        self.active.close()
        self.other.close()
        if self.deadline is not None:
            self.deadline.stop()
        self.logger.info(
            f"[match-end] reason={reason.value if reason else None} "
            f"active={self.active.sid} other={self.other.sid} length={len(self.sequence)}"
        )

    def _tell(self, player: Player, message: str) -> None:
        try:
            player.outbound.send(message)
        except TransportError as exc:
            self.logger.info(f"[send-failed] {exc}")
