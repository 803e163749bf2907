import logging
import queue
from typing import Any, Callable, List

from simon.models import Player


_STOP = object()


class MatchmakingQueue:
    """FIFO rendezvous that pairs waiting players two at a time.

    ``spawn`` starts a background task (``socketio.start_background_task``
    in the app); each pair is handed to ``start_match`` in its own task so
    the next pairing never waits on a running match.
    """

    def __init__(
        self,
        spawn: Callable[..., Any],
        start_match: Callable[[Player, Player], Any],
        maxsize: int = 1,
        logger=None,
    ):
        self._spawn = spawn
        self._start_match = start_match
        self._queue: 'queue.Queue' = queue.Queue(maxsize=maxsize)
        self.logger = logger or logging.getLogger(__name__)
        self.running = False

    @property
    def queued(self) -> int:
        """Raw queue entries, including players that already left."""
        return self._queue.qsize()

    @property
    def waiting(self) -> int:
        return len(self.waiting_players())

    def waiting_players(self) -> List[Player]:
        """Snapshot of queued players whose connection is still open."""
        with self._queue.mutex:
            entries = list(self._queue.queue)
        return [p for p in entries if isinstance(p, Player) and not (p.closed or p.outbound.closed)]

    def submit(self, player: Player) -> None:
        self.logger.info(f"[queue] {player.sid} waiting for an opponent")
        self._queue.put(player)

    def start(self) -> None:
        self.running = True
        self._spawn(self.run)

    def stop(self, timeout: float = 1.0) -> None:
        if not self.running:
            return
        self.running = False
        try:
            self._queue.put(_STOP, timeout=timeout)
        except queue.Full:
            self.logger.warning("[queue] pairing loop did not take the stop signal")

    def run(self) -> None:
        self.running = True
        while True:
            first = self._queue.get()
            if first is _STOP:
                break
            second = self._queue.get()
            if second is _STOP:
                self.logger.warning(f"[queue] stopped while {first.sid} was waiting for an opponent")
                first.close()
                break
            self.logger.info(f"[pair] {first.sid} vs {second.sid}")
            self._spawn(self._start_match, first, second)
        self.running = False
