import logging
import threading
from typing import Any, Callable, Dict, Optional

from simon.errors import ProtocolViolation, TransportError
from simon.models import Player
from . import protocol
from .engine import EndReason, MatchEngine
from .matchmaking import MatchmakingQueue
from .outbound import OutboundGate


class Arena:
    """Owns the connected players, the matchmaking queue and running matches.

    One instance per app; the socket handlers and the pairing loop both get
    it injected instead of reaching for module state.
    """

    def __init__(
        self,
        spawn: Callable[..., Any],
        first_press_timeout: float = 30.0,
        press_timeout: float = 1.0,
        queue_size: int = 1,
        logger=None,
    ):
        self.logger = logger or logging.getLogger(__name__)
        self.first_press_timeout = first_press_timeout
        self.press_timeout = press_timeout
        self.queue = MatchmakingQueue(spawn, self._run_match, maxsize=queue_size, logger=self.logger)
        self._lock = threading.Lock()
        self._players: Dict[str, Player] = {}
        self._matches: Dict[int, MatchEngine] = {}
        self.matches_paired = 0
        self.matches_finished = 0
        self.matches_aborted = 0

    def start(self) -> None:
        self.queue.start()

    def shutdown(self) -> None:
        self.queue.stop()

    def player(self, sid: str) -> Optional[Player]:
        with self._lock:
            return self._players.get(sid)

    # ---- connection reader ----

    def connect(self, sid: str, send: Callable[[str], None]) -> Player:
        player = Player(sid, OutboundGate(sid, send))
        with self._lock:
            self._players[sid] = player
        self.logger.info(f"[connect] {sid}")
        self.queue.submit(player)
        return player

    def receive(self, sid: str, frame: Any) -> None:
        player = self.player(sid)
        if player is None:
            return
        try:
            message = protocol.decode(frame)
        except ProtocolViolation as exc:
            self.logger.debug(f"[protocol] {sid}: {exc}")
            return

        if message.is_liveness:
            try:
                player.outbound.send(protocol.SEEN)
            except TransportError as exc:
                self.logger.info(f"[send-failed] {exc}")
            return
        # dropped unless the player is in a match
        player.submit(message.value)

    def disconnect(self, sid: str) -> None:
        with self._lock:
            player = self._players.pop(sid, None)
        if player is None:
            return
        player.outbound.close()
        player.submit(protocol.DISCONNECT)
        self.logger.info(f"[disconnect] {sid} in_match={player.in_match}")

    # ---- matches ----

    def _run_match(self, first: Player, second: Player) -> None:
        engine = MatchEngine(
            first,
            second,
            requeue=self.queue.submit,
            first_press_timeout=self.first_press_timeout,
            press_timeout=self.press_timeout,
            logger=self.logger,
        )
        key = id(engine)
        with self._lock:
            self._matches[key] = engine
            self.matches_paired += 1
        try:
            reason = engine.run()
        except Exception:
            # one broken match must not take the pairing loop down with it
            self.logger.exception(f"[match-crash] {first.sid} vs {second.sid}")
            reason = None
        with self._lock:
            self._matches.pop(key, None)
            if reason is EndReason.ABORTED:
                self.matches_aborted += 1
            else:
                self.matches_finished += 1

    def status(self) -> Dict[str, Any]:
        with self._lock:
            return {
                'connected': len(self._players),
                # players still connected; 'queued' also counts entries that left
                'waiting': self.queue.waiting,
                'queued': self.queue.queued,
                'pairing': self.queue.running,
                'active_matches': len(self._matches),
                'matches': [engine.to_dict() for engine in self._matches.values()],
                'matches_paired': self.matches_paired,
                'matches_finished': self.matches_finished,
                'matches_aborted': self.matches_aborted,
            }
