import threading
from typing import Callable

from simon.errors import TransportError


class OutboundGate:
    """Serializes writes to one client connection.

    The reader (liveness replies) and the match engine both send to the same
    connection from different threads; only one send is in flight at a time.
    """

    def __init__(self, sid: str, send: Callable[[str], None]):
        self.sid = sid
        self._send = send
        self._lock = threading.Lock()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def send(self, message: str) -> None:
        with self._lock:
            if self._closed:
                raise TransportError(self.sid, f"connection {self.sid} is closed")
            try:
                self._send(message)
            except Exception as exc:
                self._closed = True
                raise TransportError(self.sid, f"send to {self.sid} failed: {exc}") from exc

    def close(self) -> None:
        with self._lock:
            self._closed = True
