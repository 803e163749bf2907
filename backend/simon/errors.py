"""Exceptions raised by the game server core."""

from typing import Any, Dict


class SimonError(Exception):
    """Base class for game server errors."""

    def to_dict(self) -> Dict[str, Any]:
        return {'type': self.__class__.__name__, 'message': str(self)}


class ProtocolViolation(SimonError):
    """Raised when a client sends a frame outside the protocol."""

    def __init__(self, frame: Any):
        self.frame = frame
        super().__init__(f"Unrecognized message: {frame!r}")


class TransportError(SimonError):
    """Raised when a message cannot be delivered to a connection."""

    def __init__(self, sid: str, message: str):
        self.sid = sid
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        payload = super().to_dict()
        payload['sid'] = self.sid
        return payload
