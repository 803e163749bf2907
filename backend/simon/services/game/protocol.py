"""Text frames exchanged with clients on the /ws namespace."""

from typing import NamedTuple, Optional

from simon.errors import ProtocolViolation


# client -> server
HERE = 'here'
BUTTON_PREFIX = 'button'

# server -> client
SEEN = 'seen'
START_ACTIVE = 'starty'
START_WAITING = 'startt'
WIN = 'win'
LOSE = 'lose'

BUTTONS = (0, 1, 2)

# Action delivered to a match when a connection goes away
DISCONNECT = -1


class Inbound(NamedTuple):
    kind: str  # 'here' or 'button'
    value: Optional[int] = None

    @property
    def is_liveness(self) -> bool:
        return self.kind == HERE


def button(value: int) -> str:
    return f"{BUTTON_PREFIX}{value}"


_BUTTON_FRAMES = {button(value): value for value in BUTTONS}


def decode(frame) -> Inbound:
    """Decode one client frame or raise ProtocolViolation."""
    if frame == HERE:
        return Inbound(HERE)
    value = _BUTTON_FRAMES.get(frame) if isinstance(frame, str) else None
    if value is None:
        raise ProtocolViolation(frame)
    return Inbound(BUTTON_PREFIX, value)
