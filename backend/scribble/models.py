from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Set


@dataclass
class Room:
    """In-memory state of one drawing room.

    ``countdown`` is owned by the room: it is cancelled before it is
    replaced or dropped, and ``round_active`` mirrors whether it is set.
    """
    room_id: str
    admin: Optional[str] = None
    players: Set[str] = field(default_factory=set)
    round_active: bool = False
    countdown: Optional['Countdown'] = None

    def members(self) -> Set[str]:
        sids = set(self.players)
        if self.admin is not None:
            sids.add(self.admin)
        return sids

    def has_member(self, sid: str) -> bool:
        return sid == self.admin or sid in self.players

    def is_empty(self) -> bool:
        return self.admin is None and not self.players

    def to_dict(self) -> Dict[str, Any]:
        return {
            'roomId': self.room_id,
            'playerCount': len(self.players),
            'hasAdmin': self.admin is not None,
            'roundActive': self.round_active,
        }


class Countdown:
    """A running round timer for one room."""

    def __init__(self, room_id: str, duration: float):
        self.room_id = room_id
        self.duration = duration
        self.handle = None
        self.cancelled = False

    def cancel(self) -> None:
        # Safe to call more than once, and before a handle was attached
        self.cancelled = True
        if self.handle is not None:
            self.handle.cancel()

    def __repr__(self):
        return f"<Countdown room={self.room_id} duration={self.duration} cancelled={self.cancelled}>"


@dataclass
class JoinResult:
    is_admin: bool
    player_count: int
    max_players: int
    round_active: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            'isAdmin': self.is_admin,
            'playerCount': self.player_count,
            'maxPlayers': self.max_players,
            'roundActive': self.round_active,
        }
