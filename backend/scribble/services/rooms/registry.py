import logging
import math
import threading
from numbers import Real
from typing import Any, Dict, List, Optional, Set

from scribble.models import Countdown, JoinResult, Room
from .errors import AdminSlotTaken, RoomFull, RoomNotFound


class RoomRegistry:
    """In-memory table of drawing rooms.

    Every public method runs under one re-entrant lock, mutation and
    broadcasts included, so handlers on different workers and countdown
    expiry never interleave mid-operation.

    - ``broadcaster`` needs ``send(sid, event, payload=None)``
    - ``scheduler`` needs ``schedule(delay, callback)`` returning a handle
      with ``cancel()``
    - joins raise ``JoinError`` subclasses; admin commands return False
      when ignored
    """

    def __init__(self, broadcaster, scheduler, max_players: int = 8, logger=None):
        if int(max_players) < 1:
            raise ValueError(f"max_players must be at least 1, got {max_players}")
        self.broadcaster = broadcaster
        self.scheduler = scheduler
        self.max_players = int(max_players)
        self.logger = logger or logging.getLogger(__name__)
        self._rooms: Dict[str, Room] = {}
        self._memberships: Dict[str, Set[str]] = {}
        self._lock = threading.RLock()

    # ---- joining ----

    def join(self, sid: str, room_id: str, wants_admin: bool) -> JoinResult:
        with self._lock:
            room = self._rooms.get(room_id)
            if room is None:
                if not wants_admin:
                    self.logger.info(f"[join-reject] room={room_id} sid={sid} reason=not_found")
                    raise RoomNotFound(room_id)
                room = Room(room_id=room_id, admin=sid)
                self._rooms[room_id] = room
                self.logger.info(f"[room-create] room={room_id} admin={sid}")
            elif wants_admin:
                if room.admin is not None:
                    self.logger.info(f"[join-reject] room={room_id} sid={sid} reason=admin_taken")
                    raise AdminSlotTaken(room_id)
                # A player claiming a free admin slot gives up its player seat
                room.players.discard(sid)
                room.admin = sid
            elif sid != room.admin and sid not in room.players:
                if len(room.players) >= self.max_players:
                    self.logger.info(f"[join-reject] room={room_id} sid={sid} reason=full")
                    raise RoomFull(room_id, self.max_players)
                room.players.add(sid)

            self._memberships.setdefault(sid, set()).add(room_id)
            result = JoinResult(
                is_admin=room.admin == sid,
                player_count=len(room.players),
                max_players=self.max_players,
                round_active=room.round_active,
            )
            self.logger.info(
                f"[join] room={room_id} sid={sid} admin={result.is_admin} players={result.player_count}/{self.max_players}"
            )
            self._send(sid, 'joined', result.to_dict())
            self._broadcast_player_count(room)
            return result

    # ---- drawing ----

    def relay_draw(self, sid: str, room_id: str, payload: Any) -> bool:
        with self._lock:
            room = self._rooms.get(room_id)
            if not room or not room.round_active or sid not in room.players:
                return False
            self._broadcast(room, 'draw', payload, skip_sid=sid)
            return True

    # ---- admin commands ----

    def set_timer(self, sid: str, room_id: str, duration: float) -> bool:
        with self._lock:
            room = self._admin_room(sid, room_id, 'setTimer')
            if room is None:
                return False
            seconds = _duration_seconds(duration)
            if seconds is None:
                self.logger.debug(f"[timer-ignore] room={room_id} sid={sid} duration={duration!r}")
                return False
            duration = seconds

            self._cancel_countdown(room)
            countdown = Countdown(room_id, duration)
            room.countdown = countdown
            room.round_active = True
            self._broadcast(room, 'timerStart', {'duration': duration})
            countdown.handle = self.scheduler.schedule(duration, lambda: self._expire(countdown))
            self.logger.info(f"[timer-set] room={room_id} duration={duration}s")
            return True

    def stop_game(self, sid: str, room_id: str) -> bool:
        with self._lock:
            room = self._admin_room(sid, room_id, 'stopGame')
            if room is None:
                return False
            self._cancel_countdown(room)
            room.round_active = False
            self._broadcast(room, 'gameStopped')
            self.logger.info(f"[game-stop] room={room_id}")
            return True

    def clear_canvas(self, sid: str, room_id: str) -> bool:
        with self._lock:
            room = self._admin_room(sid, room_id, 'clearCanvas')
            if room is None:
                return False
            self._broadcast(room, 'canvasCleared')
            return True

    # ---- connection close ----

    def disconnect(self, sid: str) -> None:
        with self._lock:
            for room_id in sorted(self._memberships.pop(sid, set())):
                room = self._rooms.get(room_id)
                if room is None:
                    continue
                if room.admin == sid:
                    room.admin = None
                    self._cancel_countdown(room)
                    room.round_active = False
                    self.logger.info(f"[admin-left] room={room_id} sid={sid}")
                    self._broadcast(room, 'adminLeft')
                elif sid in room.players:
                    room.players.discard(sid)
                    self.logger.info(f"[player-left] room={room_id} sid={sid} players={len(room.players)}")
                    self._broadcast_player_count(room)
                if room.is_empty():
                    self._delete_room(room)

    # ---- snapshots ----

    def snapshot(self) -> List[Dict[str, Any]]:
        with self._lock:
            return [room.to_dict() for room in self._rooms.values()]

    def room_count(self) -> int:
        with self._lock:
            return len(self._rooms)

    def get_room(self, room_id: str) -> Optional[Room]:
        with self._lock:
            return self._rooms.get(room_id)

    def rooms_of(self, sid: str) -> List[str]:
        with self._lock:
            return sorted(self._memberships.get(sid, set()))

    # ---- internals ----

    def _admin_room(self, sid: str, room_id: str, command: str) -> Optional[Room]:
        room = self._rooms.get(room_id)
        if room is None or room.admin is None or room.admin != sid:
            self.logger.debug(f"[command-ignore] command={command} room={room_id} sid={sid}")
            return None
        return room

    def _expire(self, countdown: Countdown) -> None:
        with self._lock:
            room = self._rooms.get(countdown.room_id)
            if countdown.cancelled or room is None or room.countdown is not countdown:
                self.logger.info(f"[timer-abort] room={countdown.room_id} superseded or room gone")
                return
            room.countdown = None
            room.round_active = False
            self.logger.info(f"[timer-fire] room={room.room_id} duration={countdown.duration}s")
            self._broadcast(room, 'timerEnd')

    def _cancel_countdown(self, room: Room) -> None:
        if room.countdown is not None:
            room.countdown.cancel()
            room.countdown = None

    def _delete_room(self, room: Room) -> None:
        self._cancel_countdown(room)
        self._rooms.pop(room.room_id, None)
        self.logger.info(f"[room-delete] room={room.room_id}")

    def _broadcast_player_count(self, room: Room) -> None:
        self._broadcast(room, 'playerCountUpdate', {
            'playerCount': len(room.players),
            'maxPlayers': self.max_players,
        })

    def _broadcast(self, room: Room, event: str, payload: Any = None, skip_sid: Optional[str] = None) -> None:
        for sid in sorted(room.members()):
            if sid != skip_sid:
                self._send(sid, event, payload)

    def _send(self, sid: str, event: str, payload: Any = None) -> None:
        try:
            self.broadcaster.send(sid, event, payload)
        except Exception:
            self.logger.exception(f"[send-failed] event={event} sid={sid}")


def _duration_seconds(value: Any) -> Optional[float]:
    """Countdown length from a client value: a finite, non-negative number or numeric string."""
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        try:
            value = float(value)
        except ValueError:
            return None
    if not isinstance(value, Real) or not math.isfinite(value) or value < 0:
        return None
    return value
