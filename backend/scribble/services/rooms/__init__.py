"""Room session services: registry, countdown scheduling and delivery.

Socket.IO handlers and HTTP routes call into this package; the registry
itself knows nothing about Flask and can be built standalone in tests.
"""

from .errors import JoinError, RoomNotFound, AdminSlotTaken, RoomFull
from .registry import RoomRegistry
from .scheduler import SocketIOScheduler, TimerHandle
from .broadcast import SocketIOBroadcaster
