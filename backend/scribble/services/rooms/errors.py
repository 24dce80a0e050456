class JoinError(Exception):
    """A join attempt was refused. The caller is told why and then dropped."""

    def __init__(self, room_id: str, message: str):
        super().__init__(message)
        self.room_id = room_id
        self.message = message


class RoomNotFound(JoinError):
    def __init__(self, room_id: str):
        super().__init__(room_id, 'Room does not exist')


class AdminSlotTaken(JoinError):
    def __init__(self, room_id: str):
        super().__init__(room_id, 'Room already has an admin')


class RoomFull(JoinError):
    def __init__(self, room_id: str, max_players: int):
        super().__init__(room_id, f'Room is full (max {max_players} players)')
        self.max_players = max_players
