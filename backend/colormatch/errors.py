"""Rejected intents.

Every error here is recoverable and local to one room: the transport reports
``str(exc)`` to the requesting connection and the game state is untouched.
"""


class GameError(Exception):
    """Base class for rejected intents."""
    default_message = 'Invalid request'

    def __init__(self, message=None):
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)


class NotFound(GameError):
    default_message = 'Room not found'


class SessionNotFound(NotFound):
    default_message = 'Game not found'


class Unauthorized(GameError):
    default_message = 'Not allowed'


class NotHost(Unauthorized):
    default_message = 'Cannot start game'


class NotYourTurn(Unauthorized):
    default_message = 'Not your turn'


class Capacity(GameError):
    default_message = 'Room is not accepting players'


class RoomFull(Capacity):
    default_message = 'Room is full'


class AlreadyStarted(Capacity):
    default_message = 'Game already started'


class IllegalMove(GameError):
    default_message = 'Cannot play that card'


class InvalidCard(GameError):
    default_message = 'Invalid card'


class StateConflict(GameError):
    default_message = 'Action not allowed right now'


class AlreadyDrawn(StateConflict):
    default_message = 'Already drawn this turn'


class WrongPlayerCount(StateConflict):
    default_message = 'Need exactly 2 players'


class AlreadyInRoom(StateConflict):
    default_message = 'Already in a room'
