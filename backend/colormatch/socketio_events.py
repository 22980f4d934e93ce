from functools import wraps
from typing import Any, Callable, Dict

from flask import current_app, request
from flask_socketio import close_room, emit, join_room

from colormatch import socketio
from colormatch.errors import GameError
from colormatch.models import PlayerId, Room
from colormatch.services import Lobby
from colormatch.services.games.views import project, start_payload


def _lobby() -> Lobby:
    return current_app.extensions['colormatch']


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _channel(code: str) -> str:
    return f"room:{code}"


def _room_code(data) -> str:
    if isinstance(data, dict):
        data = data.get('code') or data.get('roomCode')
    return str(data or '').strip().upper()


def _card_index(value):
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().isdecimal():
        return int(value)
    return None


def publish(room: Room, payload_for: Callable[[PlayerId], Dict[str, Any]], event: str = 'gameUpdate') -> None:
    """Send each participant of ``room`` their own payload."""
    players = _lobby().players
    for participant in room.participants:
        player = players.get(participant.id)
        if player is None:
            continue
        socketio.emit(event, payload_for(participant.id), to=player.sid, namespace=request.namespace)


def intent(handler):
    """Resolve the calling player and report rejected intents to them only.

    Handlers run on their own threads, so the whole intent holds the lobby
    lock from validation through the broadcast.
    """
    @wraps(handler)
    def wrapper(*args):
        lobby = _lobby()
        with lobby.lock:
            player = lobby.players.by_sid(_get_sid())
            if player is None:
                emit('error', 'Not connected')
                return
            try:
                handler(player, *args)
            except GameError as exc:
                current_app.logger.info(
                    f"[rejected] event={handler.__name__} player={player.name} reason={exc.message}")
                emit('error', exc.message)
    return wrapper


def handle_connect(auth=None):
    name = request.args.get('playerName')
    if not name and isinstance(auth, dict):
        name = auth.get('playerName')
    lobby = _lobby()
    with lobby.lock:
        player = lobby.players.connect(_get_sid(), name if isinstance(name, str) else None)
    current_app.logger.info(f"[connect] sid={player.sid} name={player.name}")
    emit('connected', {'playerId': player.id, 'name': player.name})


def handle_disconnect(reason=None):
    # A dropped connection ends its room for good: tell the other player
    # and tear the room down.
    lobby = _lobby()
    with lobby.lock:
        player = lobby.players.disconnect(_get_sid())
        if player is None:
            return
        current_app.logger.info(f"[disconnect] sid={player.sid} name={player.name}")
        room = lobby.rooms.get(player.room_code)
        if room is None:
            return
        for participant in room.participants:
            if participant.id == player.id:
                continue
            other = lobby.players.get(participant.id)
            if other:
                socketio.emit('playerDisconnected', {'message': f"{player.name} disconnected"},
                              to=other.sid, namespace=request.namespace)
        lobby.rooms.destroy_session(room.code)
        close_room(_channel(room.code))


@intent
def handle_create_room(player, data=None):
    code = _lobby().rooms.create_session(player.id, player.name)
    join_room(_channel(code))
    emit('roomCreated', code)


@intent
def handle_join_room(player, data=None):
    lobby = _lobby()
    room = lobby.rooms.join_session(_room_code(data), player.id, player.name)
    join_room(_channel(room.code))
    participants = [p.to_dict() for p in room.participants]
    emit('roomJoined', {'code': room.code, 'participants': participants})
    host = lobby.players.get(room.host_id)
    if host:
        socketio.emit('playerJoined', {'participants': participants}, to=host.sid, namespace=request.namespace)


@intent
def handle_start_game(player, data=None):
    room = _lobby().engine.start_game(_room_code(data), player.id)
    publish(room, lambda pid: start_payload(room, pid), event='gameStarted')


@intent
def handle_play_card(player, data=None):
    data = data if isinstance(data, dict) else {}
    outcome = _lobby().engine.play_card(
        _room_code(data),
        player.id,
        _card_index(data.get('cardIndex')),
        data.get('selectedColor'),
    )
    room = outcome.room
    if outcome.winner:
        publish(room, lambda pid: {'winner': player.name}, event='gameOver')
        close_room(_channel(room.code))
        current_app.logger.info(f"[game-over] code={room.code} winner={player.name}")
        return
    publish(room, lambda pid: project(room, pid, f"{player.name} played a card"))


@intent
def handle_draw_card(player, data=None):
    outcome = _lobby().engine.draw_card(_room_code(data), player.id)
    action = f"{player.name} drew a card" if outcome.card else f"{player.name} could not draw"
    publish(outcome.room, lambda pid: project(outcome.room, pid, action, canEndTurn=True))


@intent
def handle_end_turn(player, data=None):
    lobby = _lobby()
    code = _room_code(data)
    if lobby.engine.end_turn(code, player.id):
        room = lobby.rooms.get(code)
        publish(room, lambda pid: project(room, pid, 'Turn ended'))


def register_socketio_handlers(namespace: str = '/') -> None:
    """Register Socket.IO event handlers on ``namespace``."""
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('createRoom', handle_create_room, namespace=namespace)
    socketio.on_event('joinRoom', handle_join_room, namespace=namespace)
    socketio.on_event('startGame', handle_start_game, namespace=namespace)
    socketio.on_event('playCard', handle_play_card, namespace=namespace)
    socketio.on_event('drawCard', handle_draw_card, namespace=namespace)
    socketio.on_event('endTurn', handle_end_turn, namespace=namespace)
