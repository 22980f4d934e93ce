"""Per-player projections of a room's game state.

A viewer sees their own hand in full and only the size of the opponent's
hand. The deck is never exposed.
"""

from typing import Any, Dict, Optional

from colormatch.models import PlayerId, Room


def project(room: Room, viewer_id: PlayerId, last_action: Optional[str] = None, **extra: Any) -> Dict[str, Any]:
    state = room.game_state
    opponent_id = state.opponent_of(viewer_id)
    payload = {
        'hand': [card.to_dict() for card in state.hands[viewer_id]],
        'opponentCardCount': len(state.hands[opponent_id]),
        'discardTop': state.discard_top.to_dict(),
        'currentPlayer': state.current_player,
        'currentColor': state.current_color,
        'currentValue': state.current_value,
        'isMyTurn': state.current_player == viewer_id,
    }
    if last_action:
        payload['lastAction'] = last_action
    payload.update(extra)
    return payload


def start_payload(room: Room, viewer_id: PlayerId) -> Dict[str, Any]:
    first, second = room.participants[0], room.participants[1]
    return project(
        room,
        viewer_id,
        player1Name=first.name,
        player2Name=second.name,
        myPosition='player1' if viewer_id == first.id else 'player2',
    )


def room_summary(room: Room) -> Dict[str, Any]:
    """Lobby view of a room; safe to show anyone holding the code."""
    return {
        'code': room.code,
        'participants': [p.name for p in room.participants],
        'started': room.started,
    }
