import logging
import random
import threading
from typing import Callable, Dict, List, Optional

from colormatch.errors import (
    AlreadyInRoom,
    AlreadyStarted,
    NotFound,
    NotHost,
    RoomFull,
    SessionNotFound,
    WrongPlayerCount,
)
from colormatch.models import GameState, Participant, PlayerId, Room, generate_room_code
from colormatch.services.players import PlayerDirectory

log = logging.getLogger(__name__)

Dealer = Callable[[List[PlayerId]], GameState]


class SessionRegistry:
    """Live rooms keyed by their short code."""

    def __init__(self, directory: PlayerDirectory, code_length: int = 5, rng: Optional[random.Random] = None,
                 lock=None):
        self.directory = directory
        self.code_length = code_length
        self._rng = rng
        self._lock = lock or threading.RLock()
        self._rooms: Dict[str, Room] = {}

    def _ensure_free(self, player_id: PlayerId) -> None:
        player = self.directory.get(player_id)
        if player and player.room_code and player.room_code in self._rooms:
            raise AlreadyInRoom()

    def create_session(self, host_id: PlayerId, host_name: str) -> str:
        with self._lock:
            self._ensure_free(host_id)
            code = generate_room_code(self._rooms, length=self.code_length, rng=self._rng)
            self._rooms[code] = Room(code=code, host_id=host_id, participants=[Participant(host_id, host_name)])
            self.directory.set_room(host_id, code)
        log.info(f"[room-created] code={code} host={host_name}")
        return code

    def join_session(self, code: str, player_id: PlayerId, name: str) -> Room:
        with self._lock:
            room = self.get(code)
            if room is None:
                raise NotFound()
            if room.is_full:
                raise RoomFull()
            if room.started:
                raise AlreadyStarted()
            self._ensure_free(player_id)
            room.participants.append(Participant(player_id, name))
            self.directory.set_room(player_id, room.code)
        log.info(f"[room-joined] code={room.code} player={name}")
        return room

    def start_session(self, code: str, requester_id: PlayerId, deal: Dealer) -> GameState:
        """Start the game in ``code``; only the host may, and only with two players."""
        with self._lock:
            room = self.get(code)
            if room is None or room.host_id != requester_id:
                raise NotHost()
            if room.started:
                raise AlreadyStarted()
            if len(room.participants) != Room.MAX_PARTICIPANTS:
                raise WrongPlayerCount()
            room.game_state = deal([p.id for p in room.participants])
        log.info(f"[game-started] code={room.code}")
        return room.game_state

    def destroy_session(self, code: str) -> Optional[Room]:
        with self._lock:
            room = self._rooms.pop(self._normalize(code), None)
            if room is None:
                return None
            for p in room.participants:
                player = self.directory.get(p.id)
                if player and player.room_code == room.code:
                    player.room_code = None
        log.info(f"[room-destroyed] code={room.code}")
        return room

    def get(self, code) -> Optional[Room]:
        if not code:
            return None
        return self._rooms.get(self._normalize(code))

    def require_game(self, code) -> Room:
        room = self.get(code)
        if room is None or room.game_state is None or room.game_state.is_over:
            raise SessionNotFound()
        return room

    @staticmethod
    def _normalize(code) -> str:
        return str(code).strip().upper()

    def __len__(self):
        return len(self._rooms)

    def __contains__(self, code):
        return self.get(code) is not None
