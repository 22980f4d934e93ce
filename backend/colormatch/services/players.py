import logging
import uuid
from typing import Dict, Optional

from colormatch.models import Player, PlayerId

log = logging.getLogger(__name__)


class PlayerDirectory:
    """Live connections keyed by transport sid, with a stable PlayerId each."""

    def __init__(self):
        self._by_sid: Dict[str, Player] = {}
        self._by_id: Dict[PlayerId, Player] = {}

    def connect(self, sid: str, name: Optional[str] = None) -> Player:
        player = Player(id=PlayerId(uuid.uuid4().hex), sid=sid, name=(name or 'Player').strip() or 'Player')
        self._by_sid[sid] = player
        self._by_id[player.id] = player
        log.debug(f"[player-connect] sid={sid} id={player.id} name={player.name}")
        return player

    def disconnect(self, sid: str) -> Optional[Player]:
        player = self._by_sid.pop(sid, None)
        if player:
            self._by_id.pop(player.id, None)
        return player

    def by_sid(self, sid: str) -> Optional[Player]:
        return self._by_sid.get(sid)

    def get(self, player_id: PlayerId) -> Optional[Player]:
        return self._by_id.get(player_id)

    def set_room(self, player_id: PlayerId, room_code: Optional[str]) -> None:
        player = self._by_id.get(player_id)
        if player:
            player.room_code = room_code
