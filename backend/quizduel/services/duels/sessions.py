import random
import string
from typing import Dict, Optional, Tuple

from quizduel.models import DuelSession
from .errors import SessionNotFoundError


class SessionTable:
    """Live duels keyed by their generated code."""

    def __init__(self, code_length: int = 6):
        self._sessions: Dict[str, DuelSession] = {}
        self.code_length = code_length

    def __contains__(self, duel_id):
        return duel_id in self._sessions

    def __len__(self):
        return len(self._sessions)

    def generate_code(self) -> str:
        """Generate a short duel code unique among live duels."""
        alphabet = string.ascii_uppercase + string.digits
        while True:
            code = ''.join(random.choices(alphabet, k=self.code_length))
            if code not in self._sessions:
                return code

    def create(self, players: Tuple[str, str]) -> DuelSession:
        session = DuelSession(id=self.generate_code(), players=tuple(players))
        self._sessions[session.id] = session
        return session

    def get(self, duel_id) -> Optional[DuelSession]:
        if not isinstance(duel_id, str):
            return None
        return self._sessions.get(duel_id)

    def require(self, duel_id) -> DuelSession:
        session = self.get(duel_id)
        if session is None:
            raise SessionNotFoundError(f"Duel {duel_id!r} not found")
        return session

    def remove(self, duel_id: str) -> Optional[DuelSession]:
        return self._sessions.pop(duel_id, None)

    def find_by_player(self, handle: str) -> Optional[DuelSession]:
        for session in self._sessions.values():
            if session.has_player(handle):
                return session
        return None
