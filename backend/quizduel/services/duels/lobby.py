import logging
from typing import Dict, List, Optional

from quizduel.models import Participant
from .errors import InvalidNameError, NameConflictError


class LobbyRegistry:
    """Connected participants keyed by connection handle, in join order."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self._participants: Dict[str, Participant] = {}
        self.logger = logger or logging.getLogger(__name__)

    def __contains__(self, handle):
        return handle in self._participants

    def __len__(self):
        return len(self._participants)

    def get(self, handle) -> Optional[Participant]:
        if not isinstance(handle, str):
            return None
        return self._participants.get(handle)

    def register(self, name, handle: str) -> bool:
        """Add a participant. Returns False when the handle already joined.

        Names are trimmed and must be unique across idle and busy
        participants alike.
        """
        if handle in self._participants:
            return False
        if not isinstance(name, str) or not name.strip():
            raise InvalidNameError()
        name = name.strip()
        if any(p.name == name for p in self._participants.values()):
            raise NameConflictError(f"Name '{name}' is already taken")
        self._participants[handle] = Participant(id=handle, name=name)
        self.logger.info(f"[join] player={handle} name={name!r}")
        return True

    def unregister(self, handle: str) -> Optional[Participant]:
        participant = self._participants.pop(handle, None)
        if participant:
            self.logger.info(f"[leave] player={handle} name={participant.name!r}")
        return participant

    def set_busy(self, handle: str, busy: bool) -> bool:
        participant = self._participants.get(handle)
        if not participant:
            return False
        participant.in_game = busy
        return True

    def list_idle(self) -> List[Participant]:
        return [p for p in self._participants.values() if not p.in_game]

    def idle_payload(self) -> List[dict]:
        return [p.to_dict() for p in self.list_idle()]
