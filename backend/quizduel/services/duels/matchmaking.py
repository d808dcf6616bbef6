import logging
from typing import List, Optional

from .errors import (
    AlreadyBusyError,
    InvalidChallengerError,
    SelfChallengeError,
    TargetBusyError,
    TargetNotFoundError,
)
from .lobby import LobbyRegistry
from .messages import CHALLENGE_RECEIVED, GAME_START, UPDATE_PLAYERS, UPDATE_SCORES, Outbound, Subscribe
from .scheduler import RoundScheduler
from .sessions import SessionTable


class MatchmakingCoordinator:
    def __init__(
        self,
        lobby: LobbyRegistry,
        sessions: SessionTable,
        scheduler: RoundScheduler,
        logger: Optional[logging.Logger] = None,
    ):
        self.lobby = lobby
        self.sessions = sessions
        self.scheduler = scheduler
        self.logger = logger or logging.getLogger(__name__)

    def challenge(self, from_handle: str, to_handle) -> List[object]:
        """Forward a challenge to an idle target. Nothing is reserved until accept."""
        challenger = self.lobby.get(from_handle)
        if not challenger:
            raise InvalidChallengerError()
        if challenger.in_game:
            raise AlreadyBusyError()
        if to_handle == from_handle:
            raise SelfChallengeError()
        target = self.lobby.get(to_handle)
        if not target:
            raise TargetNotFoundError()
        if target.in_game:
            raise TargetBusyError()

        self.logger.info(f"[challenge] from={from_handle} to={to_handle}")
        return [
            Outbound(
                CHALLENGE_RECEIVED,
                {'challengerId': challenger.id, 'challengerName': challenger.name},
                to=target.id,
            )
        ]

    def accept_challenge(self, accepter_handle: str, challenger_handle) -> List[object]:
        accepter = self.lobby.get(accepter_handle)
        if not accepter:
            raise InvalidChallengerError('Invalid player session')
        if accepter.in_game:
            raise AlreadyBusyError()
        if challenger_handle == accepter_handle:
            raise SelfChallengeError()
        challenger = self.lobby.get(challenger_handle)
        if not challenger:
            raise TargetNotFoundError('Challenger not found')
        if challenger.in_game:
            raise TargetBusyError('Challenger is already in a game')

        self.lobby.set_busy(accepter.id, True)
        self.lobby.set_busy(challenger.id, True)
        session = self.sessions.create((accepter.id, challenger.id))
        self.logger.info(f"[duel-create] duel={session.id} players={accepter.id},{challenger.id}")

        messages = [
            Subscribe(accepter.id, session.id),
            Subscribe(challenger.id, session.id),
            Outbound(UPDATE_SCORES, dict(session.scores), to=session.id),
        ]
        messages += self.scheduler.start_round(session.id)
        messages += [
            Outbound(GAME_START, session.id, to=session.id),
            Outbound(UPDATE_PLAYERS, self.lobby.idle_payload()),
        ]
        return messages
