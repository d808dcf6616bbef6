import json
import logging
from typing import Callable, List, Optional, Sequence

from quizduel.models import AWAITING_ANSWER, FINISHED, SETTLED, DuelSession, QuizItem
from .lobby import LobbyRegistry
from .messages import (
    DISABLE_OPTIONS,
    GAME_OVER,
    NEW_QUESTION,
    OPPONENT_LEFT,
    UPDATE_PLAYERS,
    UPDATE_SCORES,
    CloseScope,
    Outbound,
)
from .scoring import score_answer, score_timeout
from .sessions import SessionTable
from .timers import TimerHandle

DEADLINE = 'deadline'
GRACE = 'grace'

# arm(duel_id, kind, delay, transition) -> TimerHandle
ArmTimer = Callable[[str, str, float, Callable[[], list]], TimerHandle]


class RoundScheduler:
    """Drives each duel through its rounds.

    Pipeline per round: awaiting_answer -> settled -> next round or finished.

    - Every transition cancels the duel's pending timer before arming the next,
      so a duel never holds more than one live timer
    - The ``settled`` flag is the only record of whether a round was credited
    - Missing duels raise SessionNotFoundError for the caller to absorb
    """

    def __init__(
        self,
        sessions: SessionTable,
        lobby: LobbyRegistry,
        questions: Sequence[QuizItem],
        arm: ArmTimer,
        round_duration: float = 10,
        grace_duration: float = 1,
        logger: Optional[logging.Logger] = None,
    ):
        self.sessions = sessions
        self.lobby = lobby
        self.questions = list(questions)
        self._arm = arm
        self.round_duration = round_duration
        self.grace_duration = grace_duration
        self.logger = logger or logging.getLogger(__name__)

    @property
    def total_rounds(self) -> int:
        return len(self.questions)

    def _cancel_timer(self, session: DuelSession) -> None:
        if session.timer is not None:
            session.timer.cancel()
            session.timer = None

    def _arm_grace(self, session: DuelSession) -> None:
        duel_id = session.id
        session.timer = self._arm(duel_id, GRACE, self.grace_duration, lambda: self.advance_round(duel_id))

    def start_round(self, duel_id: str) -> List[object]:
        session = self.sessions.require(duel_id)
        self._cancel_timer(session)
        session.timer = self._arm(duel_id, DEADLINE, self.round_duration, lambda: self.handle_timeout(duel_id))
        session.settled = False
        session.stage = AWAITING_ANSWER
        round_number = session.round_index + 1
        item = self.questions[session.round_index]
        self.logger.info(f"[round-start] duel={duel_id} round={round_number}/{self.total_rounds}")
        return [Outbound(NEW_QUESTION, item.to_question(round_number), to=duel_id)]

    def submit_answer(self, duel_id: str, submitter: str, answer) -> List[object]:
        session = self.sessions.require(duel_id)
        if session.settled:
            self.logger.info(f"[settle-skip] duel={duel_id} player={submitter} round already settled")
            return []
        if not session.has_player(submitter):
            self.logger.warning(f"[settle-skip] duel={duel_id} player={submitter} is not in this duel")
            return []

        self._cancel_timer(session)
        session.settled = True
        session.stage = SETTLED
        item = self.questions[session.round_index]
        credited, points = score_answer(session, submitter, answer, item)
        self.logger.info(
            f"[settle] duel={duel_id} round={session.round_index + 1} submitter={submitter} "
            f"correct={answer == item.answer} credited={credited} points={points}"
        )
        self._arm_grace(session)
        return [
            Outbound(DISABLE_OPTIONS, to=duel_id),
            Outbound(UPDATE_SCORES, dict(session.scores), to=duel_id),
        ]

    def handle_timeout(self, duel_id: str, reporter: Optional[str] = None) -> List[object]:
        """Close the round without awarding points.

        ``reporter`` is the connection that sent a client timeout; deadline
        expiry passes None. The settled flag is left alone: an answer arriving
        before the grace timer fires is still credited for this round.
        """
        session = self.sessions.require(duel_id)
        if reporter is not None and not session.has_player(reporter):
            self.logger.warning(f"[timeout-skip] duel={duel_id} player={reporter} is not in this duel")
            return []
        # A client timeout carries no round number, so one arriving after the
        # grace timer already started the next round closes that round too.
        self._cancel_timer(session)
        score_timeout(session)
        session.stage = SETTLED
        self.logger.info(f"[timeout] duel={duel_id} round={session.round_index + 1}")
        self._arm_grace(session)
        return [Outbound(UPDATE_SCORES, dict(session.scores), to=duel_id)]

    def advance_round(self, duel_id: str) -> List[object]:
        session = self.sessions.require(duel_id)
        session.round_index += 1
        if session.round_index < self.total_rounds:
            return self.start_round(duel_id)
        return self.end_game(duel_id)

    def end_game(self, duel_id: str) -> List[object]:
        session = self.sessions.require(duel_id)
        self._cancel_timer(session)
        session.stage = FINISHED
        self.sessions.remove(duel_id)
        for handle in session.players:
            self.lobby.set_busy(handle, False)
        self.logger.info(f"[game-over] duel={duel_id} scores={session.scores}")
        return [
            Outbound(GAME_OVER, json.dumps(session.scores), to=duel_id),
            CloseScope(duel_id),
            Outbound(UPDATE_PLAYERS, self.lobby.idle_payload()),
        ]

    def abandon(self, duel_id: str, leaver: str) -> List[object]:
        """End a duel early because one participant disconnected."""
        self.sessions.require(duel_id)
        self.logger.info(f"[forfeit] duel={duel_id} leaver={leaver}")
        return [Outbound(OPPONENT_LEFT, {'playerId': leaver}, to=duel_id)] + self.end_game(duel_id)
