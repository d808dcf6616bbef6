import logging
import threading
from typing import Callable, List, Optional, Sequence

from quizduel.models import QuizItem
from .errors import SessionNotFoundError
from .lobby import LobbyRegistry
from .matchmaking import MatchmakingCoordinator
from .messages import UPDATE_PLAYERS, Outbound
from .scheduler import RoundScheduler
from .sessions import SessionTable
from .timers import TimerHandle


def _discard(messages):
    pass


class DuelService:
    """Single owner of the lobby, the duel table and every duel timer.

    All operations and timer fires run under one re-entrant lock, so handlers
    on different threads and background timers observe each transition whole.
    Each operation hands its outbound messages to ``dispatch`` in order and
    returns them.
    """

    def __init__(
        self,
        questions: Sequence[QuizItem],
        timers,
        dispatch: Optional[Callable[[List[object]], None]] = None,
        round_duration: float = 10,
        grace_duration: float = 1,
        logger: Optional[logging.Logger] = None,
    ):
        self.logger = logger or logging.getLogger(__name__)
        self.timers = timers
        self.dispatch = dispatch if dispatch is not None else _discard
        self._lock = threading.RLock()
        self.lobby = LobbyRegistry(logger=self.logger)
        self.sessions = SessionTable()
        self.scheduler = RoundScheduler(
            self.sessions,
            self.lobby,
            questions,
            self._arm,
            round_duration=round_duration,
            grace_duration=grace_duration,
            logger=self.logger,
        )
        self.matchmaking = MatchmakingCoordinator(self.lobby, self.sessions, self.scheduler, logger=self.logger)

    # ---- timers ----

    def _arm(self, duel_id: str, kind: str, delay: float, transition) -> TimerHandle:
        handle = TimerHandle(duel_id, kind, delay)
        self.logger.debug(f"[timer-set] duel={duel_id} kind={kind} delay={delay}s")
        self.timers.call_later(delay, lambda: self._fire(handle, transition))
        return handle

    def _fire(self, handle: TimerHandle, transition) -> None:
        with self._lock:
            if handle.cancelled:
                self.logger.debug(f"[timer-abort] duel={handle.duel_id} kind={handle.kind} cancelled")
                return
            handle.fired = True
            self.logger.debug(f"[timer-fire] duel={handle.duel_id} kind={handle.kind}")
            self._run(transition)

    def _run(self, operation) -> List[object]:
        try:
            messages = operation()
        except SessionNotFoundError as exc:
            self.logger.debug(f"[duel-missing] {exc}")
            messages = []
        self.dispatch(messages)
        return messages

    # ---- lobby ----

    def join(self, handle: str, name) -> List[object]:
        with self._lock:
            def _join():
                if not self.lobby.register(name, handle):
                    return []
                return [Outbound(UPDATE_PLAYERS, self.lobby.idle_payload())]

            return self._run(_join)

    def leave(self, handle: str) -> List[object]:
        """Drop a disconnected participant and forfeit any duel they were in."""
        with self._lock:
            def _leave():
                participant = self.lobby.unregister(handle)
                session = self.sessions.find_by_player(handle)
                if session is not None:
                    return self.scheduler.abandon(session.id, handle)
                if participant is None:
                    return []
                return [Outbound(UPDATE_PLAYERS, self.lobby.idle_payload())]

            return self._run(_leave)

    def refresh_lobby(self) -> List[object]:
        with self._lock:
            return self._run(lambda: [Outbound(UPDATE_PLAYERS, self.lobby.idle_payload())])

    # ---- matchmaking ----

    def challenge(self, handle: str, target) -> List[object]:
        with self._lock:
            return self._run(lambda: self.matchmaking.challenge(handle, target))

    def accept_challenge(self, handle: str, challenger) -> List[object]:
        with self._lock:
            return self._run(lambda: self.matchmaking.accept_challenge(handle, challenger))

    # ---- rounds ----

    def submit_answer(self, handle: str, duel_id, answer) -> List[object]:
        with self._lock:
            return self._run(lambda: self.scheduler.submit_answer(duel_id, handle, answer))

    def report_timeout(self, handle: str, duel_id) -> List[object]:
        with self._lock:
            return self._run(lambda: self.scheduler.handle_timeout(duel_id, reporter=handle))

    # ---- read-only views ----

    def lobby_snapshot(self) -> List[dict]:
        with self._lock:
            return self.lobby.idle_payload()

    def duel_snapshot(self, duel_id) -> Optional[dict]:
        with self._lock:
            session = self.sessions.get(duel_id)
            if session is None:
                return None
            return session.to_dict(self.scheduler.total_rounds)
