from dataclasses import dataclass
from typing import Any, Optional

# Server -> client event names
NAME_CONFLICT = 'nameConflict'
UPDATE_PLAYERS = 'updatePlayers'
CHALLENGE_RECEIVED = 'challengeReceived'
ERROR = 'error'
UPDATE_SCORES = 'updateScores'
GAME_START = 'gameStart'
NEW_QUESTION = 'newQuestion'
DISABLE_OPTIONS = 'disableOptions'
GAME_OVER = 'gameOver'
OPPONENT_LEFT = 'opponentLeft'


@dataclass(frozen=True)
class Outbound:
    """One notification. ``to`` is a connection handle or a duel scope;
    ``None`` addresses every connection."""

    event: str
    data: Any = None
    to: Optional[str] = None


@dataclass(frozen=True)
class Subscribe:
    handle: str
    scope: str


@dataclass(frozen=True)
class CloseScope:
    scope: str
