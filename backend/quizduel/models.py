from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

# Duel stages
AWAITING_ANSWER = 'awaiting_answer'
SETTLED = 'settled'
FINISHED = 'finished'


@dataclass
class Participant:
    id: str
    name: str
    in_game: bool = False

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'inGame': self.in_game,
        }


@dataclass(frozen=True)
class QuizItem:
    prompt: str
    options: Tuple[str, ...]
    answer: str

    def to_question(self, round_number: int) -> dict:
        """Client-facing view of the item. The correct option stays server side."""
        return {
            'question': self.prompt,
            'options': list(self.options),
            'round': round_number,
        }

    def to_dict(self):
        return {
            'question': self.prompt,
            'options': list(self.options),
            'answer': self.answer,
        }


@dataclass
class DuelSession:
    id: str
    players: Tuple[str, str]
    scores: Dict[str, int] = field(default_factory=dict)
    round_index: int = 0
    timer: Optional[object] = None
    settled: bool = False
    stage: str = AWAITING_ANSWER

    def __post_init__(self):
        for handle in self.players:
            self.scores.setdefault(handle, 0)

    def has_player(self, handle: str) -> bool:
        return handle in self.players

    def opponent_of(self, handle: str) -> Optional[str]:
        if not self.has_player(handle):
            return None
        first, second = self.players
        return second if handle == first else first

    def to_dict(self, total_rounds: int):
        return {
            'id': self.id,
            'players': list(self.players),
            'scores': dict(self.scores),
            'current_round': min(self.round_index + 1, total_rounds),
            'total_rounds': total_rounds,
            'stage': self.stage,
            'settled': self.settled,
        }
