from typing import Tuple

from quizduel.models import DuelSession, QuizItem

CORRECT_ANSWER_POINTS = 2
WRONG_ANSWER_OPPONENT_POINTS = 1


def score_answer(session: DuelSession, submitter: str, answer, item: QuizItem) -> Tuple[str, int]:
    """Apply scoring for one settled answer and return (credited player, points).

    +2 to the submitter for an exact match with the correct option; otherwise
    +1 to the opponent and nothing to the submitter.
    """
    if answer == item.answer:
        credited, points = submitter, CORRECT_ANSWER_POINTS
    else:
        credited, points = session.opponent_of(submitter), WRONG_ANSWER_OPPONENT_POINTS
    session.scores[credited] = session.scores.get(credited, 0) + points
    return credited, points


def score_timeout(session: DuelSession) -> None:
    """A timeout awards nothing; it only guarantees both entries exist."""
    for handle in session.players:
        session.scores.setdefault(handle, 0)
