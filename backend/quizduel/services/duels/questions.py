import json
from typing import Iterable, List, Optional

from quizduel.models import QuizItem
from .errors import QuestionBankError

DEFAULT_QUESTIONS = [
    {
        'question': 'What is the capital of France?',
        'options': ['London', 'Berlin', 'Paris', 'Madrid'],
        'answer': 'Paris',
    },
    {
        'question': 'Which planet is known as the Red Planet?',
        'options': ['Venus', 'Mars', 'Jupiter', 'Saturn'],
        'answer': 'Mars',
    },
    {
        'question': 'What is the capital of China?',
        'options': ['Tokyo', 'Seoul', 'Beijing', 'Shanghai'],
        'answer': 'Beijing',
    },
    {
        'question': 'Who painted the Mona Lisa?',
        'options': ['Van Gogh', 'Picasso', 'Da Vinci', 'Rembrandt'],
        'answer': 'Da Vinci',
    },
    {
        'question': 'What is the chemical symbol for gold?',
        'options': ['Ag', 'Fe', 'Au', 'Cu'],
        'answer': 'Au',
    },
]


def build_question_bank(entries: Iterable[dict]) -> List[QuizItem]:
    """Validate raw entries and freeze them into an ordered bank."""
    bank = []
    for idx, entry in enumerate(entries, start=1):
        if not isinstance(entry, dict):
            raise QuestionBankError(f"question {idx}: expected an object")
        prompt = entry.get('question')
        options = entry.get('options')
        answer = entry.get('answer')
        if not isinstance(prompt, str) or not prompt.strip():
            raise QuestionBankError(f"question {idx}: 'question' is required")
        if not isinstance(options, list) or len(options) < 2 or not all(isinstance(o, str) for o in options):
            raise QuestionBankError(f"question {idx}: 'options' needs at least two strings")
        if answer not in options:
            raise QuestionBankError(f"question {idx}: answer {answer!r} is not one of the options")
        bank.append(QuizItem(prompt=prompt, options=tuple(options), answer=answer))
    if not bank:
        raise QuestionBankError('question bank is empty')
    return bank


def load_question_bank(path: Optional[str] = None) -> List[QuizItem]:
    """Load the bank from a JSON file, or the built-in bank when no path is given."""
    if not path:
        return build_question_bank(DEFAULT_QUESTIONS)
    try:
        with open(path, encoding='utf-8') as fh:
            entries = json.load(fh)
    except (OSError, json.JSONDecodeError) as exc:
        raise QuestionBankError(f"cannot read question bank {path}: {exc}") from exc
    if not isinstance(entries, list):
        raise QuestionBankError(f"question bank {path} must contain a JSON list")
    return build_question_bank(entries)
