import pytest

from quizduel.services.duels.errors import (
    AlreadyBusyError,
    InvalidChallengerError,
    SelfChallengeError,
    TargetBusyError,
    TargetNotFoundError,
)
from quizduel.services.duels.messages import CloseScope, Outbound, Subscribe


def _lobby(duels, *names):
    for name in names:
        duels.join(f'sid-{name.lower()}', name)


def test_challenge_is_addressed_to_target_only_and_reserves_nothing(duels):
    _lobby(duels, 'Alice', 'Bob')
    messages = duels.challenge('sid-alice', 'sid-bob')
    assert messages == [
        Outbound('challengeReceived', {'challengerId': 'sid-alice', 'challengerName': 'Alice'}, to='sid-bob')
    ]
    assert not duels.lobby.get('sid-alice').in_game
    assert not duels.lobby.get('sid-bob').in_game
    assert len(duels.sessions) == 0


def test_challenge_validation_order(duels):
    _lobby(duels, 'Alice', 'Bob', 'Cara', 'Dan')
    with pytest.raises(InvalidChallengerError):
        duels.challenge('sid-ghost', 'sid-bob')
    with pytest.raises(SelfChallengeError):
        duels.challenge('sid-alice', 'sid-alice')
    with pytest.raises(TargetNotFoundError):
        duels.challenge('sid-alice', 'sid-ghost')

    duels.accept_challenge('sid-bob', 'sid-alice')
    with pytest.raises(AlreadyBusyError):
        duels.challenge('sid-alice', 'sid-ghost')
    with pytest.raises(TargetBusyError):
        duels.challenge('sid-cara', 'sid-bob')
    # still fine for idle players
    assert duels.challenge('sid-cara', 'sid-dan')


def test_second_challenge_to_same_target_is_allowed(duels):
    _lobby(duels, 'Alice', 'Bob', 'Cara')
    duels.challenge('sid-alice', 'sid-cara')
    messages = duels.challenge('sid-bob', 'sid-cara')
    assert messages[0].data['challengerName'] == 'Bob'


def test_accept_creates_zeroed_duel_and_reserves_both(duels, sent):
    _lobby(duels, 'Alice', 'Bob', 'Cara')
    duels.challenge('sid-alice', 'sid-bob')
    sent.clear()

    messages = duels.accept_challenge('sid-bob', 'sid-alice')

    assert len(duels.sessions) == 1
    session = duels.sessions.find_by_player('sid-alice')
    assert session.scores == {'sid-bob': 0, 'sid-alice': 0}
    assert session.round_index == 0
    assert session.timer is not None and session.timer.pending
    assert duels.lobby.get('sid-alice').in_game
    assert duels.lobby.get('sid-bob').in_game

    kinds = [getattr(m, 'event', type(m).__name__) for m in messages]
    assert kinds == ['Subscribe', 'Subscribe', 'updateScores', 'newQuestion', 'gameStart', 'updatePlayers']
    assert messages[0] == Subscribe('sid-bob', session.id)
    assert messages[1] == Subscribe('sid-alice', session.id)
    assert messages[2].to == session.id and messages[2].data == {'sid-bob': 0, 'sid-alice': 0}
    assert messages[3].data == {
        'question': 'What is the capital of France?',
        'options': ['London', 'Berlin', 'Paris', 'Madrid'],
        'round': 1,
    }
    assert messages[4].data == session.id
    assert messages[5].to is None
    assert [p['name'] for p in messages[5].data] == ['Cara']
    assert sent.messages == messages


def test_accept_rejects_missing_or_busy_challenger(duels):
    _lobby(duels, 'Alice', 'Bob', 'Cara')
    with pytest.raises(TargetNotFoundError):
        duels.accept_challenge('sid-bob', 'sid-ghost')
    with pytest.raises(InvalidChallengerError):
        duels.accept_challenge('sid-ghost', 'sid-bob')
    with pytest.raises(SelfChallengeError):
        duels.accept_challenge('sid-bob', 'sid-bob')

    duels.accept_challenge('sid-bob', 'sid-alice')
    with pytest.raises(TargetBusyError):
        duels.accept_challenge('sid-cara', 'sid-alice')
    with pytest.raises(AlreadyBusyError):
        duels.accept_challenge('sid-bob', 'sid-cara')
    assert len(duels.sessions) == 1
    assert not duels.lobby.get('sid-cara').in_game


def test_simultaneous_duels_get_distinct_ids(duels):
    _lobby(duels, 'Alice', 'Bob', 'Cara', 'Dan')
    first = duels.accept_challenge('sid-bob', 'sid-alice')
    second = duels.accept_challenge('sid-dan', 'sid-cara')
    first_id = next(m.data for m in first if getattr(m, 'event', None) == 'gameStart')
    second_id = next(m.data for m in second if getattr(m, 'event', None) == 'gameStart')
    assert first_id != second_id
    assert first_id in duels.sessions and second_id in duels.sessions
    assert not any(isinstance(m, CloseScope) for m in first + second)


def test_non_string_handles_are_unknown_players(duels):
    _lobby(duels, 'Alice', 'Bob')
    with pytest.raises(TargetNotFoundError):
        duels.challenge('sid-alice', ['sid-bob'])
    with pytest.raises(TargetNotFoundError):
        duels.accept_challenge('sid-bob', {'id': 'sid-alice'})
    with pytest.raises(InvalidChallengerError):
        duels.challenge(['sid-alice'], 'sid-bob')
    assert len(duels.sessions) == 0
