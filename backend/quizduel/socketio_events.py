from flask import current_app, request
from flask_socketio import emit

from quizduel import socketio
from quizduel.services.duels.errors import DuelError, NameConflictError
from quizduel.services.duels.messages import ERROR, NAME_CONFLICT, UPDATE_PLAYERS, CloseScope, Outbound, Subscribe


def _get_sid() -> str:
    # request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _duels():
    return current_app.extensions['duels']


def _payload_value(data, key):
    """Clients may send either a bare value or an object carrying it under ``key``."""
    if isinstance(data, dict):
        return data.get(key)
    return data


def make_dispatcher(namespace: str = '/'):
    """Build the callable that turns outbound messages into Socket.IO traffic."""

    def dispatch(messages):
        for msg in messages:
            if isinstance(msg, Subscribe):
                socketio.server.enter_room(msg.handle, msg.scope, namespace=namespace)
            elif isinstance(msg, CloseScope):
                socketio.close_room(msg.scope, namespace=namespace)
            elif isinstance(msg, Outbound):
                args = () if msg.data is None else (msg.data,)
                socketio.emit(msg.event, *args, to=msg.to, namespace=namespace)

    return dispatch


def _surface(exc: DuelError) -> None:
    current_app.logger.info(f"[rejected] sid={_get_sid()} {type(exc).__name__}: {exc}")
    if isinstance(exc, NameConflictError):
        emit(NAME_CONFLICT)
    else:
        emit(ERROR, str(exc))


def handle_connect(auth=None):
    emit(UPDATE_PLAYERS, _duels().lobby_snapshot())


def handle_disconnect(reason=None):
    _duels().leave(_get_sid())


def handle_join(data):
    try:
        _duels().join(_get_sid(), _payload_value(data, 'name'))
    except DuelError as exc:
        _surface(exc)


def handle_challenge(data):
    try:
        _duels().challenge(_get_sid(), _payload_value(data, 'targetId'))
    except DuelError as exc:
        _surface(exc)


def handle_accept_challenge(data):
    try:
        _duels().accept_challenge(_get_sid(), _payload_value(data, 'challengerId'))
    except DuelError as exc:
        _surface(exc)


def handle_submit_answer(data):
    if not isinstance(data, dict):
        return
    _duels().submit_answer(_get_sid(), data.get('gameId'), data.get('answer'))


def handle_timeout(data):
    _duels().report_timeout(_get_sid(), _payload_value(data, 'gameId'))


def handle_request_player_list_update(data=None):
    _duels().refresh_lobby()


def register_socketio_handlers(namespace: str = '/') -> None:
    """Register the duel protocol handlers on ``namespace``."""
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('join', handle_join, namespace=namespace)
    socketio.on_event('challenge', handle_challenge, namespace=namespace)
    socketio.on_event('acceptChallenge', handle_accept_challenge, namespace=namespace)
    socketio.on_event('submitAnswer', handle_submit_answer, namespace=namespace)
    socketio.on_event('timeout', handle_timeout, namespace=namespace)
    socketio.on_event('requestPlayerListUpdate', handle_request_player_list_update, namespace=namespace)
