from flask import Blueprint, current_app, jsonify

duels = Blueprint('duels', __name__)


def _service():
    return current_app.extensions['duels']


@duels.route('/lobby', methods=['GET'])
def get_lobby():
    return jsonify({'players': _service().lobby_snapshot()})


@duels.route('/duels/<string:duel_id>', methods=['GET'])
def get_duel_state(duel_id):
    payload = _service().duel_snapshot(duel_id.upper())
    if payload is None:
        return jsonify({'error': 'Duel not found'}), 404
    # Include timer durations so clients can show countdowns
    cfg = current_app.config
    payload['durations'] = {
        'round': float(cfg.get('ROUND_DURATION_SEC', 10)),
        'grace': float(cfg.get('GRACE_DURATION_SEC', 1)),
    }
    return jsonify(payload)
