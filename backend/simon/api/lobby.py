from flask import Blueprint, current_app, jsonify


lobby = Blueprint('lobby', __name__)


@lobby.route('/health')
def health():
    return jsonify({'status': 'ok'})


@lobby.route('/status')
def status():
    """Snapshot of connected players, queue depth and running matches."""
    arena = current_app.extensions['arena']
    return jsonify(arena.status())
