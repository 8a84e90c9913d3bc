import hmac
from functools import wraps

from flask import Blueprint, current_app, jsonify, request

from fiveinrow.services.events import get_game_stats

main = Blueprint('main', __name__)


def api_key_required(view):
    """Gate a route behind the X-API-Key header."""
    @wraps(view)
    def wrapped(*args, **kwargs):
        expected = current_app.config.get('API_KEY')
        if not expected:
            current_app.logger.error("[config] API_KEY not set; refusing stats request")
            return jsonify({'error': 'Server configuration error'}), 500
        supplied = request.headers.get('X-API-Key') or ''
        if not hmac.compare_digest(supplied.encode(), expected.encode()):
            return jsonify({'error': 'Invalid or missing API key'}), 401
        return view(*args, **kwargs)
    return wrapped


@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the five-in-a-row game server!'})


@main.route('/api/health')
def health():
    gateway = current_app.extensions['fiveinrow']['gateway']
    return jsonify({'status': 'ok', **gateway.stats()})


@main.route('/api/stats')
@api_key_required
def stats():
    try:
        return jsonify(get_game_stats())
    except Exception as exc:
        current_app.logger.error(f"[stats-failed] error={exc}")
        return jsonify({'error': 'Failed to fetch stats'}), 500
