"""Analytics event sink and the aggregate stats query.

Writes are fire-and-forget: outside TESTING they run on a Socket.IO
background task, and a failing write is logged and dropped. Nothing here
may gate or change game state.
"""

from typing import Any, Dict, Optional

from sqlalchemy import distinct, func

from fiveinrow import db, socketio
from fiveinrow.models import GameEvent, VALID_EVENTS

STATS_EVENTS = ('room-created', 'game-started', 'game-won')


class EventLog:
    def __init__(self, app):
        self.app = app
        self.enabled = bool(app.config.get('EVENT_LOG_ENABLED', True))

    def record(self, event_type: str, socket_id: str, room_code: Optional[str] = None,
               player_mark: Optional[str] = None, details: Optional[Dict[str, Any]] = None,
               ip_address: Optional[str] = None, user_agent: Optional[str] = None) -> None:
        if not self.enabled:
            return
        if event_type not in VALID_EVENTS:
            self.app.logger.warning(f"[event-log-invalid] type={event_type}")
            return
        fields = {
            'event_type': event_type,
            'socket_id': socket_id,
            'room_code': room_code,
            'player_mark': player_mark,
            'details': details or {},
            'ip_address': ip_address,
            'user_agent': user_agent,
        }
        if self.app.config.get('TESTING'):
            self._write(fields)
        else:
            socketio.start_background_task(self._write, fields)

    def _write(self, fields: Dict[str, Any]) -> None:
        with self.app.app_context():
            try:
                db.session.add(GameEvent(**fields))
                db.session.commit()
            except Exception as exc:
                db.session.rollback()
                self.app.logger.error(
                    f"[event-log-failed] type={fields['event_type']} sid={fields['socket_id']} error={exc}"
                )


def get_game_stats() -> Dict[str, int]:
    """Distinct rooms and client IPs seen in game events, plus finished games."""
    tracked = GameEvent.event_type.in_(STATS_EVENTS)
    total_rooms = db.session.query(func.count(distinct(GameEvent.room_code))).filter(tracked).scalar()
    total_players = db.session.query(func.count(distinct(GameEvent.ip_address))).filter(tracked).scalar()
    completed_games = GameEvent.query.filter_by(event_type='game-won').count()
    return {
        'total_rooms': int(total_rooms or 0),
        'total_players': int(total_players or 0),
        'completed_games': int(completed_games or 0),
    }
