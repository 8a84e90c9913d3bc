from datetime import datetime, timezone

from fiveinrow import db

VALID_EVENTS = (
    'connection',
    'disconnect',
    'room-created',
    'room-left',
    'game-started',
    'game-won',
    'game-draw',
    'game-reset',
    'idle-timeout',
)


def _utcnow():
    return datetime.now(timezone.utc)


class GameEvent(db.Model):
    __tablename__ = 'game_events'
    id = db.Column(db.Integer, primary_key=True)
    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow, nullable=False, index=True)
    socket_id = db.Column(db.String(64), nullable=False)
    ip_address = db.Column(db.String(64), nullable=True)
    user_agent = db.Column(db.Text, nullable=True)
    room_code = db.Column(db.String(16), nullable=True)
    event_type = db.Column(db.String(32), nullable=False, index=True)
    player_mark = db.Column(db.String(1), nullable=True)
    details = db.Column(db.JSON, nullable=False, default=dict)

    def to_dict(self):
        return {
            'id': self.id,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'socket_id': self.socket_id,
            'ip_address': self.ip_address,
            'user_agent': self.user_agent,
            'room_code': self.room_code,
            'event_type': self.event_type,
            'player_mark': self.player_mark,
            'details': self.details or {},
        }
