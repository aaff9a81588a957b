# rollodex/models/utility_models.py
from .base import db, utcnow


class ActivityLog(db.Model):
    """Append-only audit trail. Written by AuditLogService, never read by the API."""
    __tablename__ = 'activity_log'
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True, index=True)
    action = db.Column(db.String(100), nullable=False, index=True)
    entity_type = db.Column(db.String(50), nullable=True)
    entity_id = db.Column(db.Integer, nullable=True)
    # 'metadata' is reserved on declarative models
    details = db.Column('metadata', db.JSON, nullable=True)
    ip_address = db.Column(db.String(45), nullable=True)
    user_agent = db.Column(db.String(500), nullable=True)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False, index=True)

    def __repr__(self):
        return f'<ActivityLog {self.action} user={self.user_id}>'
