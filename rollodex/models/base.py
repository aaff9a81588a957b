# rollodex/models/base.py
# Contains the shared SQLAlchemy instance to avoid circular imports.
from datetime import datetime, timezone

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()


def utcnow():
    return datetime.now(timezone.utc)


def enum_values(enum_cls):
    """Persist enum values ('brand_admin') rather than member names."""
    return [member.value for member in enum_cls]


class TimestampMixin:
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False, index=True)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)


def isoformat(value):
    return value.isoformat() if value else None
