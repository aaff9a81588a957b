# rollodex/audit_log_service.py
import logging
from flask import has_request_context, request

from .models import db, ActivityLog


class AuditLogService:
    def __init__(self, app=None):
        self.app = app
        if app is not None:
            self.logger = app.logger # Use Flask app's logger
        else:
            self.logger = logging.getLogger(__name__)

    def log_action(self, action, user_id=None, entity_type=None, entity_id=None,
                   details=None, ip_address=None, user_agent=None):
        """
        Appends an ActivityLog row in its own short transaction.
        Call after the business change has been committed: a failed audit
        write is logged and swallowed so it never undoes the request.
        """
        if has_request_context():
            ip_address = ip_address or request.remote_addr
            user_agent = user_agent or (request.user_agent.string if request.user_agent else None)
        try:
            log_entry = ActivityLog(
                action=action,
                user_id=int(user_id) if user_id is not None else None,
                entity_type=entity_type,
                entity_id=int(entity_id) if entity_id is not None else None,
                details=details,
                ip_address=ip_address,
                user_agent=user_agent[:500] if user_agent else None,
            )
            db.session.add(log_entry)
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            self.logger.error(f"Failed to write audit log: Action={action}, UserID={user_id}, Target={entity_type}/{entity_id}. Error: {e}", exc_info=True)
