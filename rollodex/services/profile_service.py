# rollodex/services/profile_service.py
from flask import current_app

from ..errors import NotFound
from ..models import db, User
from ..utils import sanitize_input, pick

# request key(s) -> (column, max length)
PROFILE_FIELDS = {
    ('firstName', 'first_name'): ('first_name', 100),
    ('lastName', 'last_name'): ('last_name', 100),
    ('phone',): ('phone', 50),
    ('title',): ('title', 100),
    ('companyName', 'company_name'): ('company_name', 255),
}


def get_profile(user_id):
    user = db.session.get(User, user_id)
    if user is None:
        raise NotFound("User not found")
    return user


def update_profile(user_id, data):
    """Only keys present with a non-null value are written; everything else keeps its value."""
    user = get_profile(user_id)
    changed = []
    for keys, (column, max_length) in PROFILE_FIELDS.items():
        present, value = pick(data, *keys)
        if not present or value is None:
            continue
        setattr(user, column, sanitize_input(value, max_length=max_length))
        changed.append(column)

    db.session.commit()
    current_app.logger.info(f"Profile of user {user.id} updated: {', '.join(changed) or 'no changes'}")
    return user, changed
