# rollodex/utils.py
import re

from flask import current_app, g, request

from .errors import TokenInvalid, ValidationError
from .models import db, User
from .services import token_service


# --- Sanitization Helper ---
def sanitize_input(value, allow_html=False, max_length=None):
    """
    Basic input sanitizer.
    - Strips leading/trailing whitespace.
    - Optionally removes HTML tags.
    - Optionally truncates to max_length.
    """
    if value is None:
        return None

    value_str = str(value).strip()

    if not allow_html:
        value_str = re.sub(r'<[^>]*>', '', value_str)

    if max_length is not None and len(value_str) > max_length:
        value_str = value_str[:max_length]

    return value_str


def normalize_email(email):
    return sanitize_input(email, max_length=255).lower() if email else email


def is_valid_email(email):
    if not email:
        return False
    regex = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'
    return re.match(regex, email) is not None


def get_file_extension(filename):
    if filename and '.' in filename: return filename.rsplit('.', 1)[1].lower()
    return ''


def allowed_file(filename, allowed_extensions_config_key='ALLOWED_EXTENSIONS'):
    allowed_extensions = current_app.config.get(allowed_extensions_config_key, set())
    return get_file_extension(filename) in allowed_extensions


def get_json_body():
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def pick(data, *keys):
    """First present key wins, so camelCase and snake_case spellings both work."""
    for key in keys:
        if key in data:
            return True, data[key]
    return False, None


# Largest value an INTEGER column holds on every supported database
MAX_DB_INTEGER = 2**31 - 1


def parse_positive_int(value, name, default):
    if value is None or value == '':
        return default
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"'{name}' must be a positive integer")
    if number < 1 or number > MAX_DB_INTEGER:
        raise ValidationError(f"'{name}' must be a positive integer up to {MAX_DB_INTEGER}")
    return number


def is_valid_id(value):
    """Ids outside the column range cannot exist; looking them up would overflow the driver."""
    return isinstance(value, int) and not isinstance(value, bool) and 0 < value <= MAX_DB_INTEGER


# --- Authorization guard ---
def authenticate_request():
    """
    Verifies the bearer token and attaches the caller to `g`.
    Raises TokenMissing/TokenInvalid; the caller's view never runs on failure.
    """
    claims = token_service.verify_request()
    try:
        user_id = int(claims['sub'])
    except (KeyError, TypeError, ValueError) as e:
        raise TokenInvalid() from e

    user = db.session.get(User, user_id) if is_valid_id(user_id) else None
    if user is None or not user.is_active:
        current_app.logger.warning(f"Rejected token for missing or inactive user {user_id} on {request.path}")
        raise TokenInvalid()

    g.current_user = user
    g.current_user_id = user.id
    g.current_user_role = user.role
    g.current_company_type = user.company_type
    return user


def protect_blueprint(blueprint):
    """Runs the guard before every view of `blueprint`."""
    @blueprint.before_request
    def require_authentication():
        # CORS preflight carries no credentials
        if request.method == 'OPTIONS':
            return None
        authenticate_request()
    return blueprint


def current_user():
    return g.current_user
