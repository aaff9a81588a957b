# rollodex/services/auth_service.py
import bcrypt
from flask import current_app
from sqlalchemy.exc import IntegrityError

from ..errors import InvalidCredentials, EmailExists, ValidationError
from ..models import (db, User, Brand, Retailer, NotificationPreferences,
                      CompanyTypeEnum, UserRoleEnum)
from ..models.base import utcnow
from ..utils import sanitize_input, normalize_email, is_valid_email
from . import token_service

MIN_PASSWORD_LENGTH = 8
# bcrypt only looks at the first 72 bytes and newer releases refuse longer input
MAX_PASSWORD_BYTES = 72

REQUIRED_REGISTRATION_FIELDS = ('email', 'password', 'firstName', 'lastName', 'companyName', 'companyType')

# cost factor -> hash checked against when the email is unknown
_dummy_hashes = {}


def dummy_hash(rounds):
    if rounds not in _dummy_hashes:
        _dummy_hashes[rounds] = bcrypt.hashpw(b'rollodex-dummy-password', bcrypt.gensalt(rounds=rounds))
    return _dummy_hashes[rounds]


def _burn_password_check(password):
    """Same bcrypt cost for unknown emails as for wrong passwords."""
    rounds = current_app.config.get('BCRYPT_ROUNDS', 12)
    bcrypt.checkpw(password.encode('utf-8'), dummy_hash(rounds))


def validate_password(password):
    if not isinstance(password, str) or len(password) < MIN_PASSWORD_LENGTH:
        return f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
    if len(password.encode('utf-8')) > MAX_PASSWORD_BYTES:
        return f"Password must be at most {MAX_PASSWORD_BYTES} bytes"
    return None


def auth_payload(user):
    return {"token": token_service.issue(user), "user": user.to_dict()}


def login(email, password):
    """
    Returns {token, user}. Unknown email, inactive account and wrong password
    all raise the same InvalidCredentials.
    """
    if not email or not isinstance(email, str) or not password or not isinstance(password, str):
        raise ValidationError("Email and password required")

    email = normalize_email(email)
    if len(password.encode('utf-8')) > MAX_PASSWORD_BYTES:
        raise InvalidCredentials()

    user = User.query.filter_by(email=email, is_active=True).first()
    if user is None:
        _burn_password_check(password)
        current_app.logger.info(f"Failed login for unknown or inactive account {email}")
        raise InvalidCredentials()
    if not user.check_password(password):
        current_app.logger.info(f"Failed login for user {user.id}: wrong password")
        raise InvalidCredentials()

    user.last_login = utcnow()
    db.session.commit()
    current_app.logger.info(f"User {user.id} logged in")
    return auth_payload(user)


def _parse_company_type(value):
    try:
        return CompanyTypeEnum(str(value).strip().lower())
    except ValueError:
        raise ValidationError("companyType must be 'retailer' or 'brand'")


def register(data):
    """
    Creates the user, its companion Brand or Retailer profile and default
    notification preferences in one transaction. Returns {token, user}.
    """
    missing = [field for field in REQUIRED_REGISTRATION_FIELDS if not data.get(field)]
    if missing:
        raise ValidationError(f"All fields required. Missing: {', '.join(missing)}")

    email = normalize_email(data['email'])
    if not is_valid_email(email):
        raise ValidationError("Invalid email format")

    password = data['password']
    password_error = validate_password(password)
    if password_error:
        raise ValidationError(password_error)

    company_type = _parse_company_type(data['companyType'])
    company_name = sanitize_input(data['companyName'], max_length=255)

    if User.query.filter_by(email=email).first():
        raise EmailExists()

    user = User(
        email=email,
        first_name=sanitize_input(data['firstName'], max_length=100),
        last_name=sanitize_input(data['lastName'], max_length=100),
        role=UserRoleEnum.for_company_type(company_type),
        company_name=company_name,
        company_type=company_type,
        phone=sanitize_input(data.get('phone'), max_length=50),
        title=sanitize_input(data.get('title'), max_length=100),
        is_active=True,
        email_verified=False,
    )
    user.set_password(password, rounds=current_app.config.get('BCRYPT_ROUNDS', 12))

    try:
        db.session.add(user)
        db.session.flush() # user.id for the companion rows

        if company_type is CompanyTypeEnum.BRAND:
            brand = Brand(name=company_name, owner_id=user.id, is_public=True)
            brand.recompute_completion_score()
            db.session.add(brand)
        else:
            user.retailer_profile = Retailer(name=company_name)

        user.notification_preferences = NotificationPreferences()
        db.session.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration of the same email
        db.session.rollback()
        raise EmailExists()

    current_app.logger.info(f"Registered user {user.id} as {user.role.value}")
    return auth_payload(user)
