# rollodex/services/token_service.py
from flask import current_app, request
from flask_jwt_extended import create_access_token, decode_token
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt import PyJWTError

from ..errors import TokenMissing, TokenInvalid


def identity_claims(user):
    """Claims carried next to the subject so routes need no user lookup for role checks."""
    return {
        "email": user.email,
        "role": user.role.value,
        "company_name": user.company_name,
        "company_type": user.company_type.value if user.company_type else None,
    }


def issue(user):
    """Signed bearer token for `user`; lifetime is JWT_ACCESS_TOKEN_EXPIRES (24h)."""
    return create_access_token(identity=str(user.id), additional_claims=identity_claims(user))


def verify(token):
    """Decodes a raw token string and returns its claims."""
    if not token:
        raise TokenMissing()
    try:
        claims = decode_token(token)
    except (JWTExtendedException, PyJWTError) as e:
        raise TokenInvalid() from e
    if claims.get('type') != 'access':
        raise TokenInvalid()
    return claims


def bearer_token(headers):
    """
    Second word of the Authorization header, or None. A header that is
    present but carries no token counts as missing.
    """
    header = headers.get(current_app.config.get('JWT_HEADER_NAME', 'Authorization'), '')
    parts = header.split()
    if len(parts) < 2:
        return None
    return parts[1]


def verify_request():
    """Verifies the bearer token of the current request and returns its claims."""
    return verify(bearer_token(request.headers))
