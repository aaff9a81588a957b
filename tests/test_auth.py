from datetime import timedelta

import pytest
from flask_jwt_extended import create_access_token, decode_token

from rollodex.errors import TokenMissing, TokenInvalid
from rollodex.models import db, User, Brand, Retailer, ActivityLog, NotificationPreferences
from rollodex.services import auth_service, token_service
from conftest import PASSWORD, register, auth_header


def test_register_brand_creates_companion_brand(client):
    account = register(client, 'brand', email='Owner@Example.com', company_name='Acme Foods')

    assert account['user']['email'] == 'owner@example.com'
    assert account['user']['role'] == 'brand_admin'
    assert account['user']['companyType'] == 'brand'
    assert 'password' not in account['user']
    assert 'passwordHash' not in account['user']

    brands = Brand.query.filter_by(owner_id=account['user']['id']).all()
    assert len(brands) == 1
    assert brands[0].name == 'Acme Foods'
    assert brands[0].is_public is True
    assert brands[0].profile_completion_score == 11


def test_register_retailer_creates_retailer_profile(client):
    account = register(client, 'retailer', company_name='Corner Shop')

    assert account['user']['role'] == 'retailer_admin'
    retailer = Retailer.query.filter_by(owner_id=account['user']['id']).one()
    assert retailer.name == 'Corner Shop'
    assert Brand.query.count() == 0


def test_register_token_carries_identity_claims(app, client):
    account = register(client, 'retailer')
    claims = decode_token(account['token'])
    assert claims['sub'] == str(account['user']['id'])
    assert claims['role'] == 'retailer_admin'
    assert claims['company_type'] == 'retailer'
    assert claims['exp'] - claims['iat'] == 24 * 3600


def test_register_duplicate_email_is_case_insensitive(client):
    register(client, 'brand', email='dup@example.com')
    response = client.post('/api/auth/register', json={
        'email': 'DUP@example.com', 'password': PASSWORD, 'firstName': 'A', 'lastName': 'B',
        'companyName': 'Other', 'companyType': 'retailer',
    })
    assert response.status_code == 409
    assert response.get_json() == {'error': 'User already exists', 'code': 'EMAIL_EXISTS'}
    assert User.query.count() == 1


def test_register_missing_fields(client):
    response = client.post('/api/auth/register', json={'email': 'a@example.com', 'password': PASSWORD})
    assert response.status_code == 400
    body = response.get_json()
    assert body['code'] == 'VALIDATION_ERROR'
    assert 'firstName' in body['error']
    assert User.query.count() == 0


def test_register_rejects_unknown_company_type(client):
    response = client.post('/api/auth/register', json={
        'email': 'a@example.com', 'password': PASSWORD, 'firstName': 'A', 'lastName': 'B',
        'companyName': 'X', 'companyType': 'distributor',
    })
    assert response.status_code == 400
    assert User.query.count() == 0


def test_register_rejects_short_password(client):
    response = client.post('/api/auth/register', json={
        'email': 'a@example.com', 'password': 'short', 'firstName': 'A', 'lastName': 'B',
        'companyName': 'X', 'companyType': 'brand',
    })
    assert response.status_code == 400
    assert User.query.count() == 0


def test_login_success_updates_last_login(client):
    account = register(client, 'brand', email='login@example.com')
    assert account['user']['lastLogin'] is None

    response = client.post('/api/auth/login', json={'email': 'LOGIN@example.com', 'password': PASSWORD})
    assert response.status_code == 200
    body = response.get_json()
    assert body['token']
    assert body['user']['id'] == account['user']['id']
    assert body['user']['lastLogin'] is not None

    actions = [entry.action for entry in ActivityLog.query.all()]
    assert 'login_success' in actions


def test_login_failures_are_indistinguishable(client):
    register(client, 'brand', email='known@example.com')

    wrong_password = client.post('/api/auth/login', json={'email': 'known@example.com', 'password': 'wrong-password'})
    unknown_email = client.post('/api/auth/login', json={'email': 'nobody@example.com', 'password': 'wrong-password'})

    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.get_json() == unknown_email.get_json() == {
        'error': 'Invalid credentials', 'code': 'INVALID_CREDENTIALS'}


def test_login_inactive_user_is_rejected(client):
    account = register(client, 'retailer', email='inactive@example.com')
    user = db.session.get(User, account['user']['id'])
    user.is_active = False
    db.session.commit()

    response = client.post('/api/auth/login', json={'email': 'inactive@example.com', 'password': PASSWORD})
    assert response.status_code == 401
    assert response.get_json()['code'] == 'INVALID_CREDENTIALS'

    # Tokens issued before deactivation stop working as well
    response = client.get('/api/users/profile', headers=account['headers'])
    assert response.status_code == 403
    assert response.get_json()['code'] == 'TOKEN_INVALID'


def test_login_requires_email_and_password(client):
    response = client.post('/api/auth/login', json={'email': 'someone@example.com'})
    assert response.status_code == 400
    assert response.get_json()['code'] == 'VALIDATION_ERROR'


def test_missing_token_is_401(client):
    response = client.get('/api/users/profile')
    assert response.status_code == 401
    assert response.get_json() == {'error': 'Access token required', 'code': 'TOKEN_MISSING'}


def test_malformed_token_is_403(client):
    response = client.get('/api/brands', headers=auth_header('not-a-jwt'))
    assert response.status_code == 403
    assert response.get_json() == {'error': 'Invalid token', 'code': 'TOKEN_INVALID'}


def test_expired_token_is_403(app, client):
    account = register(client, 'brand')
    expired = create_access_token(identity=str(account['user']['id']), expires_delta=timedelta(seconds=-10))
    response = client.get('/api/brands', headers=auth_header(expired))
    assert response.status_code == 403
    assert response.get_json()['code'] == 'TOKEN_INVALID'


def test_token_signed_with_other_secret_is_403(app, client):
    account = register(client, 'brand')
    app.config['JWT_SECRET_KEY'] = 'another-secret-key-that-is-long-enough-for-hs256'
    response = client.get('/api/brands', headers=account['headers'])
    assert response.status_code == 403


def test_register_creates_default_notification_preferences(client):
    account = register(client, 'retailer')
    user = db.session.get(User, account['user']['id'])
    preferences = user.notification_preferences
    assert preferences is not None
    assert preferences.email_notifications is True
    assert preferences.marketing_emails is False
    assert user.retailer_profile.name == account['user']['companyName']


def test_failed_registration_leaves_no_rows(client):
    register(client, 'brand', email='taken@example.com')
    response = client.post('/api/auth/register', json={
        'email': 'taken@example.com', 'password': PASSWORD, 'firstName': 'A', 'lastName': 'B',
        'companyName': 'Copycat', 'companyType': 'brand',
    })
    assert response.status_code == 409
    assert User.query.count() == 1
    assert Brand.query.count() == 1
    assert NotificationPreferences.query.count() == 1
    assert Brand.query.filter_by(name='Copycat').count() == 0


def test_bearer_without_token_is_401(client):
    response = client.get('/api/users/profile', headers={'Authorization': 'Bearer'})
    assert response.status_code == 401
    assert response.get_json()['code'] == 'TOKEN_MISSING'


def test_verify_returns_claims_of_issued_token(app, client):
    account = register(client, 'brand')
    user = db.session.get(User, account['user']['id'])
    claims = token_service.verify(token_service.issue(user))
    assert claims['sub'] == str(user.id)
    assert claims['email'] == user.email
    assert claims['role'] == 'brand_admin'


def test_verify_rejects_missing_and_garbage_tokens(app):
    with pytest.raises(TokenMissing):
        token_service.verify('')
    with pytest.raises(TokenInvalid):
        token_service.verify('abc.def.ghi')


def test_dummy_hash_follows_cost_factor():
    assert auth_service.dummy_hash(4).startswith(b'$2b$04$')
    assert auth_service.dummy_hash(5).startswith(b'$2b$05$')
    assert auth_service.dummy_hash(4) is auth_service.dummy_hash(4)
