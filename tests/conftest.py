import itertools

import pytest

from rollodex import create_app
from rollodex.models import db, Brand

PASSWORD = 'password123'

_counter = itertools.count(1)


@pytest.fixture
def app(tmp_path):
    app = create_app('testing', config_overrides={'UPLOAD_FOLDER': str(tmp_path / 'uploads')})
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def auth_header(token):
    return {'Authorization': f'Bearer {token}'}


def register(client, company_type, email=None, company_name=None, **extra):
    n = next(_counter)
    payload = {
        'email': email or f'{company_type}{n}@example.com',
        'password': PASSWORD,
        'firstName': 'Test',
        'lastName': f'User{n}',
        'companyName': company_name or f'{company_type.title()} Co {n}',
        'companyType': company_type,
    }
    payload.update(extra)
    response = client.post('/api/auth/register', json=payload)
    assert response.status_code == 201, response.get_json()
    body = response.get_json()
    return {
        'token': body['token'],
        'user': body['user'],
        'headers': auth_header(body['token']),
        'email': payload['email'],
    }


def own_brand(account):
    """Id of the brand created alongside a brand account at registration."""
    brand = Brand.query.filter_by(owner_id=account['user']['id']).order_by(Brand.id.asc()).first()
    return brand.id


@pytest.fixture
def brand_account(client):
    return register(client, 'brand')


@pytest.fixture
def retailer_account(client):
    return register(client, 'retailer')
