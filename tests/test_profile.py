from conftest import register


def test_get_profile(client, retailer_account):
    response = client.get('/api/users/profile', headers=retailer_account['headers'])
    assert response.status_code == 200
    user = response.get_json()['user']
    assert user['id'] == retailer_account['user']['id']
    assert user['email'] == retailer_account['email']
    assert set(user) >= {'firstName', 'lastName', 'companyName', 'companyType', 'role', 'createdAt'}


def test_update_profile_merges_present_fields_only(client):
    account = register(client, 'brand', phone='555-0100', title='Founder')

    response = client.put('/api/users/profile', headers=account['headers'],
                          json={'firstName': 'Ada', 'title': None})
    assert response.status_code == 200
    user = response.get_json()['user']
    assert user['firstName'] == 'Ada'
    assert user['lastName'] == account['user']['lastName']
    assert user['phone'] == '555-0100'
    assert user['title'] == 'Founder'


def test_update_profile_ignores_identity_fields(client, retailer_account):
    response = client.put('/api/users/profile', headers=retailer_account['headers'],
                          json={'email': 'hijack@example.com', 'role': 'brand_admin', 'companyName': 'New Name'})
    assert response.status_code == 200
    user = response.get_json()['user']
    assert user['email'] == retailer_account['email']
    assert user['role'] == 'retailer_admin'
    assert user['companyName'] == 'New Name'


def test_update_profile_requires_token(client):
    response = client.put('/api/users/profile', json={'firstName': 'Nope'})
    assert response.status_code == 401
