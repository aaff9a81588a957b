import io

from conftest import register, own_brand


def test_retailer_dashboard(client, retailer_account):
    brands = [register(client, 'brand') for _ in range(3)]
    hidden = register(client, 'brand')
    client.put(f'/api/brands/{own_brand(hidden)}', headers=hidden['headers'], json={'isPublic': False})

    for account, status in zip(brands, ('active', 'active', 'pending')):
        client.post('/api/relationships', headers=retailer_account['headers'],
                    json={'brandId': own_brand(account), 'status': status})

    response = client.get('/api/analytics/dashboard', headers=retailer_account['headers'])
    assert response.status_code == 200
    stats = response.get_json()['stats']
    assert stats['relationships'] == {'total': 3, 'prospective': 0, 'pending': 1, 'active': 2, 'inactive': 0}
    assert stats['availableBrands'] == 3


def test_brand_dashboard(client, brand_account, retailer_account):
    brand_id = own_brand(brand_account)
    headers = brand_account['headers']
    client.post('/api/brands', headers=headers, json={'name': 'Private Label', 'isPublic': False})
    client.post(f'/api/brands/{brand_id}/products', headers=headers, json={'name': 'Granola'})
    client.post(f'/api/brands/{brand_id}/products', headers=headers, json={'name': 'Muesli'})
    asset = client.post(f'/api/brands/{brand_id}/assets', headers=headers, content_type='multipart/form-data',
                        data={'files': [(io.BytesIO(b'%PDF'), 'sheet.pdf', 'application/pdf')]}).get_json()['assets'][0]
    client.get(f'/api/brands/{brand_id}/assets/{asset["id"]}/download', headers=retailer_account['headers'])
    client.post('/api/relationships', headers=retailer_account['headers'], json={'brandId': brand_id})

    stats = client.get('/api/analytics/dashboard', headers=headers).get_json()['stats']
    assert stats['relationships']['total'] == 1
    assert stats['relationships']['prospective'] == 1
    assert stats['totalBrands'] == 2
    assert stats['publicBrands'] == 1
    assert stats['totalProducts'] == 2
    assert stats['totalAssets'] == 1
    assert stats['totalDownloads'] == 1


def test_dashboard_for_new_brand_is_zeroed(client, brand_account):
    stats = client.get('/api/analytics/dashboard', headers=brand_account['headers']).get_json()['stats']
    assert stats['relationships']['total'] == 0
    assert stats['totalBrands'] == 1
    assert stats['totalAssets'] == 0
    assert stats['totalDownloads'] == 0


def test_dashboard_requires_token(client):
    assert client.get('/api/analytics/dashboard').status_code == 401
