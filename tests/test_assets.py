import io
import os

from rollodex.models import db, Asset
from conftest import register, own_brand

PDF_BYTES = b'%PDF-1.4 brochure'


def upload(client, account, brand_id, files, **form):
    data = {'files': files, **form}
    return client.post(f'/api/brands/{brand_id}/assets', headers=account['headers'],
                       data=data, content_type='multipart/form-data')


def pdf(name='brochure.pdf', content=PDF_BYTES):
    return (io.BytesIO(content), name, 'application/pdf')


def stored_files(app):
    root = app.config['UPLOAD_FOLDER']
    return [os.path.join(dirpath, name) for dirpath, _, names in os.walk(root) for name in names]


def test_owner_uploads_assets(app, client, brand_account):
    brand_id = own_brand(brand_account)
    response = upload(client, brand_account, brand_id,
                      [pdf(), (io.BytesIO(b'\x89PNG'), 'logo.png', 'image/png')],
                      description='Spring line', permissionLevel='public')
    assert response.status_code == 201
    assets = response.get_json()['assets']
    assert len(assets) == 2
    assert {a['original_name'] for a in assets} == {'brochure.pdf', 'logo.png'}
    assert all(a['permission_level'] == 'public' for a in assets)
    assert all(a['file_url'].startswith(f'/uploads/brands/{brand_id}/') for a in assets)
    assert all(a['uploaded_by'] == brand_account['user']['id'] for a in assets)
    assert len(stored_files(app)) == 2


def test_upload_defaults_to_partners_only(client, brand_account):
    response = upload(client, brand_account, own_brand(brand_account), [pdf()])
    assert response.get_json()['assets'][0]['permission_level'] == 'partners_only'


def test_disallowed_file_rejects_whole_batch(app, client, brand_account):
    response = upload(client, brand_account, own_brand(brand_account),
                      [pdf(), (io.BytesIO(b'MZ'), 'setup.exe', 'application/octet-stream')])
    assert response.status_code == 400
    assert response.get_json()['code'] == 'INVALID_FILE_TYPE'
    assert Asset.query.count() == 0
    assert stored_files(app) == []


def test_extension_and_mime_must_both_match(client, brand_account):
    response = upload(client, brand_account, own_brand(brand_account),
                      [(io.BytesIO(b'MZ'), 'renamed.pdf', 'application/x-msdownload')])
    assert response.status_code == 400
    assert response.get_json()['code'] == 'INVALID_FILE_TYPE'


def test_oversized_file_is_rejected(app, client, brand_account):
    app.config['MAX_FILE_SIZE'] = 8
    response = upload(client, brand_account, own_brand(brand_account), [pdf(content=b'x' * 9)])
    assert response.status_code == 413
    assert response.get_json()['code'] == 'FILE_TOO_LARGE'
    assert Asset.query.count() == 0


def test_upload_without_files(client, brand_account):
    response = upload(client, brand_account, own_brand(brand_account), [])
    assert response.status_code == 400
    assert response.get_json()['code'] == 'NO_FILES'


def test_too_many_files(app, client, brand_account):
    app.config['MAX_FILES_PER_REQUEST'] = 2
    response = upload(client, brand_account, own_brand(brand_account), [pdf('a.pdf'), pdf('b.pdf'), pdf('c.pdf')])
    assert response.status_code == 400
    assert Asset.query.count() == 0


def test_non_owner_cannot_upload(client, brand_account, retailer_account):
    response = upload(client, retailer_account, own_brand(brand_account), [pdf()])
    assert response.status_code == 403


def test_upload_to_missing_brand(client, brand_account):
    response = upload(client, brand_account, 9999, [pdf()])
    assert response.status_code == 404


def test_asset_visibility(client, brand_account, retailer_account):
    brand_id = own_brand(brand_account)
    for level in ('public', 'partners_only', 'private'):
        upload(client, brand_account, brand_id, [pdf(f'{level}.pdf')], permissionLevel=level)

    owner_view = client.get(f'/api/brands/{brand_id}/assets', headers=brand_account['headers']).get_json()
    assert len(owner_view['assets']) == 3

    retailer_view = client.get(f'/api/brands/{brand_id}/assets', headers=retailer_account['headers']).get_json()
    assert sorted(a['permission_level'] for a in retailer_view['assets']) == ['partners_only', 'public']

    details = client.get(f'/api/brands/{brand_id}', headers=retailer_account['headers']).get_json()
    assert len(details['assets']) == 2


def test_private_brand_assets_are_forbidden(client, brand_account, retailer_account):
    brand_id = own_brand(brand_account)
    upload(client, brand_account, brand_id, [pdf()])
    client.put(f'/api/brands/{brand_id}', headers=brand_account['headers'], json={'isPublic': False})

    response = client.get(f'/api/brands/{brand_id}/assets', headers=retailer_account['headers'])
    assert response.status_code == 403


def test_download_counts_and_streams_file(client, brand_account, retailer_account):
    brand_id = own_brand(brand_account)
    asset_id = upload(client, brand_account, brand_id, [pdf()]).get_json()['assets'][0]['id']

    response = client.get(f'/api/brands/{brand_id}/assets/{asset_id}/download', headers=retailer_account['headers'])
    assert response.status_code == 200
    assert response.data == PDF_BYTES
    assert 'attachment' in response.headers['Content-Disposition']
    assert 'brochure.pdf' in response.headers['Content-Disposition']
    assert db.session.get(Asset, asset_id).download_count == 1


def test_private_asset_download_is_hidden(client, brand_account, retailer_account):
    brand_id = own_brand(brand_account)
    asset_id = upload(client, brand_account, brand_id, [pdf()], permissionLevel='private').get_json()['assets'][0]['id']

    response = client.get(f'/api/brands/{brand_id}/assets/{asset_id}/download', headers=retailer_account['headers'])
    assert response.status_code == 404


def test_uploaded_file_is_served(client, brand_account):
    asset = upload(client, brand_account, own_brand(brand_account), [pdf()]).get_json()['assets'][0]
    response = client.get(asset['file_url'])
    assert response.status_code == 200
    assert response.data == PDF_BYTES


def test_owner_deletes_asset(app, client, brand_account, retailer_account):
    brand_id = own_brand(brand_account)
    asset_id = upload(client, brand_account, brand_id, [pdf()]).get_json()['assets'][0]['id']

    url = f'/api/brands/{brand_id}/assets/{asset_id}'
    assert client.delete(url, headers=retailer_account['headers']).status_code == 403

    response = client.delete(url, headers=brand_account['headers'])
    assert response.status_code == 200
    assert Asset.query.count() == 0
    assert stored_files(app) == []


def test_delete_when_file_already_gone(app, client, brand_account):
    brand_id = own_brand(brand_account)
    asset_id = upload(client, brand_account, brand_id, [pdf()]).get_json()['assets'][0]['id']
    for path in stored_files(app):
        os.remove(path)

    response = client.delete(f'/api/brands/{brand_id}/assets/{asset_id}', headers=brand_account['headers'])
    assert response.status_code == 200
    assert Asset.query.count() == 0


def test_out_of_range_asset_ids_are_not_found(client, brand_account):
    brand_id = own_brand(brand_account)
    huge = 10**20
    headers = brand_account['headers']
    assert client.get(f'/api/brands/{huge}/assets', headers=headers).status_code == 404
    assert client.get(f'/api/brands/{brand_id}/assets/{huge}/download', headers=headers).status_code == 404
    assert client.delete(f'/api/brands/{brand_id}/assets/{huge}', headers=headers).status_code == 404
