# rollodex/brands/asset_routes.py
from flask import request, jsonify, current_app, send_file

from . import brands_bp
from ..services import asset_service
from ..utils import current_user


@brands_bp.route('/<int:brand_id>/assets', methods=['POST'])
def upload_assets(brand_id):
    user = current_user()
    assets = asset_service.upload(
        brand_id,
        user.id,
        request.files.getlist('files'),
        description=request.form.get('description'),
        category=request.form.get('category'),
        permission_level=request.form.get('permissionLevel', request.form.get('permission_level')),
    )
    current_app.audit_log_service.log_action(
        user_id=user.id, action='asset_upload', entity_type='brand', entity_id=brand_id,
        details={"asset_ids": [a.id for a in assets]})
    return jsonify(message=f"{len(assets)} file(s) uploaded successfully",
                   assets=[a.to_dict() for a in assets]), 201


@brands_bp.route('/<int:brand_id>/assets', methods=['GET'])
def list_assets(brand_id):
    assets = asset_service.list_assets(brand_id, current_user().id)
    return jsonify(assets=[a.to_dict() for a in assets]), 200


@brands_bp.route('/<int:brand_id>/assets/<int:asset_id>/download', methods=['GET'])
def download_asset(brand_id, asset_id):
    asset, full_path = asset_service.get_for_download(brand_id, asset_id, current_user().id)
    return send_file(full_path, mimetype=asset.mime_type, as_attachment=True,
                     download_name=asset.original_name)


@brands_bp.route('/<int:brand_id>/assets/<int:asset_id>', methods=['DELETE'])
def delete_asset(brand_id, asset_id):
    user = current_user()
    asset_service.delete(brand_id, asset_id, user.id)
    current_app.audit_log_service.log_action(
        user_id=user.id, action='asset_delete', entity_type='asset', entity_id=asset_id,
        details={"brand_id": brand_id})
    return jsonify(message="Asset deleted successfully"), 200
