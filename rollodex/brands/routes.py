# rollodex/brands/routes.py
from flask import request, jsonify, current_app

from . import brands_bp
from ..services import brand_service, asset_service
from ..utils import get_json_body, current_user


@brands_bp.route('', methods=['GET'])
def list_brands():
    brands, pagination = brand_service.list_brands(
        search=request.args.get('search'),
        industry=request.args.get('industry'),
        page=request.args.get('page'),
        limit=request.args.get('limit'),
    )
    return jsonify(brands=brands, pagination=pagination), 200


@brands_bp.route('', methods=['POST'])
def create_brand():
    user = current_user()
    brand = brand_service.create_brand(user, get_json_body())
    current_app.audit_log_service.log_action(
        user_id=user.id, action='brand_create', entity_type='brand', entity_id=brand.id)
    return jsonify(message="Brand created successfully", brand=brand.to_dict()), 201


@brands_bp.route('/<int:brand_id>', methods=['GET'])
def get_brand(brand_id):
    user = current_user()
    brand = brand_service.get_brand(brand_id, user.id)
    products = brand_service.list_products(brand)
    assets = asset_service.visible_assets(brand, user.id)
    return jsonify(
        brand=brand.to_dict(),
        products=[p.to_dict() for p in products],
        assets=[a.to_dict() for a in assets],
    ), 200


@brands_bp.route('/<int:brand_id>', methods=['PUT'])
def update_brand(brand_id):
    user = current_user()
    data = get_json_body()
    brand = brand_service.update_brand(brand_id, user.id, data)
    current_app.audit_log_service.log_action(
        user_id=user.id, action='brand_update', entity_type='brand', entity_id=brand.id,
        details={"fields": sorted(data.keys()), "profile_completion_score": brand.profile_completion_score})
    return jsonify(message="Brand updated successfully", brand=brand.to_dict()), 200
