# rollodex/brands/product_routes.py
from flask import jsonify, current_app

from . import brands_bp
from ..services import brand_service
from ..utils import get_json_body, current_user


@brands_bp.route('/<int:brand_id>/products', methods=['GET'])
def list_products(brand_id):
    brand = brand_service.get_brand(brand_id, current_user().id)
    return jsonify(products=[p.to_dict() for p in brand_service.list_products(brand)]), 200


@brands_bp.route('/<int:brand_id>/products', methods=['POST'])
def create_product(brand_id):
    user = current_user()
    product = brand_service.create_product(brand_id, user.id, get_json_body())
    current_app.audit_log_service.log_action(
        user_id=user.id, action='product_create', entity_type='product', entity_id=product.id,
        details={"brand_id": brand_id})
    return jsonify(message="Product created successfully", product=product.to_dict()), 201
