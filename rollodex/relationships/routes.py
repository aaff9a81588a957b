# rollodex/relationships/routes.py
from flask import Blueprint, jsonify, current_app

from ..services import relationship_service
from ..utils import get_json_body, current_user, pick, protect_blueprint

relationships_bp = protect_blueprint(Blueprint('relationships_bp', __name__, url_prefix='/api/relationships'))


@relationships_bp.route('', methods=['GET'])
def list_relationships():
    return jsonify(relationships=relationship_service.list_for_user(current_user())), 200


@relationships_bp.route('', methods=['POST'])
def create_relationship():
    user = current_user()
    data = get_json_body()
    relationship = relationship_service.create(
        pick(data, 'brandId', 'brand_id')[1],
        user,
        status=data.get('status'),
        partnership_type=pick(data, 'partnershipType', 'partnership_type')[1],
        notes=data.get('notes'),
        priority=data.get('priority'),
    )
    current_app.audit_log_service.log_action(
        user_id=user.id, action='relationship_create', entity_type='relationship', entity_id=relationship.id,
        details={"brand_id": relationship.brand_id, "status": relationship.status.value})
    return jsonify(message="Relationship created successfully", relationship=relationship.to_dict()), 201


@relationships_bp.route('/<int:relationship_id>', methods=['PUT'])
def update_relationship(relationship_id):
    user = current_user()
    relationship = relationship_service.update(relationship_id, user, get_json_body())
    current_app.audit_log_service.log_action(
        user_id=user.id, action='relationship_update', entity_type='relationship', entity_id=relationship.id,
        details={"status": relationship.status.value, "priority": relationship.priority.value})
    return jsonify(message="Relationship updated successfully", relationship=relationship.to_dict()), 200


@relationships_bp.route('/<int:relationship_id>', methods=['DELETE'])
def delete_relationship(relationship_id):
    user = current_user()
    relationship_service.delete(relationship_id, user)
    current_app.audit_log_service.log_action(
        user_id=user.id, action='relationship_delete', entity_type='relationship', entity_id=relationship_id)
    return jsonify(message="Relationship deleted successfully"), 200
