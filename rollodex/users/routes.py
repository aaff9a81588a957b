# rollodex/users/routes.py
from flask import Blueprint, jsonify, current_app

from ..services import profile_service
from ..utils import get_json_body, current_user, protect_blueprint

users_bp = protect_blueprint(Blueprint('users_bp', __name__, url_prefix='/api/users'))


@users_bp.route('/profile', methods=['GET'])
def get_profile():
    user = profile_service.get_profile(current_user().id)
    return jsonify(user=user.to_dict()), 200


@users_bp.route('/profile', methods=['PUT'])
def update_profile():
    user, changed = profile_service.update_profile(current_user().id, get_json_body())
    current_app.audit_log_service.log_action(
        user_id=user.id, action='profile_update', entity_type='user', entity_id=user.id,
        details={"fields": changed})
    return jsonify(message="Profile updated successfully", user=user.to_dict()), 200
