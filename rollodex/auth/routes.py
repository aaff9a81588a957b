# rollodex/auth/routes.py
from flask import Blueprint, jsonify, current_app

from ..errors import ApiError
from ..services import auth_service
from ..utils import get_json_body, normalize_email

auth_bp = Blueprint('auth_bp', __name__, url_prefix='/api/auth')


@auth_bp.route('/login', methods=['POST'])
def login():
    data = get_json_body()
    audit_logger = current_app.audit_log_service
    email = data.get('email')
    try:
        payload = auth_service.login(email, data.get('password'))
    except ApiError as e:
        audit_logger.log_action(action='login_fail', entity_type='user',
                                details={"email": normalize_email(email) if isinstance(email, str) else None,
                                         "code": e.code})
        raise

    user = payload['user']
    audit_logger.log_action(user_id=user['id'], action='login_success', entity_type='user', entity_id=user['id'])
    return jsonify(payload), 200


@auth_bp.route('/register', methods=['POST'])
def register():
    data = get_json_body()
    payload = auth_service.register(data)

    user = payload['user']
    current_app.audit_log_service.log_action(
        user_id=user['id'], action='register_success', entity_type='user', entity_id=user['id'],
        details={"companyType": user['companyType'], "role": user['role']})
    return jsonify(payload), 201
