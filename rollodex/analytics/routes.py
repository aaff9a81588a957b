# rollodex/analytics/routes.py
from flask import Blueprint, jsonify

from ..services import analytics_service, brand_service
from ..utils import current_user, protect_blueprint

analytics_bp = protect_blueprint(Blueprint('analytics_bp', __name__, url_prefix='/api'))


@analytics_bp.route('/analytics/dashboard', methods=['GET'])
def get_dashboard_stats():
    return jsonify(stats=analytics_service.dashboard(current_user())), 200


@analytics_bp.route('/industries', methods=['GET'])
def list_industries():
    return jsonify(industries=brand_service.list_industries()), 200
