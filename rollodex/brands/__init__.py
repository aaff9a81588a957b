# rollodex/brands/__init__.py
from flask import Blueprint

from ..utils import protect_blueprint

brands_bp = protect_blueprint(Blueprint('brands_bp', __name__, url_prefix='/api/brands'))

# Import routes after blueprint creation to avoid circular imports
from . import routes, product_routes, asset_routes
