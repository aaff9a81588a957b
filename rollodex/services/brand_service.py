# rollodex/services/brand_service.py
import math

from flask import current_app
from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError

from ..errors import NotFound, Forbidden, ValidationError, ConflictError
from ..models import db, Brand, Product, Relationship
from ..utils import sanitize_input, pick, parse_positive_int, is_valid_id

# request key(s) -> column
BRAND_FIELDS = {
    ('name',): 'name',
    ('description',): 'description',
    ('industry',): 'industry',
    ('website',): 'website',
    ('email',): 'email',
    ('phone',): 'phone',
    ('address',): 'address',
    ('city',): 'city',
    ('state',): 'state',
    ('zipCode', 'zip_code'): 'zip_code',
    ('country',): 'country',
    ('logoUrl', 'logo_url'): 'logo_url',
    ('isPublic', 'is_public'): 'is_public',
}

MAX_LENGTHS = {
    'name': 255, 'industry': 100, 'website': 255, 'email': 255, 'phone': 50,
    'address': 255, 'city': 100, 'state': 100, 'zip_code': 20, 'country': 100,
    'logo_url': 500,
}


def _coerce_bool(value, name):
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.lower() in ('true', 'false', '1', '0'):
        return value.lower() in ('true', '1')
    raise ValidationError(f"'{name}' must be a boolean")


def _apply_fields(brand, data):
    """Partial merge: keys that are absent or null keep the stored value."""
    for keys, column in BRAND_FIELDS.items():
        present, value = pick(data, *keys)
        if not present or value is None:
            continue
        if column == 'is_public':
            value = _coerce_bool(value, keys[0])
        elif column == 'description':
            value = sanitize_input(value)
        else:
            value = sanitize_input(value, max_length=MAX_LENGTHS.get(column))
        if column == 'name' and not value:
            raise ValidationError("Brand name cannot be empty")
        setattr(brand, column, value)


def _get_or_404(brand_id):
    brand = db.session.get(Brand, brand_id) if is_valid_id(brand_id) else None
    if brand is None:
        raise NotFound("Brand not found")
    return brand


def pagination_info(page, limit, total_count):
    total_pages = math.ceil(total_count / limit) if total_count else 0
    return {
        "currentPage": page,
        "totalPages": total_pages,
        "totalCount": total_count,
        "limit": limit,
        "hasNext": page < total_pages,
        "hasPrev": page > 1,
    }


def _counts_by_brand(column, brand_ids, *criteria):
    if not brand_ids:
        return {}
    rows = (db.session.query(column, func.count())
            .filter(column.in_(brand_ids), *criteria)
            .group_by(column)
            .all())
    return dict(rows)


def list_brands(search=None, industry=None, page=None, limit=None):
    """
    Public brands only, best completed first. Returns (rows, pagination).
    """
    page = parse_positive_int(page, 'page', 1)
    limit = min(parse_positive_int(limit, 'limit', current_app.config.get('DEFAULT_PAGE_SIZE', 20)),
                current_app.config.get('MAX_PAGE_SIZE', 100))

    query = Brand.query.filter(Brand.is_public.is_(True))
    if search:
        term = search.strip().lower()
        query = query.filter(or_(
            func.lower(Brand.name).contains(term, autoescape=True),
            func.lower(Brand.description).contains(term, autoescape=True),
        ))
    if industry:
        query = query.filter(Brand.industry == industry)

    total_count = query.order_by(None).count()
    brands = (query
              .order_by(Brand.profile_completion_score.desc(), Brand.created_at.desc(), Brand.id.desc())
              .offset((page - 1) * limit)
              .limit(limit)
              .all())

    brand_ids = [b.id for b in brands]
    product_counts = _counts_by_brand(Product.brand_id, brand_ids, Product.is_active.is_(True))
    relationship_counts = _counts_by_brand(Relationship.brand_id, brand_ids)

    rows = []
    for brand in brands:
        row = brand.to_dict()
        row['product_count'] = product_counts.get(brand.id, 0)
        row['relationship_count'] = relationship_counts.get(brand.id, 0)
        rows.append(row)
    return rows, pagination_info(page, limit, total_count)


def create_brand(owner, data):
    if not owner.is_brand:
        raise Forbidden("Only brand accounts can create brands")
    if not sanitize_input(data.get('name')):
        raise ValidationError("Brand name is required")

    brand = Brand(owner_id=owner.id, is_public=True)
    _apply_fields(brand, data)
    brand.recompute_completion_score()
    db.session.add(brand)
    db.session.commit()
    current_app.logger.info(f"Brand {brand.id} created by user {owner.id} (score {brand.profile_completion_score})")
    return brand


def get_brand(brand_id, requesting_user_id):
    """
    Visible when public or owned by the requester. A private brand looks
    exactly like a missing one to everybody else.
    """
    brand = db.session.get(Brand, brand_id) if is_valid_id(brand_id) else None
    if brand is None or not (brand.is_public or brand.is_owned_by(requesting_user_id)):
        raise NotFound("Brand not found")
    return brand


def update_brand(brand_id, requesting_user_id, data):
    brand = _get_or_404(brand_id)
    if not brand.is_owned_by(requesting_user_id):
        current_app.logger.warning(f"User {requesting_user_id} attempted to update brand {brand_id} they do not own")
        raise Forbidden("Only the brand owner can update this brand")

    _apply_fields(brand, data)
    brand.recompute_completion_score()
    db.session.commit()
    current_app.logger.info(f"Brand {brand.id} updated (score {brand.profile_completion_score})")
    return brand


def list_industries():
    rows = (db.session.query(Brand.industry)
            .filter(Brand.is_public.is_(True), Brand.industry.isnot(None), Brand.industry != '')
            .distinct()
            .order_by(Brand.industry.asc())
            .all())
    return [industry for (industry,) in rows if industry.strip()]


# --- Products ---
def list_products(brand):
    return brand.products.filter_by(is_active=True).order_by(Product.name.asc(), Product.id.asc()).all()


def _parse_price(value):
    if value is None or value == '':
        return None
    try:
        price = round(float(value), 2)
    except (TypeError, ValueError):
        raise ValidationError("'price' must be a number")
    if price < 0:
        raise ValidationError("'price' cannot be negative")
    return price


def create_product(brand_id, requesting_user_id, data):
    brand = _get_or_404(brand_id)
    if not brand.is_owned_by(requesting_user_id):
        raise Forbidden("Only the brand owner can add products")

    name = sanitize_input(data.get('name'), max_length=255)
    if not name:
        raise ValidationError("Product name is required")

    product = Product(
        brand_id=brand.id,
        name=name,
        description=sanitize_input(data.get('description')),
        category=sanitize_input(data.get('category'), max_length=100),
        sku=sanitize_input(data.get('sku'), max_length=100) or None,
        price=_parse_price(data.get('price')),
        is_active=True,
    )
    try:
        db.session.add(product)
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError(f"A product with SKU '{product.sku}' already exists for this brand")
    current_app.logger.info(f"Product {product.id} added to brand {brand.id}")
    return product
