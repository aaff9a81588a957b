# rollodex/services/relationship_service.py
"""
Partnership records between brands and retailer-side users.

Status is a free field: any of the four statuses may follow any
other, the update only checks that the value is one of them. Only the
retailer who created a relationship may change or delete it.
"""
from datetime import date

from flask import current_app
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import joinedload

from ..errors import BrandNotFound, DuplicateRelationship, Forbidden, NotFound, ValidationError
from ..models import db, Brand, Relationship, RelationshipStatusEnum, RelationshipPriorityEnum
from ..utils import sanitize_input, pick, is_valid_id


def parse_status(value):
    try:
        return RelationshipStatusEnum(str(value).strip().lower())
    except ValueError:
        allowed = ', '.join(s.value for s in RelationshipStatusEnum)
        raise ValidationError(f"Invalid status '{value}'. Allowed: {allowed}")


def parse_priority(value):
    try:
        return RelationshipPriorityEnum(str(value).strip().lower())
    except ValueError:
        allowed = ', '.join(p.value for p in RelationshipPriorityEnum)
        raise ValidationError(f"Invalid priority '{value}'. Allowed: {allowed}")


def _set_status(relationship, status):
    relationship.status = status
    if status is RelationshipStatusEnum.ACTIVE and relationship.started_date is None:
        relationship.started_date = date.today()


def _require_retailer(user, action):
    if not user.is_retailer:
        current_app.logger.warning(f"User {user.id} ({user.role.value}) attempted to {action} a relationship")
        raise Forbidden(f"Only retailer accounts can {action} relationships")


def create(brand_id, retailer_user, status=None, partnership_type=None, notes=None, priority=None):
    _require_retailer(retailer_user, 'create')
    if brand_id is None:
        raise ValidationError("brandId is required")
    try:
        brand_id = int(brand_id)
    except (TypeError, ValueError):
        raise ValidationError("brandId must be an integer")

    brand = db.session.get(Brand, brand_id) if is_valid_id(brand_id) else None
    if brand is None or not brand.is_public:
        raise BrandNotFound()

    status = parse_status(status) if status is not None else RelationshipStatusEnum.PROSPECTIVE
    priority = parse_priority(priority) if priority is not None else RelationshipPriorityEnum.NORMAL

    existing = Relationship.query.filter_by(brand_id=brand.id, retailer_id=retailer_user.id).first()
    if existing:
        raise DuplicateRelationship()

    relationship = Relationship(
        brand_id=brand.id,
        retailer_id=retailer_user.id,
        partnership_type=sanitize_input(partnership_type, max_length=100),
        notes=sanitize_input(notes),
        priority=priority,
        created_by=retailer_user.id,
    )
    _set_status(relationship, status)
    try:
        db.session.add(relationship)
        db.session.commit()
    except IntegrityError:
        # A concurrent request inserted the same pair first
        db.session.rollback()
        raise DuplicateRelationship()

    current_app.logger.info(f"Relationship {relationship.id} created: brand {brand.id} <- retailer {retailer_user.id} ({status.value})")
    return relationship


def _owned_or_404(relationship_id, retailer_user):
    if not is_valid_id(relationship_id):
        raise NotFound("Relationship not found")
    relationship = Relationship.query.filter_by(id=relationship_id, retailer_id=retailer_user.id).first()
    if relationship is None:
        raise NotFound("Relationship not found")
    return relationship


def update(relationship_id, retailer_user, data):
    _require_retailer(retailer_user, 'update')
    relationship = _owned_or_404(relationship_id, retailer_user)

    present, value = pick(data, 'status')
    if present and value is not None:
        _set_status(relationship, parse_status(value))
    present, value = pick(data, 'priority')
    if present and value is not None:
        relationship.priority = parse_priority(value)
    present, value = pick(data, 'partnershipType', 'partnership_type')
    if present and value is not None:
        relationship.partnership_type = sanitize_input(value, max_length=100)
    present, value = pick(data, 'notes')
    if present and value is not None:
        relationship.notes = sanitize_input(value)

    db.session.commit()
    current_app.logger.info(f"Relationship {relationship.id} updated by retailer {retailer_user.id} (status {relationship.status.value})")
    return relationship


def delete(relationship_id, retailer_user):
    _require_retailer(retailer_user, 'delete')
    relationship = _owned_or_404(relationship_id, retailer_user)
    db.session.delete(relationship)
    db.session.commit()
    current_app.logger.info(f"Relationship {relationship_id} deleted by retailer {retailer_user.id}")


def list_for_user(user):
    """
    Retailers see the relationships they hold, with brand and brand owner
    details; brand users see the relationships on brands they own, with
    retailer details. High priority first, then most recently updated.
    """
    ordering = (Relationship.priority_rank().desc(), Relationship.updated_at.desc(), Relationship.id.desc())

    if user.is_retailer:
        relationships = (Relationship.query
                         .options(joinedload(Relationship.brand).joinedload(Brand.owner))
                         .filter(Relationship.retailer_id == user.id)
                         .order_by(*ordering)
                         .all())
        return [r.to_dict(include_brand=True) for r in relationships]

    if user.is_brand:
        relationships = (Relationship.query
                         .join(Brand, Relationship.brand_id == Brand.id)
                         .options(joinedload(Relationship.retailer), joinedload(Relationship.brand))
                         .filter(Brand.owner_id == user.id)
                         .order_by(*ordering)
                         .all())
        return [r.to_dict(include_retailer=True) for r in relationships]

    return []
