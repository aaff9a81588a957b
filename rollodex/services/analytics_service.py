# rollodex/services/analytics_service.py
from sqlalchemy import func, false

from ..models import db, Brand, Product, Asset, Relationship, RelationshipStatusEnum


def _relationship_counts(query):
    rows = (query.with_entities(Relationship.status, func.count(Relationship.id))
            .group_by(Relationship.status)
            .all())
    by_status = {status: count for status, count in rows}
    counts = {status.value: by_status.get(status, 0) for status in RelationshipStatusEnum}
    counts['total'] = sum(counts.values())
    return counts


def retailer_dashboard(user):
    relationships = Relationship.query.filter(Relationship.retailer_id == user.id)
    return {
        "relationships": _relationship_counts(relationships),
        "availableBrands": Brand.query.filter(Brand.is_public.is_(True)).count(),
    }


def brand_dashboard(user):
    owned_brand_ids = db.select(Brand.id).where(Brand.owner_id == user.id)
    relationships = Relationship.query.filter(Relationship.brand_id.in_(owned_brand_ids))
    asset_totals = (db.session.query(func.count(Asset.id), func.coalesce(func.sum(Asset.download_count), 0))
                    .filter(Asset.brand_id.in_(owned_brand_ids))
                    .one())
    return {
        "relationships": _relationship_counts(relationships),
        "totalBrands": Brand.query.filter(Brand.owner_id == user.id).count(),
        "publicBrands": Brand.query.filter(Brand.owner_id == user.id, Brand.is_public.is_(True)).count(),
        "totalProducts": Product.query.filter(Product.brand_id.in_(owned_brand_ids),
                                              Product.is_active.is_(True)).count(),
        "totalAssets": asset_totals[0],
        "totalDownloads": int(asset_totals[1] or 0),
    }


def dashboard(user):
    if user.is_retailer:
        return retailer_dashboard(user)
    if user.is_brand:
        return brand_dashboard(user)
    return {"relationships": _relationship_counts(Relationship.query.filter(false()))}
