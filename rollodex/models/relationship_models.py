# rollodex/models/relationship_models.py
from sqlalchemy import case

from .base import db, TimestampMixin, enum_values, isoformat
from .enums import RelationshipStatusEnum, RelationshipPriorityEnum, PRIORITY_RANKS


class Relationship(TimestampMixin, db.Model):
    """
    Partnership between a brand and a retailer-side user.
    Status is a free field over four values; any status may follow any other.
    """
    __tablename__ = 'brand_relationships'
    __table_args__ = (
        db.UniqueConstraint('brand_id', 'retailer_id', name='uq_brand_relationships_pair'),
    )
    id = db.Column(db.Integer, primary_key=True)
    brand_id = db.Column(db.Integer, db.ForeignKey('brands.id', ondelete='CASCADE'), nullable=False, index=True)
    retailer_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    status = db.Column(db.Enum(RelationshipStatusEnum, name='relationship_status', values_callable=enum_values),
                       nullable=False, default=RelationshipStatusEnum.PROSPECTIVE, index=True)
    partnership_type = db.Column(db.String(100), nullable=True)
    started_date = db.Column(db.Date, nullable=True)
    notes = db.Column(db.Text, nullable=True)
    priority = db.Column(db.Enum(RelationshipPriorityEnum, name='relationship_priority', values_callable=enum_values),
                         nullable=False, default=RelationshipPriorityEnum.NORMAL)
    created_by = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)

    brand = db.relationship('Brand', back_populates='relationships')
    retailer = db.relationship('User', foreign_keys=[retailer_id])

    @classmethod
    def priority_rank(cls):
        """SQL expression ranking priority high > normal > low."""
        return case(
            *[(cls.priority == priority, rank) for priority, rank in PRIORITY_RANKS.items()],
            else_=0,
        )

    def to_dict(self, include_brand=False, include_retailer=False):
        data = {
            "id": self.id,
            "brand_id": self.brand_id,
            "retailer_id": self.retailer_id,
            "status": self.status.value if self.status else None,
            "partnership_type": self.partnership_type,
            "started_date": isoformat(self.started_date),
            "notes": self.notes,
            "priority": self.priority.value if self.priority else None,
            "created_by": self.created_by,
            "created_at": isoformat(self.created_at),
            "updated_at": isoformat(self.updated_at),
        }
        if include_brand and self.brand:
            owner = self.brand.owner
            data.update({
                "brand_name": self.brand.name,
                "brand_industry": self.brand.industry,
                "brand_logo_url": self.brand.logo_url,
                "brand_owner_name": f"{owner.first_name} {owner.last_name}" if owner else None,
                "brand_owner_email": owner.email if owner else None,
                "brand_owner_company": owner.company_name if owner else None,
            })
        if include_retailer and self.retailer:
            data.update({
                "retailer_name": f"{self.retailer.first_name} {self.retailer.last_name}",
                "retailer_email": self.retailer.email,
                "retailer_company": self.retailer.company_name,
                "brand_name": self.brand.name if self.brand else None,
            })
        return data
