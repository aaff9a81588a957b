# rollodex/models/brand_models.py
import math

from .base import db, TimestampMixin, isoformat

# Fields that count towards a brand's profile completion score.
COMPLETION_TRACKED_FIELDS = (
    'name', 'description', 'industry', 'website', 'email',
    'phone', 'address', 'city', 'state',
)


def _is_filled(value):
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


def completion_score(values):
    """
    Percentage of tracked fields that are filled, rounded half-up.
    `values` is any mapping-like getter over the tracked field names.
    """
    filled = sum(1 for field in COMPLETION_TRACKED_FIELDS if _is_filled(values(field)))
    return int(math.floor(100 * filled / len(COMPLETION_TRACKED_FIELDS) + 0.5))


class Brand(TimestampMixin, db.Model):
    __tablename__ = 'brands'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False, index=True)
    description = db.Column(db.Text, nullable=True)
    industry = db.Column(db.String(100), nullable=True, index=True)
    website = db.Column(db.String(255), nullable=True)
    email = db.Column(db.String(255), nullable=True)
    phone = db.Column(db.String(50), nullable=True)
    address = db.Column(db.String(255), nullable=True)
    city = db.Column(db.String(100), nullable=True)
    state = db.Column(db.String(100), nullable=True)
    zip_code = db.Column(db.String(20), nullable=True)
    country = db.Column(db.String(100), nullable=True)
    logo_url = db.Column(db.String(500), nullable=True)
    profile_completion_score = db.Column(db.Integer, default=0, nullable=False, index=True)
    is_verified = db.Column(db.Boolean, default=False, nullable=False)
    is_public = db.Column(db.Boolean, default=True, nullable=False, index=True)
    owner_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)

    owner = db.relationship('User', back_populates='brands')
    products = db.relationship('Product', back_populates='brand', lazy='dynamic', cascade="all, delete-orphan")
    assets = db.relationship('Asset', back_populates='brand', lazy='dynamic', cascade="all, delete-orphan")
    relationships = db.relationship('Relationship', back_populates='brand', lazy='dynamic', cascade="all, delete-orphan")

    def recompute_completion_score(self):
        self.profile_completion_score = completion_score(lambda field: getattr(self, field))
        return self.profile_completion_score

    def is_owned_by(self, user_id):
        return user_id is not None and self.owner_id == int(user_id)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "industry": self.industry,
            "website": self.website,
            "email": self.email,
            "phone": self.phone,
            "address": self.address,
            "city": self.city,
            "state": self.state,
            "zip_code": self.zip_code,
            "country": self.country,
            "logo_url": self.logo_url,
            "profile_completion_score": self.profile_completion_score,
            "is_verified": self.is_verified,
            "is_public": self.is_public,
            "owner_id": self.owner_id,
            "owner_company": self.owner.company_name if self.owner else None,
            "created_at": isoformat(self.created_at),
            "updated_at": isoformat(self.updated_at),
        }

    def __repr__(self):
        return f'<Brand {self.name}>'


class Retailer(TimestampMixin, db.Model):
    """Buyer-side company profile. Created at registration, informational only."""
    __tablename__ = 'retailers'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=True)
    store_type = db.Column(db.String(100), nullable=True)
    website = db.Column(db.String(255), nullable=True)
    email = db.Column(db.String(255), nullable=True)
    phone = db.Column(db.String(50), nullable=True)
    address = db.Column(db.String(255), nullable=True)
    city = db.Column(db.String(100), nullable=True)
    state = db.Column(db.String(100), nullable=True)
    zip_code = db.Column(db.String(20), nullable=True)
    country = db.Column(db.String(100), nullable=True)
    owner_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, unique=True)

    owner = db.relationship('User', back_populates='retailer_profile')


class Product(TimestampMixin, db.Model):
    __tablename__ = 'products'
    __table_args__ = (
        db.UniqueConstraint('brand_id', 'sku', name='uq_products_brand_sku'),
    )
    id = db.Column(db.Integer, primary_key=True)
    brand_id = db.Column(db.Integer, db.ForeignKey('brands.id', ondelete='CASCADE'), nullable=False, index=True)
    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=True)
    category = db.Column(db.String(100), nullable=True)
    sku = db.Column(db.String(100), nullable=True)
    price = db.Column(db.Numeric(10, 2), nullable=True)
    is_active = db.Column(db.Boolean, default=True, nullable=False, index=True)

    brand = db.relationship('Brand', back_populates='products')

    def to_dict(self):
        return {
            "id": self.id,
            "brand_id": self.brand_id,
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "sku": self.sku,
            "price": float(self.price) if self.price is not None else None,
            "is_active": self.is_active,
            "created_at": isoformat(self.created_at),
        }

    def __repr__(self): return f'<Product {self.name}>'
