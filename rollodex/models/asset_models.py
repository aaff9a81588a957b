# rollodex/models/asset_models.py
from .base import db, utcnow, enum_values, isoformat
from .enums import AssetPermissionEnum


class Asset(db.Model):
    __tablename__ = 'brand_assets'
    id = db.Column(db.Integer, primary_key=True)
    brand_id = db.Column(db.Integer, db.ForeignKey('brands.id', ondelete='CASCADE'), nullable=False, index=True)
    filename = db.Column(db.String(255), nullable=False)
    original_name = db.Column(db.String(255), nullable=False)
    mime_type = db.Column(db.String(150), nullable=True)
    file_size = db.Column(db.Integer, nullable=False, default=0)
    # Relative to UPLOAD_FOLDER, e.g. 'brands/3/9f0c....pdf'
    file_path = db.Column(db.String(500), nullable=False)
    file_url = db.Column(db.String(500), nullable=False)
    description = db.Column(db.Text, nullable=True)
    category = db.Column(db.String(100), nullable=True)
    permission_level = db.Column(db.Enum(AssetPermissionEnum, name='asset_permission', values_callable=enum_values),
                                 nullable=False, default=AssetPermissionEnum.PARTNERS_ONLY, index=True)
    download_count = db.Column(db.Integer, default=0, nullable=False)
    is_featured = db.Column(db.Boolean, default=False, nullable=False)
    uploaded_by = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False, index=True)

    brand = db.relationship('Brand', back_populates='assets')

    def to_dict(self):
        return {
            "id": self.id,
            "brand_id": self.brand_id,
            "filename": self.filename,
            "original_name": self.original_name,
            "mime_type": self.mime_type,
            "file_size": self.file_size,
            "file_url": self.file_url,
            "description": self.description,
            "category": self.category,
            "permission_level": self.permission_level.value if self.permission_level else None,
            "download_count": self.download_count,
            "is_featured": self.is_featured,
            "uploaded_by": self.uploaded_by,
            "created_at": isoformat(self.created_at),
        }

    def __repr__(self): return f'<Asset {self.original_name}>'
