# rollodex/models/user_models.py
import bcrypt

from .base import db, TimestampMixin, enum_values, isoformat
from .enums import UserRoleEnum, CompanyTypeEnum


class User(TimestampMixin, db.Model):
    """
    Account of a person acting for a retailer or a brand.
    Users are never hard-deleted; `is_active` is the only switch.
    """
    __tablename__ = 'users'
    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    first_name = db.Column(db.String(100), nullable=False)
    last_name = db.Column(db.String(100), nullable=False)
    role = db.Column(db.Enum(UserRoleEnum, name='user_role', values_callable=enum_values),
                     nullable=False, default=UserRoleEnum.USER, index=True)
    company_name = db.Column(db.String(255), nullable=True)
    company_type = db.Column(db.Enum(CompanyTypeEnum, name='company_type', values_callable=enum_values),
                             nullable=True)
    phone = db.Column(db.String(50), nullable=True)
    title = db.Column(db.String(100), nullable=True)
    is_active = db.Column(db.Boolean, default=True, nullable=False, index=True)
    email_verified = db.Column(db.Boolean, default=False, nullable=False)
    last_login = db.Column(db.DateTime, nullable=True)

    brands = db.relationship('Brand', back_populates='owner', lazy='dynamic')
    retailer_profile = db.relationship('Retailer', back_populates='owner', uselist=False)
    notification_preferences = db.relationship('NotificationPreferences', back_populates='user',
                                               uselist=False, cascade="all, delete-orphan")

    def set_password(self, password, rounds=12):
        self.password_hash = bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt(rounds=rounds)).decode('utf-8')

    def check_password(self, password):
        if not self.password_hash:
            return False
        return bcrypt.checkpw(password.encode('utf-8'), self.password_hash.encode('utf-8'))

    @property
    def is_retailer(self):
        return self.role.is_retailer

    @property
    def is_brand(self):
        return self.role.is_brand

    def to_dict(self):
        """Public view of the account; the password hash never leaves the model."""
        return {
            "id": self.id,
            "email": self.email,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "role": self.role.value if self.role else None,
            "companyName": self.company_name,
            "companyType": self.company_type.value if self.company_type else None,
            "phone": self.phone,
            "title": self.title,
            "isActive": self.is_active,
            "emailVerified": self.email_verified,
            "lastLogin": isoformat(self.last_login),
            "createdAt": isoformat(self.created_at),
        }

    def __repr__(self):
        return f'<User {self.email}>'


class NotificationPreferences(db.Model):
    __tablename__ = 'notification_preferences'
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, unique=True)
    email_notifications = db.Column(db.Boolean, default=True, nullable=False)
    relationship_updates = db.Column(db.Boolean, default=True, nullable=False)
    asset_updates = db.Column(db.Boolean, default=True, nullable=False)
    marketing_emails = db.Column(db.Boolean, default=False, nullable=False)

    user = db.relationship('User', back_populates='notification_preferences')
