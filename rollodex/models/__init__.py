# rollodex/models/__init__.py
from .base import db
from .enums import (
    CompanyTypeEnum, UserRoleEnum, RelationshipStatusEnum,
    RelationshipPriorityEnum, AssetPermissionEnum,
)
from .user_models import User, NotificationPreferences
from .brand_models import Brand, Retailer, Product, COMPLETION_TRACKED_FIELDS, completion_score
from .relationship_models import Relationship
from .asset_models import Asset
from .utility_models import ActivityLog
