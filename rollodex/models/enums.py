# rollodex/models/enums.py
# Contains all Enum definitions for the models.
import enum


class CompanyTypeEnum(enum.Enum):
    RETAILER = "retailer"
    BRAND = "brand"


class UserRoleEnum(enum.Enum):
    RETAILER_ADMIN = "retailer_admin"
    RETAILER_BUYER = "retailer_buyer"
    BRAND_ADMIN = "brand_admin"
    USER = "user"

    @property
    def company_type(self):
        """Which side of the marketplace a role acts for; None for plain users."""
        return ROLE_COMPANY_TYPES[self]

    @property
    def is_retailer(self):
        return self.company_type is CompanyTypeEnum.RETAILER

    @property
    def is_brand(self):
        return self.company_type is CompanyTypeEnum.BRAND

    @classmethod
    def for_company_type(cls, company_type):
        return DEFAULT_ROLE_BY_COMPANY_TYPE[company_type]


ROLE_COMPANY_TYPES = {
    UserRoleEnum.RETAILER_ADMIN: CompanyTypeEnum.RETAILER,
    UserRoleEnum.RETAILER_BUYER: CompanyTypeEnum.RETAILER,
    UserRoleEnum.BRAND_ADMIN: CompanyTypeEnum.BRAND,
    UserRoleEnum.USER: None,
}

DEFAULT_ROLE_BY_COMPANY_TYPE = {
    CompanyTypeEnum.RETAILER: UserRoleEnum.RETAILER_ADMIN,
    CompanyTypeEnum.BRAND: UserRoleEnum.BRAND_ADMIN,
}


class RelationshipStatusEnum(enum.Enum):
    PROSPECTIVE = "prospective"
    PENDING = "pending"
    ACTIVE = "active"
    INACTIVE = "inactive"


class RelationshipPriorityEnum(enum.Enum):
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"


PRIORITY_RANKS = {
    RelationshipPriorityEnum.LOW: 1,
    RelationshipPriorityEnum.NORMAL: 2,
    RelationshipPriorityEnum.HIGH: 3,
}


class AssetPermissionEnum(enum.Enum):
    PUBLIC = "public"
    PARTNERS_ONLY = "partners_only"
    PRIVATE = "private"
