from .product import ProductCreate, ProductRecord, ProductUpdate
from .category import CategoryCreate, CategoryRecord, CategoryUpdate, GradientConfigSchema
from .branch import (
    BranchCreate,
    BranchLocationInput,
    BranchLocationRecord,
    BranchRecord,
    BranchUpdate,
    ScheduleEntry,
    ScheduleRecord,
    SocialLinkCreate,
    SocialLinkUpdate,
    SocialRecord,
)
from .company import (
    CompanyCreate,
    CompanyRecord,
    CompanyUpdate,
    TagConfigurationSchema,
    UserTagCreate,
    UserTagRecord,
)

__all__ = [
    "ProductCreate",
    "ProductRecord",
    "ProductUpdate",
    "CategoryCreate",
    "CategoryRecord",
    "CategoryUpdate",
    "GradientConfigSchema",
    "BranchCreate",
    "BranchLocationInput",
    "BranchLocationRecord",
    "BranchRecord",
    "BranchUpdate",
    "ScheduleEntry",
    "ScheduleRecord",
    "SocialLinkCreate",
    "SocialLinkUpdate",
    "SocialRecord",
    "CompanyCreate",
    "CompanyRecord",
    "CompanyUpdate",
    "TagConfigurationSchema",
    "UserTagCreate",
    "UserTagRecord",
]
