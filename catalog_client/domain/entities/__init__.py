from .child_record import ChildRecord, ChildUpdate, OrderUpdate
from .product import Product, StockStatus
from .category import BackgroundMode, Category, GradientConfig, GradientType
from .branch import Branch, BranchAspect, BranchLocation, BranchSchedule, BranchSocial, DayOfWeek
from .company import Company, TagSize, UserTag
from .operation import Notification, NotificationLevel, OperationResult, ReorderState

__all__ = [
    "ChildRecord",
    "ChildUpdate",
    "OrderUpdate",
    "Product",
    "StockStatus",
    "BackgroundMode",
    "Category",
    "GradientConfig",
    "GradientType",
    "Branch",
    "BranchAspect",
    "BranchLocation",
    "BranchSchedule",
    "BranchSocial",
    "DayOfWeek",
    "Company",
    "TagSize",
    "UserTag",
    "Notification",
    "NotificationLevel",
    "OperationResult",
    "ReorderState",
]
