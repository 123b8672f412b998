from . import derived_values
from .collection_definitions import (
    BRANCHES,
    CATEGORIES,
    COMPANIES,
    PRODUCTS,
    SCHEDULES,
    SOCIALS,
    USER_TAGS,
    CollectionDefinition,
)
from .collection_cache import ParentScopedCache
from .collection_service import CollectionService
from .branch_location_service import BranchLocationService
from .notification_center import NotificationCenter
from .reorder_service import ReorderService, ReorderSession
from .sibling_propagation_service import SiblingPropagationService

__all__ = [
    "derived_values",
    "BRANCHES",
    "CATEGORIES",
    "COMPANIES",
    "PRODUCTS",
    "SCHEDULES",
    "SOCIALS",
    "USER_TAGS",
    "CollectionDefinition",
    "ParentScopedCache",
    "CollectionService",
    "BranchLocationService",
    "NotificationCenter",
    "ReorderService",
    "ReorderSession",
    "SiblingPropagationService",
]
