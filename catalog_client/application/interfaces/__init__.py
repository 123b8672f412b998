from .branch_location_gateway import BranchLocationGateway
from .collection_gateway import CollectionGateway
from .sibling_propagation_gateway import SiblingPropagationGateway

__all__ = [
    "BranchLocationGateway",
    "CollectionGateway",
    "SiblingPropagationGateway",
]
