"""Cart services built on the persistence gateway."""

from .cart_service import CartStore
from .saved_cart_service import SavedCartManager
from .saved_items_service import SavedForLaterManager

__all__ = ["CartStore", "SavedCartManager", "SavedForLaterManager"]
