from enum import Enum


class CartItemAction(str, Enum):
    REMOVED = "removed"
    UPDATED = "updated"
