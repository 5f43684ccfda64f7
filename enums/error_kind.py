from enum import Enum


class ErrorKind(str, Enum):
    VALIDATION = "validation"           # Malformed or missing input, nothing was touched
    CONFLICT = "conflict"               # State already satisfies the opposite of the request
    NOT_FOUND = "not_found"             # Unknown user, game, coupon or cart item
    BUSINESS_RULE = "business_rule"     # Insufficient funds, expired/exhausted coupon, empty cart
    STORAGE = "storage"                 # Transaction or connection failure
