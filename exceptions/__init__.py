"""
Custom exceptions for the storefront.

This module provides a hierarchy of custom exceptions for consistent error handling
throughout the application. Every exception carries a `kind` (see enums/error_kind.py)
that callers use to pick a status code.

Exception Hierarchy:
--------------------
StorefrontException (base)
├── ValidationException                      [validation]
│   └── InvalidCartQuantityException         [validation]
├── StorageException                         [storage]
├── UserException
│   ├── UserNotFoundException                [not_found]
│   └── InsufficientBalanceException         [business_rule]
├── GameException
│   ├── GameNotFoundException                [not_found]
│   └── GameAlreadyOwnedException            [conflict]
├── CartException
│   ├── EmptyCartException                   [business_rule]
│   ├── CartItemNotFoundException            [not_found]
│   └── GameAlreadyInCartException           [conflict]
└── CouponException
    ├── CouponNotFoundException              [not_found]
    ├── CouponExpiredException               [business_rule]
    ├── CouponExhaustedException             [business_rule]
    ├── CouponAlreadyUsedException           [conflict]
    └── CouponAlreadyExistsException         [conflict]

Usage:
------
Services raise specific exceptions:
    raise GameNotFoundException(game_id=42)

The transaction manager rolls back on any of them, and the HTTP layer
converts them to a JSON error:
    async with TransactionManager.atomic_transaction() as session:
        await CheckoutService.checkout(user_id, coupon_code, session)
"""

from .base import StorefrontException
from .validation import ValidationException
from .storage import StorageException
from .user import UserException, UserNotFoundException, InsufficientBalanceException
from .game import GameException, GameNotFoundException, GameAlreadyOwnedException
from .cart import (
    CartException,
    EmptyCartException,
    CartItemNotFoundException,
    GameAlreadyInCartException,
    InvalidCartQuantityException,
)
from .coupon import (
    CouponException,
    CouponNotFoundException,
    CouponExpiredException,
    CouponExhaustedException,
    CouponAlreadyUsedException,
    CouponAlreadyExistsException,
)

__all__ = [
    # Base
    'StorefrontException',
    'ValidationException',
    'StorageException',

    # User
    'UserException',
    'UserNotFoundException',
    'InsufficientBalanceException',

    # Game
    'GameException',
    'GameNotFoundException',
    'GameAlreadyOwnedException',

    # Cart
    'CartException',
    'EmptyCartException',
    'CartItemNotFoundException',
    'GameAlreadyInCartException',
    'InvalidCartQuantityException',

    # Coupon
    'CouponException',
    'CouponNotFoundException',
    'CouponExpiredException',
    'CouponExhaustedException',
    'CouponAlreadyUsedException',
    'CouponAlreadyExistsException',
]
