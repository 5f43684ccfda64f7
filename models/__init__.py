"""
Models Package

This file ensures all SQLAlchemy models are imported and registered,
which is required for relationships and foreign keys to resolve.
"""

from models.base import Base
from models.user import User
from models.game import Game
from models.cartItem import CartItem
from models.coupon import Coupon
from models.coupon_usage import CouponUsage
from models.game_purchase import GamePurchase
from models.topup import TopupHistory

__all__ = [
    'Base',
    'User',
    'Game',
    'CartItem',
    'Coupon',
    'CouponUsage',
    'GamePurchase',
    'TopupHistory',
]
