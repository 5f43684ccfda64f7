"""
HTTP API for the storefront: cart, checkout, direct purchase, wallet and coupons.

Every route runs its service call inside one TransactionManager.atomic_transaction.
Service exceptions are not caught here: the handlers registered in app.py turn
them into JSON errors with a status derived from the exception kind.
"""

import logging
import uuid
from datetime import datetime
from decimal import Decimal

from fastapi import APIRouter, Depends
from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import async_sessionmaker

import db
from services.cart import CartService
from services.checkout import CheckoutService
from services.coupon import CouponService
from services.library import LibraryService
from services.wallet import WalletService
from utils.transaction_manager import TransactionManager

logger = logging.getLogger(__name__)

api_router = APIRouter(tags=["storefront"])


def get_session_factory() -> async_sessionmaker:
    """Session factory used by the routes. Tests override it through app.dependency_overrides."""
    return db.session_maker


def generate_correlation_id() -> str:
    """Generate unique correlation ID for request tracing."""
    return f"{datetime.now().strftime('%Y%m%d-%H%M%S')}-{uuid.uuid4().hex[:8]}"


class AddToCartPayload(BaseModel):
    user_id: int = Field(..., gt=0)
    game_id: int = Field(..., gt=0)


class UpdateCartItemPayload(BaseModel):
    user_id: int = Field(..., gt=0)
    # Range is checked by CartService so the error kind stays consistent
    quantity: int


class ApplyCouponPayload(BaseModel):
    user_id: int = Field(..., gt=0)
    coupon_code: str = Field(..., max_length=64)


class CheckoutPayload(BaseModel):
    user_id: int = Field(..., gt=0)
    coupon_code: str | None = Field(None, max_length=64)


class PurchaseGamePayload(BaseModel):
    user_id: int = Field(..., gt=0)
    game_id: int = Field(..., gt=0)


class TopupPayload(BaseModel):
    amount: Decimal
    payment_method: str | None = Field(None, max_length=50)


class CreateCouponPayload(BaseModel):
    code: str = Field(..., max_length=64)
    discount_type: str
    discount_value: Decimal
    expiry_date: datetime | None = None
    max_uses: int | None = None


class CouponStatusPayload(BaseModel):
    is_active: bool


# Cart

@api_router.post("/cart", status_code=201)
async def add_to_cart(payload: AddToCartPayload,
                      session_factory: async_sessionmaker = Depends(get_session_factory)):
    async with TransactionManager.atomic_transaction(session_factory=session_factory,
                                                     operation="add_to_cart") as session:
        cart_item = await CartService.add_to_cart(payload.user_id, payload.game_id, session)
    return {"message": "Game added to cart", "cart_item": jsonable_encoder(cart_item)}


@api_router.get("/cart/{user_id}")
async def get_cart(user_id: int, session_factory: async_sessionmaker = Depends(get_session_factory)):
    async with TransactionManager.atomic_transaction(session_factory=session_factory,
                                                     operation="get_cart") as session:
        lines = await CartService.get_cart(user_id, session)
    return jsonable_encoder(lines)


@api_router.post("/cart/apply-coupon")
async def apply_coupon(payload: ApplyCouponPayload,
                       session_factory: async_sessionmaker = Depends(get_session_factory)):
    async with TransactionManager.atomic_transaction(session_factory=session_factory,
                                                     operation="apply_coupon") as session:
        quote = await CartService.apply_coupon(payload.user_id, payload.coupon_code, session)
    return {"message": "Coupon applied successfully", **jsonable_encoder(quote)}


@api_router.put("/cart/{cart_item_id}")
async def update_cart_item(cart_item_id: int, payload: UpdateCartItemPayload,
                           session_factory: async_sessionmaker = Depends(get_session_factory)):
    async with TransactionManager.atomic_transaction(session_factory=session_factory,
                                                     operation="update_cart_item") as session:
        action = await CartService.update_cart_item(payload.user_id, cart_item_id, payload.quantity, session)
    return {"message": f"Cart item {action.value}", "action": action.value}


@api_router.delete("/cart/{cart_item_id}")
async def remove_cart_item(cart_item_id: int, user_id: int,
                           session_factory: async_sessionmaker = Depends(get_session_factory)):
    async with TransactionManager.atomic_transaction(session_factory=session_factory,
                                                     operation="remove_cart_item") as session:
        await CartService.remove_cart_item(user_id, cart_item_id, session)
    return {"message": "Item removed from cart"}


# Checkout and purchases

@api_router.post("/checkout")
async def checkout(payload: CheckoutPayload,
                   session_factory: async_sessionmaker = Depends(get_session_factory)):
    correlation_id = generate_correlation_id()
    logger.info(f"[{correlation_id}] Checkout requested by user {payload.user_id}"
                f"{f' with coupon {payload.coupon_code}' if payload.coupon_code else ''}")
    async with TransactionManager.atomic_transaction(session_factory=session_factory,
                                                     operation="checkout") as session:
        receipt = await CheckoutService.checkout(payload.user_id, payload.coupon_code, session)
    logger.info(f"[{correlation_id}] ✅ Checkout committed for user {payload.user_id}")
    return {"message": "Checkout completed successfully", **jsonable_encoder(receipt)}


@api_router.post("/games/purchase")
async def purchase_game(payload: PurchaseGamePayload,
                        session_factory: async_sessionmaker = Depends(get_session_factory)):
    async with TransactionManager.atomic_transaction(session_factory=session_factory,
                                                     operation="purchase_game") as session:
        receipt = await CheckoutService.purchase_game(payload.user_id, payload.game_id, session)
    return {"message": "Game purchased successfully", **jsonable_encoder(receipt)}


@api_router.get("/games/purchased/{user_id}")
async def get_purchased_games(user_id: int, session_factory: async_sessionmaker = Depends(get_session_factory)):
    async with TransactionManager.atomic_transaction(session_factory=session_factory,
                                                     operation="get_purchased_games") as session:
        game_ids = await LibraryService.get_owned_game_ids(user_id, session)
    return {"game_ids": game_ids}


# Wallet

@api_router.get("/wallet/history/{user_id}")
async def get_topup_history(user_id: int, session_factory: async_sessionmaker = Depends(get_session_factory)):
    async with TransactionManager.atomic_transaction(session_factory=session_factory,
                                                     operation="get_topup_history") as session:
        history = await WalletService.get_topup_history(user_id, session)
    return jsonable_encoder(history)


@api_router.get("/wallet/purchase-history/{user_id}")
async def get_purchase_history(user_id: int, session_factory: async_sessionmaker = Depends(get_session_factory)):
    async with TransactionManager.atomic_transaction(session_factory=session_factory,
                                                     operation="get_purchase_history") as session:
        history = await LibraryService.get_purchase_history(user_id, session)
    return jsonable_encoder(history)


@api_router.get("/wallet/{user_id}")
async def get_wallet(user_id: int, session_factory: async_sessionmaker = Depends(get_session_factory)):
    async with TransactionManager.atomic_transaction(session_factory=session_factory,
                                                     operation="get_wallet") as session:
        wallet = await WalletService.get_wallet(user_id, session)
    return jsonable_encoder(wallet)


@api_router.put("/wallet/{user_id}")
async def top_up_wallet(user_id: int, payload: TopupPayload,
                        session_factory: async_sessionmaker = Depends(get_session_factory)):
    async with TransactionManager.atomic_transaction(session_factory=session_factory,
                                                     operation="top_up") as session:
        new_balance = await WalletService.top_up(user_id, payload.amount, session,
                                                 payment_method=payload.payment_method)
    return {"message": "Funds added successfully", "wallet": jsonable_encoder(new_balance)}


# Coupon administration

@api_router.post("/coupons", status_code=201)
async def create_coupon(payload: CreateCouponPayload,
                        session_factory: async_sessionmaker = Depends(get_session_factory)):
    async with TransactionManager.atomic_transaction(session_factory=session_factory,
                                                     operation="create_coupon") as session:
        coupon = await CouponService.create_coupon(payload.code,
                                                   payload.discount_type,
                                                   payload.discount_value,
                                                   session,
                                                   expiry_date=payload.expiry_date,
                                                   max_uses=payload.max_uses)
    return {"message": "Coupon created successfully", "coupon": jsonable_encoder(coupon)}


@api_router.get("/coupons")
async def list_coupons(session_factory: async_sessionmaker = Depends(get_session_factory)):
    async with TransactionManager.atomic_transaction(session_factory=session_factory,
                                                     operation="list_coupons") as session:
        coupons = await CouponService.list_coupons(session)
    return jsonable_encoder(coupons)


@api_router.put("/coupons/{coupon_id}/status")
async def set_coupon_status(coupon_id: int, payload: CouponStatusPayload,
                            session_factory: async_sessionmaker = Depends(get_session_factory)):
    async with TransactionManager.atomic_transaction(session_factory=session_factory,
                                                     operation="set_coupon_status") as session:
        await CouponService.set_coupon_active(coupon_id, payload.is_active, session)
    return {"message": f"Coupon {'activated' if payload.is_active else 'deactivated'} successfully"}
