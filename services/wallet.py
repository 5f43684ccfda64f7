import logging
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

import config
from enums.topup_status import TopupStatus
from exceptions.user import UserNotFoundException
from exceptions.validation import ValidationException
from models.topup import TopupHistoryDTO
from models.user import WalletDTO
from repositories.topup import TopupRepository
from repositories.user import UserRepository
from utils.money import to_decimal, round_money, MAX_MONEY

logger = logging.getLogger(__name__)


class WalletService:

    @staticmethod
    async def get_wallet(user_id: int, session: AsyncSession | Session) -> WalletDTO:
        user = await UserRepository.get_by_id(user_id, session)
        if user is None:
            raise UserNotFoundException(user_id)
        return WalletDTO(user_id=user.id, name=user.name, wallet=user.wallet)

    @staticmethod
    async def top_up(user_id: int, amount, session: AsyncSession | Session,
                     payment_method: str | None = None) -> Decimal:
        """
        Credits the wallet and records the top-up.

        Returns:
            The new wallet balance

        Raises:
            ValidationException: If amount is not a positive number, or the
                balance would exceed MAX_MONEY
            UserNotFoundException: If the user does not exist
        """
        try:
            amount = to_decimal(amount)
        except ValueError:
            raise ValidationException('amount', "must be a number")
        if amount > MAX_MONEY:
            raise ValidationException('amount', f"must not exceed {MAX_MONEY}")
        amount = round_money(amount)
        if amount <= 0:
            raise ValidationException('amount', "must be greater than 0")

        balance = await UserRepository.get_wallet(user_id, session)
        if balance is None:
            raise UserNotFoundException(user_id)
        if balance + amount > MAX_MONEY:
            raise ValidationException('amount', f"would raise the balance above {MAX_MONEY}")

        changed = await UserRepository.adjust_wallet(user_id, amount, session)
        if changed == 0:
            raise UserNotFoundException(user_id)

        await TopupRepository.create(TopupHistoryDTO(user_id=user_id,
                                                     amount=amount,
                                                     payment_method=payment_method or config.DEFAULT_PAYMENT_METHOD,
                                                     status=TopupStatus.COMPLETED.value), session)

        new_balance = await UserRepository.get_wallet(user_id, session)
        logger.info(f"💰 Wallet of user {user_id} topped up by {amount}, new balance {new_balance}")
        return new_balance

    @staticmethod
    async def get_topup_history(user_id: int, session: AsyncSession | Session) -> list[TopupHistoryDTO]:
        return await TopupRepository.get_by_user_id(user_id, session)
