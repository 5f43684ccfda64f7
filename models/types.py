from decimal import Decimal

from sqlalchemy.types import TypeDecorator, BigInteger

from utils.money import round_money, MAX_MONEY


class Money(TypeDecorator):
    """
    Monetary amount stored as integer cents, exposed as Decimal with two places.

    SQLite has no decimal type and would round-trip amounts through float;
    integer cents keep comparisons such as `wallet >= :amount` and in-SQL
    arithmetic such as `wallet - :amount` exact on every backend.
    """
    impl = BigInteger
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        amount = round_money(value)
        if abs(amount) > MAX_MONEY:
            raise ValueError(f"Monetary amount out of range: {amount}")
        return int(amount * 100)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return (Decimal(value) / 100).quantize(Decimal("0.01"))
