from decimal import Decimal, ROUND_HALF_UP, InvalidOperation

CENT = Decimal("0.01")


def to_decimal(value) -> Decimal:
    """
    Convert int/float/str/Decimal to Decimal without float artifacts.

    Floats go through str() so 0.1 becomes Decimal("0.1"), not
    Decimal("0.1000000000000000055511151231257827...").

    Raises:
        ValueError: If value is not a finite number
    """
    if isinstance(value, bool):
        raise ValueError(f"Not a monetary value: {value!r}")
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value))
        except (InvalidOperation, TypeError):
            raise ValueError(f"Not a monetary value: {value!r}")
    if not result.is_finite():
        raise ValueError(f"Not a monetary value: {value!r}")
    return result


def round_money(value) -> Decimal:
    """Round to cents, half up (33.335 -> 33.34)."""
    try:
        return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise ValueError(f"Monetary amount out of range: {value!r}")


# Largest amount whose cents fit a signed 64-bit integer column
MAX_MONEY = Decimal(2 ** 63 - 1).scaleb(-2)


def has_sub_cent_digits(value: Decimal) -> bool:
    return value != value.quantize(CENT)
