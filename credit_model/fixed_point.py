"""
Scaled-integer arithmetic.

Amounts are held as ints in the base units of their asset
(``amount * 10 ** decimals``) and every stored value must fit in a uint256.
Ratios such as prices and the collateral factor are WAD-scaled (1e18).
Decimals only appear at the edges: parameters, action files and reports.
"""
import math
from decimal import Decimal, ROUND_DOWN

from credit_model.constants import MAX_UINT256
from credit_model.errors import ArithmeticOverflow, ArithmeticUnderflow, InvalidAmount


def ensure_uint(value, name: str = 'value') -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidAmount('{name} must be an int, got {value_type}'.format(name=name, value_type=type(value)))
    if value < 0:
        raise InvalidAmount('{name} must not be negative, got {value}'.format(name=name, value=value))
    if value > MAX_UINT256:
        raise ArithmeticOverflow('{name} does not fit in uint256'.format(name=name))
    return value


def _checked(result: int) -> int:
    if result > MAX_UINT256:
        raise ArithmeticOverflow()
    return result


def add(a: int, b: int) -> int:
    return _checked(a + b)


def sub(a: int, b: int) -> int:
    if b > a:
        raise ArithmeticUnderflow('{a} - {b} is negative'.format(a=a, b=b))
    return a - b


def mul(a: int, b: int) -> int:
    return _checked(a * b)


def div(a: int, b: int) -> int:
    if b == 0:
        raise ArithmeticOverflow('division by zero')
    return a // b


def div_up(a: int, b: int) -> int:
    if b == 0:
        raise ArithmeticOverflow('division by zero')
    return -(-a // b)


def mul_div(a: int, b: int, denominator: int) -> int:
    # full precision intermediate, like FullMath.mulDiv; only the result must fit
    return _checked(div(a * b, denominator))


def mul_div_up(a: int, b: int, denominator: int) -> int:
    return _checked(div_up(a * b, denominator))


def sqrt(value: int) -> int:
    return math.isqrt(value)


def to_base_units(amount, decimals: int) -> int:
    """
    Converts a human amount (Decimal, int or numeric string) into base units,
    truncating anything below one base unit.
    """
    amount = Decimal(amount)
    if amount < 0:
        raise InvalidAmount('amount must not be negative, got {}'.format(amount))
    scaled = amount.scaleb(decimals).to_integral_value(rounding=ROUND_DOWN)
    return ensure_uint(int(scaled), 'amount')


def from_base_units(amount: int, decimals: int) -> Decimal:
    return Decimal(amount).scaleb(-decimals)


def to_wad(ratio) -> int:
    return to_base_units(ratio, 18)


def from_wad(value: int) -> Decimal:
    return from_base_units(value, 18)
