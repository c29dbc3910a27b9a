from decimal import Decimal

from credit_model import fixed_point
from credit_model.constant_product_math import ConstantProductMath
from credit_model.constants import WAD
from credit_model.errors import InsufficientLiquidity


class SpotPriceOracle:
    """
    Reads the exchange rate straight off a pair's current reserves.

    There is no averaging and no staleness check: whatever the reserves are
    at call time is the price, including reserves moved earlier in the same
    atomic unit. Holds nothing but a reference to the pair.
    """

    def __init__(self, pair):
        self.pair = pair

    def _reserves(self, of_asset, in_terms_of) -> (int, int):
        reserve_of = self.pair.reserve_of(of_asset)
        reserve_in_terms_of = self.pair.reserve_of(in_terms_of)
        if reserve_of == 0 or reserve_in_terms_of == 0:
            raise InsufficientLiquidity('{} has no liquidity to price from'.format(self.pair.address))
        return reserve_of, reserve_in_terms_of

    def price_ratio(self, of_asset, in_terms_of) -> (int, int):
        """
        Exact price of ``of_asset`` in ``in_terms_of`` as a base-unit fraction
        ``(numerator, denominator)``, so callers can round once at the end.
        """
        reserve_of, reserve_in_terms_of = self._reserves(of_asset, in_terms_of)
        return reserve_in_terms_of, reserve_of

    def spot_price(self, of_asset, in_terms_of) -> int:
        """
        Price of one whole unit of ``of_asset`` in whole units of
        ``in_terms_of``, WAD-scaled and floored.
        """
        reserve_of, reserve_in_terms_of = self._reserves(of_asset, in_terms_of)
        token_of = self.pair.token(of_asset)
        token_in_terms_of = self.pair.token(in_terms_of)
        numerator = reserve_in_terms_of * 10 ** token_of.decimals
        denominator = reserve_of * 10 ** token_in_terms_of.decimals
        return fixed_point.mul_div(numerator, WAD, denominator)

    def spot_price_decimal(self, of_asset, in_terms_of) -> Decimal:
        return fixed_point.from_wad(self.spot_price(of_asset, in_terms_of))

    def quote(self, amount: int, of_asset, in_terms_of) -> int:
        """``amount`` base units of ``of_asset`` valued in base units of ``in_terms_of``, floored."""
        reserve_of, reserve_in_terms_of = self._reserves(of_asset, in_terms_of)
        return ConstantProductMath.quote(amount, reserve_of, reserve_in_terms_of)
