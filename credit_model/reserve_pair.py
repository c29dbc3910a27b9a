import logging
import typing
from dataclasses import dataclass, field

from credit_model import fixed_point
from credit_model.constant_product_math import ConstantProductMath
from credit_model.constants import MINIMUM_LIQUIDITY, SWAP_FEE_DENOMINATOR, SWAP_FEE_NUMERATOR, ZERO_ADDRESS
from credit_model.errors import (InsufficientLiquidity, InsufficientLiquidityBurned, InsufficientLiquidityMinted,
                                 InsufficientShares, InvalidAmount, InvariantViolation, SlippageExceeded,
                                 UnknownAsset)
from credit_model.models import LiquidityPosition, TokenInterface

logger = logging.getLogger(__name__)


@dataclass
class PairStorage:
    reserve_a: int = 0
    reserve_b: int = 0
    total_shares: int = 0
    shares: typing.Dict[str, int] = field(default_factory=dict)


@dataclass
class AddLiquidityResult:
    amount_a: int
    amount_b: int
    shares: int


@dataclass
class SwapResult:
    amount_in: int
    amount_out: int
    reserve_in_after: int
    reserve_out_after: int


class ReservePair(ConstantProductMath):
    """
    Two-asset constant-product pool in the style of a Uniswap v2 pair.

    Liquidity shares are tracked inside the pair. Assets are pulled from
    callers with ``transfer_from``, so callers approve ``pair.address`` first.
    On a non-empty pool ``add_liquidity`` only takes the ratio-preserving part
    of the desired amounts; the excess is never pulled from the provider.
    """

    def __init__(self, chain, token_a: TokenInterface, token_b: TokenInterface):
        if token_a.symbol == token_b.symbol:
            raise ValueError('a pair needs two different assets, got {} twice'.format(token_a.symbol))
        self.chain = chain
        self.token_a = token_a
        self.token_b = token_b
        self.address = 'pair:{}-{}'.format(token_a.symbol, token_b.symbol)
        self.storage = PairStorage()
        chain.register(self)

    def __repr__(self):
        return 'ReservePair {}: {} {} / {} {}, shares: {}'.format(
            self.address, self.storage.reserve_a, self.token_a.symbol, self.storage.reserve_b, self.token_b.symbol,
            self.storage.total_shares)

    def _is_a(self, asset) -> bool:
        symbol = getattr(asset, 'symbol', asset)
        if symbol == self.token_a.symbol:
            return True
        if symbol == self.token_b.symbol:
            return False
        raise UnknownAsset('{} is not traded in {}'.format(symbol, self.address))

    def token(self, asset):
        return self.token_a if self._is_a(asset) else self.token_b

    def other_token(self, asset):
        return self.token_b if self._is_a(asset) else self.token_a

    def get_reserves(self) -> (int, int):
        return self.storage.reserve_a, self.storage.reserve_b

    def reserve_of(self, asset) -> int:
        return self.storage.reserve_a if self._is_a(asset) else self.storage.reserve_b

    def invariant(self) -> int:
        return self.storage.reserve_a * self.storage.reserve_b

    def get_total_shares(self) -> int:
        return self.storage.total_shares

    def shares_of(self, provider: str) -> int:
        return self.storage.shares.get(provider, 0)

    def position_of(self, provider: str) -> LiquidityPosition:
        return LiquidityPosition(provider=provider, shares=self.shares_of(provider))

    def _mint_shares(self, to: str, amount: int):
        self.storage.total_shares = fixed_point.add(self.storage.total_shares, amount)
        self.storage.shares[to] = self.shares_of(to) + amount

    def _burn_shares(self, owner: str, amount: int):
        self.storage.shares[owner] = fixed_point.sub(self.shares_of(owner), amount)
        if self.storage.shares[owner] == 0:
            del self.storage.shares[owner]
        self.storage.total_shares = fixed_point.sub(self.storage.total_shares, amount)

    def _update(self, reserve_a: int, reserve_b: int):
        self.storage.reserve_a = fixed_point.ensure_uint(reserve_a, 'reserve_a')
        self.storage.reserve_b = fixed_point.ensure_uint(reserve_b, 'reserve_b')
        self.chain.emit('Sync', pair=self.address, reserve_a=reserve_a, reserve_b=reserve_b)

    def add_liquidity(self, provider: str, amount_a: int, amount_b: int, amount_a_min: int = 0,
                      amount_b_min: int = 0) -> AddLiquidityResult:
        fixed_point.ensure_uint(amount_a, 'amount_a')
        fixed_point.ensure_uint(amount_b, 'amount_b')
        if amount_a == 0 or amount_b == 0:
            raise InvalidAmount('both assets must be deposited, got {} and {}'.format(amount_a, amount_b))

        with self.chain.atomic('add_liquidity'):
            reserve_a, reserve_b = self.get_reserves()
            total_shares = self.storage.total_shares
            amount_a, amount_b = self.calc_optimal_deposit(amount_a, amount_b, reserve_a, reserve_b)
            if amount_a < amount_a_min or amount_b < amount_b_min:
                raise SlippageExceeded('ERR_INSUFFICIENT_{}_AMOUNT'.format(
                    'A' if amount_a < amount_a_min else 'B'))

            shares = self.calc_shares_given_deposit(amount_a, amount_b, reserve_a, reserve_b, total_shares)
            if shares <= 0:
                raise InsufficientLiquidityMinted()

            self.token_a.transfer_from(self.address, provider, self.address, amount_a)
            self.token_b.transfer_from(self.address, provider, self.address, amount_b)
            if total_shares == 0:
                self._mint_shares(ZERO_ADDRESS, MINIMUM_LIQUIDITY)
            self._mint_shares(provider, shares)
            self._update(reserve_a + amount_a, reserve_b + amount_b)
            self.chain.emit('Mint', pair=self.address, provider=provider, amount_a=amount_a, amount_b=amount_b, shares=shares)

        logger.debug('%s mint %s shares to %s for %s/%s', self.address, shares, provider, amount_a, amount_b)
        return AddLiquidityResult(amount_a=amount_a, amount_b=amount_b, shares=shares)

    def remove_liquidity(self, provider: str, shares: int, amount_a_min: int = 0, amount_b_min: int = 0) -> (int, int):
        fixed_point.ensure_uint(shares, 'shares')
        if shares == 0:
            raise InvalidAmount('shares must be positive')
        if shares > self.shares_of(provider):
            raise InsufficientShares('{} holds {} shares, tried to burn {}'.format(provider, self.shares_of(provider), shares))

        with self.chain.atomic('remove_liquidity'):
            reserve_a, reserve_b = self.get_reserves()
            amount_a, amount_b = self.calc_amounts_given_shares(shares, reserve_a, reserve_b, self.storage.total_shares)
            if amount_a == 0 or amount_b == 0:
                raise InsufficientLiquidityBurned()
            if amount_a < amount_a_min or amount_b < amount_b_min:
                raise SlippageExceeded('ERR_INSUFFICIENT_{}_AMOUNT'.format(
                    'A' if amount_a < amount_a_min else 'B'))

            self._burn_shares(provider, shares)
            self._update(reserve_a - amount_a, reserve_b - amount_b)
            self.token_a.transfer(self.address, provider, amount_a)
            self.token_b.transfer(self.address, provider, amount_b)
            self.chain.emit('Burn', pair=self.address, provider=provider, amount_a=amount_a, amount_b=amount_b, shares=shares)

        logger.debug('%s burn %s shares of %s for %s/%s', self.address, shares, provider, amount_a, amount_b)
        return amount_a, amount_b

    def quote_swap(self, amount_in: int, asset_in) -> int:
        return self.get_amount_out(amount_in, self.reserve_of(asset_in), self.reserve_of(self.other_token(asset_in)))

    def quote_swap_exact_out(self, amount_out: int, asset_out) -> int:
        return self.get_amount_in(amount_out, self.reserve_of(self.other_token(asset_out)), self.reserve_of(asset_out))

    def swap(self, sender: str, amount_in: int, asset_in, min_amount_out: int = 0, to: str = None) -> int:
        return self._swap(sender, amount_in, asset_in, to or sender, min_amount_out=min_amount_out).amount_out

    def swap_exact_out(self, sender: str, amount_out: int, asset_out, max_amount_in: int = None, to: str = None) -> int:
        fixed_point.ensure_uint(amount_out, 'amount_out')
        token_in = self.other_token(asset_out)
        amount_in = self.quote_swap_exact_out(amount_out, asset_out)
        if max_amount_in is not None and amount_in > max_amount_in:
            raise SlippageExceeded('ERR_EXCESSIVE_INPUT_AMOUNT')
        return self._swap(sender, amount_in, token_in, to or sender, amount_out=amount_out).amount_in

    def _swap(self, sender: str, amount_in: int, asset_in, to: str, amount_out: int = None,
              min_amount_out: int = 0) -> SwapResult:
        fixed_point.ensure_uint(amount_in, 'amount_in')
        if amount_in == 0:
            raise InvalidAmount('ERR_INSUFFICIENT_INPUT_AMOUNT')
        token_in = self.token(asset_in)
        token_out = self.other_token(asset_in)
        reserve_in = self.reserve_of(token_in)
        reserve_out = self.reserve_of(token_out)
        if reserve_in == 0 or reserve_out == 0:
            raise InsufficientLiquidity('{} has no liquidity'.format(self.address))

        if amount_out is None:
            amount_out, new_reserve_in, new_reserve_out = self.calc_swap(amount_in, reserve_in, reserve_out)
        else:
            if amount_out >= reserve_out:
                raise InsufficientLiquidity()
            new_reserve_in, new_reserve_out = reserve_in + amount_in, reserve_out - amount_out
        if amount_out < min_amount_out:
            raise SlippageExceeded('ERR_INSUFFICIENT_OUTPUT_AMOUNT: {} < {}'.format(amount_out, min_amount_out))
        # the fee stays in the pool, so k must hold on the fee-adjusted input balance
        adjusted_in = new_reserve_in * SWAP_FEE_DENOMINATOR - amount_in * (SWAP_FEE_DENOMINATOR - SWAP_FEE_NUMERATOR)
        if adjusted_in * new_reserve_out * SWAP_FEE_DENOMINATOR < reserve_in * reserve_out * SWAP_FEE_DENOMINATOR ** 2:
            raise InvariantViolation()

        with self.chain.atomic('swap'):
            token_in.transfer_from(self.address, sender, self.address, amount_in)
            if token_in is self.token_a:
                self._update(new_reserve_in, new_reserve_out)
            else:
                self._update(new_reserve_out, new_reserve_in)
            token_out.transfer(self.address, to, amount_out)
            self.chain.emit('Swap', pair=self.address, sender=sender, to=to, token_in=token_in.symbol,
                            amount_in=amount_in, amount_out=amount_out)

        logger.debug('%s swap %s %s -> %s %s', self.address, amount_in, token_in.symbol, amount_out, token_out.symbol)
        return SwapResult(amount_in, amount_out, new_reserve_in, new_reserve_out)
