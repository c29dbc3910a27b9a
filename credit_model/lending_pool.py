import logging
import typing
from dataclasses import dataclass, field
from decimal import Decimal

from credit_model import fixed_point
from credit_model.constants import DEFAULT_COLLATERAL_FACTOR, WAD
from credit_model.errors import (CollateralTransferFailed, DebtExceeded, InsufficientAllowance, InsufficientBalance,
                                 InsufficientLiquidity, InvalidAmount)
from credit_model.models import BorrowPosition, TokenInterface

logger = logging.getLogger(__name__)


@dataclass
class LendingPoolStorage:
    reserve_of_borrow_asset: int = 0
    positions: typing.Dict[str, BorrowPosition] = field(default_factory=dict)


class LendingPool:
    """
    Lends ``borrow_asset`` against ``collateral_asset``.

    The collateral requirement is the spot value of the loan, read from the
    oracle at call time, times ``collateral_factor``. It is computed as one
    exact fraction and rounded up once, so the pool never asks for less than
    the exact figure. Nothing re-checks a position after it is opened, and
    there is no liquidation.
    """

    def __init__(self, chain, oracle, collateral_asset: TokenInterface, borrow_asset: TokenInterface,
                 collateral_factor=DEFAULT_COLLATERAL_FACTOR):
        if collateral_asset.symbol == borrow_asset.symbol:
            raise ValueError('collateral and borrow asset must differ')
        self.collateral_factor_wad = fixed_point.to_wad(collateral_factor)
        if self.collateral_factor_wad <= WAD:
            raise ValueError('collateral_factor must be greater than 1, got {}'.format(collateral_factor))
        self.chain = chain
        self.oracle = oracle
        self.collateral_asset = collateral_asset
        self.borrow_asset = borrow_asset
        self.address = 'lending_pool:{}-{}'.format(borrow_asset.symbol, collateral_asset.symbol)
        self.storage = LendingPoolStorage()
        chain.register(self)

    def __repr__(self):
        return 'LendingPool {}: reserve {}, open positions {}'.format(
            self.address, self.storage.reserve_of_borrow_asset, len(self.storage.positions))

    @property
    def collateral_factor(self) -> Decimal:
        return fixed_point.from_wad(self.collateral_factor_wad)

    @property
    def reserve_of_borrow_asset(self) -> int:
        return self.storage.reserve_of_borrow_asset

    @property
    def positions(self) -> typing.Dict[str, BorrowPosition]:
        return {
            borrower: BorrowPosition(borrower, position.debt_amount, position.collateral_deposited)
            for borrower, position in self.storage.positions.items()
        }

    def position_of(self, borrower: str) -> BorrowPosition:
        position = self.storage.positions.get(borrower)
        if position is None:
            return BorrowPosition(borrower=borrower)
        return BorrowPosition(borrower, position.debt_amount, position.collateral_deposited)

    def total_debt(self) -> int:
        return sum(p.debt_amount for p in self.storage.positions.values())

    def total_collateral(self) -> int:
        return sum(p.collateral_deposited for p in self.storage.positions.values())

    def calculate_deposit_required(self, borrow_amount: int) -> int:
        fixed_point.ensure_uint(borrow_amount, 'borrow_amount')
        if borrow_amount == 0:
            return 0
        numerator, denominator = self.oracle.price_ratio(self.borrow_asset, self.collateral_asset)
        return fixed_point.mul_div_up(borrow_amount * numerator, self.collateral_factor_wad, denominator * WAD)

    def is_undercollateralized(self, borrower: str) -> bool:
        position = self.position_of(borrower)
        if not position.is_open:
            return False
        return position.collateral_deposited < self.calculate_deposit_required(position.debt_amount)

    def fund(self, provider: str, amount: int):
        fixed_point.ensure_uint(amount, 'amount')
        if amount == 0:
            raise InvalidAmount('amount must be positive')
        with self.chain.atomic('fund'):
            self.borrow_asset.transfer_from(self.address, provider, self.address, amount)
            self.storage.reserve_of_borrow_asset = fixed_point.add(self.storage.reserve_of_borrow_asset, amount)
            self.chain.emit('Funded', pool=self.address, provider=provider, amount=amount)

    def borrow(self, borrower: str, amount: int) -> int:
        """
        Pulls the collateral required for ``amount`` from ``borrower`` and
        lends ``amount`` of the borrow asset. Returns the collateral taken.
        """
        fixed_point.ensure_uint(amount, 'amount')
        if amount == 0:
            raise InvalidAmount('borrow amount must be positive')
        if self.storage.reserve_of_borrow_asset < amount:
            raise InsufficientLiquidity('pool holds {} {}, asked for {}'.format(
                self.storage.reserve_of_borrow_asset, self.borrow_asset.symbol, amount))
        required = self.calculate_deposit_required(amount)

        with self.chain.atomic('borrow'):
            try:
                self.collateral_asset.transfer_from(self.address, borrower, self.address, required)
            except (InsufficientBalance, InsufficientAllowance) as e:
                raise CollateralTransferFailed('{} cannot post {} {}: {}'.format(
                    borrower, required, self.collateral_asset.symbol, e.message)) from e

            position = self.storage.positions.setdefault(borrower, BorrowPosition(borrower=borrower))
            position.debt_amount = fixed_point.add(position.debt_amount, amount)
            position.collateral_deposited = fixed_point.add(position.collateral_deposited, required)
            self.storage.reserve_of_borrow_asset = fixed_point.sub(self.storage.reserve_of_borrow_asset, amount)

            self.borrow_asset.transfer(self.address, borrower, amount)
            self.chain.emit('Borrowed', pool=self.address, borrower=borrower, deposit_required=required,
                            borrow_amount=amount)

        logger.debug('%s borrow %s %s against %s %s', borrower, amount, self.borrow_asset.symbol, required,
                     self.collateral_asset.symbol)
        return required

    def repay(self, borrower: str, amount: int) -> int:
        """
        Takes back ``amount`` of debt and releases the matching share of the
        collateral. Repaying the whole debt releases all of it and closes the
        position. Returns the collateral released.
        """
        fixed_point.ensure_uint(amount, 'amount')
        if amount == 0:
            raise InvalidAmount('repay amount must be positive')
        position = self.storage.positions.get(borrower)
        debt = position.debt_amount if position is not None else 0
        if amount > debt:
            raise DebtExceeded('{} owes {} {}, tried to repay {}'.format(borrower, debt, self.borrow_asset.symbol, amount))

        if amount == debt:
            released = position.collateral_deposited
        else:
            released = fixed_point.mul_div(position.collateral_deposited, amount, debt)

        with self.chain.atomic('repay'):
            self.borrow_asset.transfer_from(self.address, borrower, self.address, amount)

            position = self.storage.positions[borrower]
            position.debt_amount = fixed_point.sub(position.debt_amount, amount)
            position.collateral_deposited = fixed_point.sub(position.collateral_deposited, released)
            if position.debt_amount == 0:
                del self.storage.positions[borrower]
            self.storage.reserve_of_borrow_asset = fixed_point.add(self.storage.reserve_of_borrow_asset, amount)

            self.collateral_asset.transfer(self.address, borrower, released)
            self.chain.emit('Repaid', pool=self.address, borrower=borrower, amount=amount, collateral_released=released)

        logger.debug('%s repay %s %s, released %s %s', borrower, amount, self.borrow_asset.symbol, released,
                     self.collateral_asset.symbol)
        return released
