import logging
import typing
from dataclasses import dataclass, field
from decimal import Decimal

from credit_model import fixed_point
from credit_model.constants import DEFAULT_DECIMALS, MAX_UINT256
from credit_model.errors import InsufficientAllowance, InsufficientBalance

logger = logging.getLogger(__name__)


class TokenInterface(typing.Protocol):
    """
    The only token operations the pair and the lending pool rely on. Amounts
    are exact base-unit ints and every call is all-or-nothing.
    """

    symbol: str
    decimals: int

    def transfer(self, sender: str, to: str, amount: int) -> bool: ...

    def transfer_from(self, spender: str, owner: str, to: str, amount: int) -> bool: ...

    def approve(self, owner: str, spender: str, amount: int) -> bool: ...

    def balance_of(self, account: str) -> int: ...


@dataclass
class TokenStorage:
    balances: typing.Dict[str, int] = field(default_factory=dict)
    allowances: typing.Dict[str, typing.Dict[str, int]] = field(default_factory=dict)
    total_supply: int = 0


@dataclass
class LiquidityPosition:
    provider: str
    shares: int


@dataclass
class BorrowPosition:
    borrower: str
    debt_amount: int = 0
    collateral_deposited: int = 0

    @property
    def is_open(self) -> bool:
        return self.debt_amount > 0


class ERC20Token:
    """
    Fungible asset ledger. ``decimals`` is the scale factor of the asset:
    one whole unit is ``10 ** decimals`` base units.
    """

    def __init__(self, chain, symbol: str, decimals: int = DEFAULT_DECIMALS):
        self.chain = chain
        self.symbol = symbol
        self.decimals = decimals
        self.address = 'token:{}'.format(symbol)
        self.storage = TokenStorage()
        chain.register(self)

    def __repr__(self):
        return 'ERC20Token {} (decimals: {}, total_supply: {})'.format(self.symbol, self.decimals, self.storage.total_supply)

    def to_base_units(self, amount) -> int:
        return fixed_point.to_base_units(amount, self.decimals)

    def from_base_units(self, amount: int) -> Decimal:
        return fixed_point.from_base_units(amount, self.decimals)

    def total_supply(self) -> int:
        return self.storage.total_supply

    def balance_of(self, account: str) -> int:
        return self.storage.balances.get(account, 0)

    def allowance(self, owner: str, spender: str) -> int:
        return self.storage.allowances.get(owner, {}).get(spender, 0)

    def mint(self, to: str, amount: int):
        fixed_point.ensure_uint(amount, 'amount')
        self.storage.total_supply = fixed_point.add(self.storage.total_supply, amount)
        self.storage.balances[to] = self.balance_of(to) + amount
        self.chain.emit('Transfer', token=self.symbol, sender=None, to=to, amount=amount)

    def approve(self, owner: str, spender: str, amount: int) -> bool:
        fixed_point.ensure_uint(amount, 'amount')
        self.storage.allowances.setdefault(owner, {})[spender] = amount
        self.chain.emit('Approval', token=self.symbol, owner=owner, spender=spender, amount=amount)
        return True

    def transfer(self, sender: str, to: str, amount: int) -> bool:
        fixed_point.ensure_uint(amount, 'amount')
        self._move(sender, to, amount)
        return True

    def transfer_from(self, spender: str, owner: str, to: str, amount: int) -> bool:
        fixed_point.ensure_uint(amount, 'amount')
        allowed = self.allowance(owner, spender)
        if allowed < amount:
            raise InsufficientAllowance('{} may spend {} {} of {}, needs {}'.format(spender, allowed, self.symbol, owner, amount))
        if self.balance_of(owner) < amount:
            raise InsufficientBalance('{} holds {} {}, needs {}'.format(owner, self.balance_of(owner), self.symbol, amount))
        if allowed != MAX_UINT256:
            self.storage.allowances.setdefault(owner, {})[spender] = allowed - amount
        self._move(owner, to, amount)
        return True

    def _move(self, sender: str, to: str, amount: int):
        balance = self.balance_of(sender)
        if balance < amount:
            raise InsufficientBalance('{} holds {} {}, needs {}'.format(sender, balance, self.symbol, amount))
        self.storage.balances[sender] = balance - amount
        self.storage.balances[to] = self.balance_of(to) + amount
        logger.debug('%s transfer %s -> %s: %s', self.symbol, sender, to, amount)
        self.chain.emit('Transfer', token=self.symbol, sender=sender, to=to, amount=amount)
