from decimal import Decimal

from attr import dataclass


@dataclass(repr=False)
class TokenAmount:
    symbol: str
    amount: Decimal

    @staticmethod
    def ta_with_dict(token_dict):
        return TokenAmount(symbol=token_dict['symbol'], amount=Decimal(token_dict['amount']))

    def __repr__(self):
        return f'{self.amount:.4f} {self.symbol}'


@dataclass
class ApproveInput:
    owner: str
    spender: str
    token: TokenAmount
    unlimited: bool = False


@dataclass
class SwapInput:
    sender: str
    token_in: TokenAmount
    min_token_out: TokenAmount = None


@dataclass
class SwapExactOutInput:
    sender: str
    token_out: TokenAmount
    max_token_in: TokenAmount = None


@dataclass
class AddLiquidityInput:
    provider: str
    tokens_in: [TokenAmount]


@dataclass
class RemoveLiquidityInput:
    provider: str
    shares: int


@dataclass
class BorrowInput:
    borrower: str
    amount: Decimal


@dataclass
class RepayInput:
    borrower: str
    amount: Decimal


@dataclass
class BatchInput:
    name: str
    steps: list


class ActionParamsDecoder:
    """
    Turns one action record (a dict, amounts as decimal strings) into the
    input entity that the state update functions apply.
    """

    @staticmethod
    def approve(action: dict) -> ApproveInput:
        amount = action.get('amount', 'max')
        unlimited = amount == 'max'
        return ApproveInput(owner=action['owner'], spender=action['spender'],
                            token=TokenAmount(symbol=action['symbol'], amount=Decimal(0 if unlimited else amount)),
                            unlimited=unlimited)

    @staticmethod
    def swap(action: dict) -> SwapInput:
        min_token_out = action.get('min_token_out')
        return SwapInput(sender=action['sender'], token_in=TokenAmount.ta_with_dict(action['token_in']),
                         min_token_out=TokenAmount.ta_with_dict(min_token_out) if min_token_out else None)

    @staticmethod
    def swap_exact_out(action: dict) -> SwapExactOutInput:
        max_token_in = action.get('max_token_in')
        return SwapExactOutInput(sender=action['sender'], token_out=TokenAmount.ta_with_dict(action['token_out']),
                                 max_token_in=TokenAmount.ta_with_dict(max_token_in) if max_token_in else None)

    @staticmethod
    def add_liquidity(action: dict) -> AddLiquidityInput:
        return AddLiquidityInput(provider=action['provider'],
                                 tokens_in=list(map(lambda x: TokenAmount.ta_with_dict(x), action['tokens_in'])))

    @staticmethod
    def remove_liquidity(action: dict) -> RemoveLiquidityInput:
        return RemoveLiquidityInput(provider=action['provider'], shares=int(action['shares']))

    @staticmethod
    def borrow(action: dict) -> BorrowInput:
        return BorrowInput(borrower=action['borrower'], amount=Decimal(action['amount']))

    @staticmethod
    def repay(action: dict) -> RepayInput:
        return RepayInput(borrower=action['borrower'], amount=Decimal(action['amount']))

    @staticmethod
    def batch(action: dict) -> BatchInput:
        return BatchInput(name=action.get('name', 'batch'),
                          steps=[ActionParamsDecoder.decode(step) for step in action['steps']])

    @staticmethod
    def decode(action: dict):
        action_type = action['type']
        if action_type == 'batch':
            return ActionParamsDecoder.batch(action)
        decoder = getattr(ActionParamsDecoder, action_type, None)
        if decoder is None or action_type == 'decode':
            raise Exception("Action type {} unimplemented".format(action_type))
        return decoder(action)
