"""
Error taxonomy. Every error aborts the atomic unit it is raised in; the
``code`` mirrors the revert strings of the contracts being modelled.
"""


class CreditModelError(Exception):
    code = 'ERR_CREDIT_MODEL'

    def __init__(self, message: str = None):
        self.message = message or self.code
        super().__init__(self.message)


class InvalidAmount(CreditModelError):
    code = 'ERR_INVALID_AMOUNT'


class UnknownAsset(CreditModelError):
    code = 'ERR_UNKNOWN_ASSET'


class InsufficientLiquidity(CreditModelError):
    code = 'ERR_INSUFFICIENT_LIQUIDITY'


class InsufficientOutputAmount(InsufficientLiquidity):
    code = 'ERR_INSUFFICIENT_OUTPUT_AMOUNT'


class InsufficientShares(InsufficientLiquidity):
    code = 'ERR_INSUFFICIENT_SHARES'


class InsufficientLiquidityMinted(InsufficientLiquidity):
    code = 'ERR_INSUFFICIENT_LIQUIDITY_MINTED'


class InsufficientLiquidityBurned(InsufficientLiquidity):
    code = 'ERR_INSUFFICIENT_LIQUIDITY_BURNED'


class InsufficientCollateral(CreditModelError):
    code = 'ERR_INSUFFICIENT_COLLATERAL'


class CollateralTransferFailed(InsufficientCollateral):
    code = 'ERR_COLLATERAL_TRANSFER_FAILED'


class ArithmeticOverflow(CreditModelError):
    code = 'ERR_OVERFLOW'


class ArithmeticUnderflow(CreditModelError):
    code = 'ERR_UNDERFLOW'


class DebtExceeded(CreditModelError):
    code = 'ERR_DEBT_EXCEEDED'


class InsufficientBalance(CreditModelError):
    code = 'ERR_INSUFFICIENT_BALANCE'


class InsufficientAllowance(CreditModelError):
    code = 'ERR_INSUFFICIENT_ALLOWANCE'


class SlippageExceeded(CreditModelError):
    code = 'ERR_SLIPPAGE'


class InvariantViolation(CreditModelError):
    code = 'ERR_K'
