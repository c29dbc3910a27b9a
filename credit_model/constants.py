from decimal import Decimal

WAD = 10 ** 18
MAX_UINT256 = 2 ** 256 - 1

ZERO_ADDRESS = '0x0000000000000000000000000000000000000000'

# Uniswap v2 charges 0.3% on the input side: effective input = amount_in * 997 / 1000
SWAP_FEE_NUMERATOR = 997
SWAP_FEE_DENOMINATOR = 1000

# Shares minted to ZERO_ADDRESS on the first deposit and locked forever
MINIMUM_LIQUIDITY = 10 ** 3

DEFAULT_DECIMALS = 18
DEFAULT_COLLATERAL_FACTOR = Decimal('3')
