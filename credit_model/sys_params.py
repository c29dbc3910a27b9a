"""
Model parameters.
"""

# Every entry is a list so cadCAD can sweep it. The spot price recorded in the
# state is the price of one `spot_price_of` in `spot_price_in_terms_of`.
# The collateral factor is deployment configuration, see genesis_states.initial_values.
sys_params = {
    'spot_price_of': ['DVT'],
    'spot_price_in_terms_of': ['WETH'],
}
