import typing

import pandas as pd


def get_param(params: typing.Dict, key: str, default=None):
    # When only 1 param this happens
    if isinstance(params, list):
        params = params[0] if params else {}
    if not params:
        return default
    return params.get(key, default)


def unpack_column_world(df: pd.DataFrame) -> pd.DataFrame:
    """
    One row per state: pair reserves and invariant, lending pool totals and
    every tracked account's balances and position, all in whole units.
    """
    worlds = df['world'].to_list()
    first = worlds[0]
    symbols = sorted(first.tokens.keys())
    token_a = first.pair.token_a.symbol.lower()
    token_b = first.pair.token_b.symbol.lower()

    di = {
        f'reserve_{token_a}': [],
        f'reserve_{token_b}': [],
        'invariant': [],
        'total_shares': [],
        'lending_pool_reserve': [],
        'total_debt': [],
        'total_collateral': [],
    }
    for account in first.accounts:
        for symbol in symbols:
            di[f'{account}_{symbol.lower()}_balance'] = []
        di[f'{account}_debt'] = []
        di[f'{account}_collateral'] = []

    for world in worlds:
        pair = world.pair
        pool = world.lending_pool
        reserve_a = pair.token_a.from_base_units(pair.storage.reserve_a)
        reserve_b = pair.token_b.from_base_units(pair.storage.reserve_b)
        di[f'reserve_{token_a}'].append(reserve_a)
        di[f'reserve_{token_b}'].append(reserve_b)
        di['invariant'].append(reserve_a * reserve_b)
        di['total_shares'].append(pair.get_total_shares())
        di['lending_pool_reserve'].append(pool.borrow_asset.from_base_units(pool.reserve_of_borrow_asset))
        di['total_debt'].append(pool.borrow_asset.from_base_units(pool.total_debt()))
        di['total_collateral'].append(pool.collateral_asset.from_base_units(pool.total_collateral()))
        for account in first.accounts:
            for symbol in symbols:
                di[f'{account}_{symbol.lower()}_balance'].append(world.balance_of(account, symbol))
            position = pool.position_of(account)
            di[f'{account}_debt'].append(pool.borrow_asset.from_base_units(position.debt_amount))
            di[f'{account}_collateral'].append(pool.collateral_asset.from_base_units(position.collateral_deposited))
    return pd.DataFrame(di, index=df.index).astype('float64')


def post_processing(df: pd.DataFrame) -> pd.DataFrame:
    unpacked_column_world = unpack_column_world(df)
    df = df.assign(**unpacked_column_world).drop('world', axis=1)
    df = df.astype({'spot_price': 'float64'})

    # Relative move of the oracle price caused by each action
    df['spot_price_change'] = df['spot_price'].pct_change().fillna(0.0)
    df['reverted'] = df['action_status'].str.startswith('reverted')
    return df
