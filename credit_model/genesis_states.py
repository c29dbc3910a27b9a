"""
Bootstrap: deploys the tokens, the pair and the lending pool and seeds
balances before any action runs.
"""
import copy
import json
import os
import typing
from decimal import Decimal

from credit_model.chain import Chain
from credit_model.constants import DEFAULT_COLLATERAL_FACTOR, DEFAULT_DECIMALS
from credit_model.lending_pool import LendingPool
from credit_model.models import ERC20Token
from credit_model.oracle import SpotPriceOracle
from credit_model.reserve_pair import ReservePair

# PuppetV2 setup: the pair starts with 100 DVT and 10 WETH, the lending pool holds 1,000,000 DVT
initial_values = {
    'tokens': {
        'DVT': {'decimals': 18},
        'WETH': {'decimals': 18},
    },
    'pair': {
        'token_a': 'DVT',
        'token_b': 'WETH',
        'provider': 'deployer',
        'reserve_a': '100',
        'reserve_b': '10',
    },
    'lending_pool': {
        'borrow_asset': 'DVT',
        'collateral_asset': 'WETH',
        'collateral_factor': '3',
        'provider': 'deployer',
        'reserve': '1000000',
    },
    'balances': {
        'attacker': {'DVT': '10000', 'WETH': '20'},
    },
}


class Deployment:
    """Everything the bootstrap created, plus the outcome of the last action applied to it."""

    def __init__(self, chain: Chain, tokens: typing.Dict[str, ERC20Token], pair: ReservePair, oracle: SpotPriceOracle,
                 lending_pool: LendingPool, accounts: typing.List[str]):
        self.chain = chain
        self.tokens = tokens
        self.pair = pair
        self.oracle = oracle
        self.lending_pool = lending_pool
        self.accounts = accounts
        self.last_outcome = ''

    def __repr__(self):
        return 'Deployment({!r}, {!r})'.format(self.pair, self.lending_pool)

    def next_step(self) -> 'Deployment':
        """
        Deep copy of the world for the next timestep. The copy starts with an
        empty event log; earlier events stay with the state they belong to.
        """
        return copy.deepcopy(self, {id(self.chain.events): []})

    def contract_address(self, name: str) -> str:
        if name == 'pair':
            return self.pair.address
        if name == 'lending_pool':
            return self.lending_pool.address
        return name

    def balance_of(self, account: str, symbol: str) -> Decimal:
        token = self.tokens[symbol]
        return token.from_base_units(token.balance_of(account))


def bootstrap(values: typing.Dict = None) -> Deployment:
    values = values or initial_values
    chain = Chain()
    tokens = {
        symbol: ERC20Token(chain, symbol, int(token_values.get('decimals', DEFAULT_DECIMALS)))
        for symbol, token_values in values['tokens'].items()
    }

    pair_values = values['pair']
    token_a = tokens[pair_values['token_a']]
    token_b = tokens[pair_values['token_b']]
    pair = ReservePair(chain, token_a, token_b)
    oracle = SpotPriceOracle(pair)

    pool_values = values['lending_pool']
    lending_pool = LendingPool(
        chain, oracle,
        collateral_asset=tokens[pool_values['collateral_asset']],
        borrow_asset=tokens[pool_values['borrow_asset']],
        collateral_factor=Decimal(pool_values.get('collateral_factor', DEFAULT_COLLATERAL_FACTOR)),
    )

    provider = pair_values['provider']
    reserve_a = token_a.to_base_units(pair_values['reserve_a'])
    reserve_b = token_b.to_base_units(pair_values['reserve_b'])
    token_a.mint(provider, reserve_a)
    token_b.mint(provider, reserve_b)
    token_a.approve(provider, pair.address, reserve_a)
    token_b.approve(provider, pair.address, reserve_b)
    pair.add_liquidity(provider, reserve_a, reserve_b)

    funder = pool_values['provider']
    borrow_asset = lending_pool.borrow_asset
    pool_reserve = borrow_asset.to_base_units(pool_values['reserve'])
    borrow_asset.mint(funder, pool_reserve)
    borrow_asset.approve(funder, lending_pool.address, pool_reserve)
    lending_pool.fund(funder, pool_reserve)

    accounts = []
    for account, balances in values.get('balances', {}).items():
        accounts.append(account)
        for symbol, amount in balances.items():
            tokens[symbol].mint(account, tokens[symbol].to_base_units(amount))

    for account in (provider, funder):
        if account not in accounts:
            accounts.append(account)
    return Deployment(chain, tokens, pair, oracle, lending_pool, accounts)


def load_initial_values(path: str) -> typing.Dict:
    with open(path, 'r') as f:
        return json.load(f, parse_float=Decimal)


def generate_initial_state(values: typing.Union[str, os.PathLike, typing.Dict] = None, spot_price_of: str = None,
                           spot_price_in_terms_of: str = None) -> typing.Dict:
    if isinstance(values, (str, os.PathLike)):
        values = load_initial_values(values)
    deployment = bootstrap(values)
    spot_price_of = spot_price_of or deployment.pair.token_a.symbol
    spot_price_in_terms_of = spot_price_in_terms_of or deployment.pair.token_b.symbol
    return {
        'world': deployment,
        'action_type': '',
        'action_status': '',
        'spot_price': deployment.oracle.spot_price_decimal(spot_price_of, spot_price_in_terms_of),
    }
