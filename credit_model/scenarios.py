"""
Action lists for the scenarios the model is built to study, in the same
record format as the JSON action files (``[{"action": {...}}, ...]``).
"""
import typing

from credit_model.config import generate_sim_config
from credit_model.genesis_states import generate_initial_state
from credit_model.partial_state_update_block import generate_partial_state_update_blocks
from credit_model.parts.utils import post_processing
from credit_model.sim_runner import run
from credit_model.sys_params import sys_params


def _approve(owner, spender, symbol, amount='max'):
    return {'type': 'approve', 'owner': owner, 'spender': spender, 'symbol': symbol, 'amount': amount}


def price_manipulation_steps(attacker: str = 'attacker', dump_amount: str = '10000',
                             borrow_amount: str = '1000000', swap_back_amount: str = None, dump_asset: str = 'DVT',
                             collateral_asset: str = 'WETH') -> typing.List[dict]:
    """
    Dump ``dump_amount`` of the borrowed asset into the pair so it looks
    cheap, then borrow ``borrow_amount`` against the collateral the oracle
    now asks for. With ``swap_back_amount`` the attacker then buys the
    borrowed asset back with that much collateral, pushing the price up again.
    """
    steps = [
        _approve(attacker, 'pair', dump_asset),
        _approve(attacker, 'lending_pool', collateral_asset),
        {'type': 'swap', 'sender': attacker, 'token_in': {'symbol': dump_asset, 'amount': dump_amount}},
        {'type': 'borrow', 'borrower': attacker, 'amount': borrow_amount},
    ]
    if swap_back_amount is not None:
        steps.append(_approve(attacker, 'pair', collateral_asset))
        steps.append({'type': 'swap', 'sender': attacker,
                      'token_in': {'symbol': collateral_asset, 'amount': swap_back_amount}})
    return steps


def price_manipulation_actions(attacker: str = 'attacker', dump_amount: str = '10000',
                               borrow_amount: str = '1000000', swap_back_amount: str = None,
                               as_batch: bool = True) -> typing.List[dict]:
    steps = price_manipulation_steps(attacker, dump_amount, borrow_amount, swap_back_amount)
    if as_batch:
        return [{'action': {'type': 'batch', 'name': 'price_manipulation', 'steps': steps}}]
    return [{'action': step} for step in steps]


def honest_round_trip_actions(borrower: str = 'attacker', amount: str = '1',
                              borrow_asset: str = 'DVT', collateral_asset: str = 'WETH') -> typing.List[dict]:
    """Borrow at the undisturbed price and pay everything back."""
    steps = [
        _approve(borrower, 'lending_pool', collateral_asset),
        _approve(borrower, 'lending_pool', borrow_asset),
        {'type': 'borrow', 'borrower': borrower, 'amount': amount},
        {'type': 'repay', 'borrower': borrower, 'amount': amount},
    ]
    return [{'action': step} for step in steps]


def run_scenario(actions, initial_values=None, parameters: dict = None, runs: int = 1):
    """
    Bootstraps the deployment, replays ``actions`` one per timestep and
    returns the post-processed state history.
    """
    parameters = parameters or sys_params
    initial_state = generate_initial_state(initial_values, spot_price_of=parameters['spot_price_of'][0],
                                           spot_price_in_terms_of=parameters['spot_price_in_terms_of'][0])
    result = generate_partial_state_update_blocks(actions)
    sim_config = generate_sim_config(result['steps_number'], parameters, runs)
    df = run(initial_state, result['partial_state_update_blocks'], sim_config)
    return post_processing(df)
