import logging
from functools import partial

from credit_model.constants import MAX_UINT256
from credit_model.errors import CreditModelError
from credit_model.parts.action_entities import (AddLiquidityInput, ApproveInput, BatchInput, BorrowInput,
                                                RemoveLiquidityInput, RepayInput, SwapExactOutInput, SwapInput)
from credit_model.parts.utils import get_param

logger = logging.getLogger(__name__)


def s_update_world(params, substep, state_history, previous_state, policy_input):
    # each row of the history keeps its own world
    world = previous_state['world'].next_step()
    action = policy_input.get('action')
    if action is None:
        world.last_outcome = ''
        return 'world', world

    try:
        apply_action(world, action)
        world.last_outcome = 'ok'
    except CreditModelError as e:
        # the failed unit is already rolled back; the next timestep carries on
        world.last_outcome = 'reverted: {} {}'.format(type(e).__name__, e.message)
        logger.warning('timestep %s: %s reverted with %r', previous_state.get('timestep'), type(action).__name__, e)
    return 'world', world


def s_update_spot_price(params, substep, state_history, previous_state, policy_input):
    world = previous_state['world']
    spot_price_of = get_param(params, 'spot_price_of', world.pair.token_a.symbol)
    spot_price_in_terms_of = get_param(params, 'spot_price_in_terms_of', world.pair.token_b.symbol)
    return 'spot_price', world.oracle.spot_price_decimal(spot_price_of, spot_price_in_terms_of)


def apply_action(world, action):
    if isinstance(action, BatchInput):
        steps = [partial(apply_action, world, step) for step in action.steps]
        return world.chain.execute_batch(steps, name=action.name)
    return action_mappings[type(action)](world, action)


def s_approve(world, input_params: ApproveInput) -> bool:
    token = world.tokens[input_params.token.symbol]
    amount = MAX_UINT256 if input_params.unlimited else token.to_base_units(input_params.token.amount)
    return token.approve(input_params.owner, world.contract_address(input_params.spender), amount)


def s_swap(world, input_params: SwapInput) -> int:
    token_in = world.tokens[input_params.token_in.symbol]
    amount_in = token_in.to_base_units(input_params.token_in.amount)
    min_amount_out = 0
    if input_params.min_token_out is not None:
        token_out = world.tokens[input_params.min_token_out.symbol]
        min_amount_out = token_out.to_base_units(input_params.min_token_out.amount)
    return world.pair.swap(input_params.sender, amount_in, token_in, min_amount_out=min_amount_out)


def s_swap_exact_out(world, input_params: SwapExactOutInput) -> int:
    token_out = world.tokens[input_params.token_out.symbol]
    max_amount_in = None
    if input_params.max_token_in is not None:
        token_in = world.tokens[input_params.max_token_in.symbol]
        max_amount_in = token_in.to_base_units(input_params.max_token_in.amount)
    return world.pair.swap_exact_out(input_params.sender, token_out.to_base_units(input_params.token_out.amount),
                                     token_out, max_amount_in=max_amount_in)


def s_add_liquidity(world, input_params: AddLiquidityInput):
    """
    Join the pair with both assets. tokens_in are the desired amounts; only
    the ratio-preserving part of them is taken.
    """
    pair = world.pair
    amounts = {token.symbol: token.amount for token in input_params.tokens_in}
    amount_a = pair.token_a.to_base_units(amounts[pair.token_a.symbol])
    amount_b = pair.token_b.to_base_units(amounts[pair.token_b.symbol])
    return pair.add_liquidity(input_params.provider, amount_a, amount_b)


def s_remove_liquidity(world, input_params: RemoveLiquidityInput):
    return world.pair.remove_liquidity(input_params.provider, input_params.shares)


def s_borrow(world, input_params: BorrowInput) -> int:
    pool = world.lending_pool
    return pool.borrow(input_params.borrower, pool.borrow_asset.to_base_units(input_params.amount))


def s_repay(world, input_params: RepayInput) -> int:
    pool = world.lending_pool
    return pool.repay(input_params.borrower, pool.borrow_asset.to_base_units(input_params.amount))


action_mappings = {
    ApproveInput: s_approve,
    SwapInput: s_swap,
    SwapExactOutInput: s_swap_exact_out,
    AddLiquidityInput: s_add_liquidity,
    RemoveLiquidityInput: s_remove_liquidity,
    BorrowInput: s_borrow,
    RepayInput: s_repay,
}
