import typing

from credit_model.parts.general_state_updates import s_update_action_status, s_update_action_type
from credit_model.parts.system_policies import ActionDecoder
from credit_model.parts.world_state_updates import s_update_spot_price, s_update_world


def generate_partial_state_update_blocks(actions: typing.Union[str, typing.List[dict]]) -> dict:
    steps_number = ActionDecoder.load_actions(actions)
    blocks = {
        'partial_state_update_blocks': [
            {
                'policies': {
                    'user_action': ActionDecoder.p_action_decoder,
                },
                'variables': {
                    'world': s_update_world,
                    'action_type': s_update_action_type,
                }
            },
            {
                # reads the world after the action of this timestep
                'policies': {},
                'variables': {
                    'spot_price': s_update_spot_price,
                    'action_status': s_update_action_status,
                }
            },
        ],
        'steps_number': steps_number,
    }
    return blocks
