import os
import typing

import pandas as pd

from credit_model.parts.action_entities import ActionParamsDecoder


class ActionDecoder:
    action_df = None

    @classmethod
    def load_actions(cls, actions: typing.Union[str, os.PathLike, typing.List[dict]]) -> int:
        """
        Loads the action list, either a JSON file of ``{"action": {...}}``
        records or the records themselves. Returns the number of steps.
        """
        if isinstance(actions, (str, os.PathLike)):
            ActionDecoder.action_df = pd.read_json(actions, orient='records', dtype=False)
        else:
            ActionDecoder.action_df = pd.DataFrame.from_records(list(actions))
        return len(ActionDecoder.action_df)

    @staticmethod
    def p_action_decoder(params, substep, history, current_state):
        if ActionDecoder.action_df is None:
            raise Exception('call ActionDecoder.load_actions(path_to_actions.json) first')
        '''
        Users are not modelled as agents: every timestep replays the next
        recorded action, and a batch replays several of them as one outer
        atomic unit.
        '''
        idx = current_state['timestep']
        action = ActionDecoder.action_df['action'][idx]
        return {'action': ActionParamsDecoder.decode(action), 'action_type': action['type']}
