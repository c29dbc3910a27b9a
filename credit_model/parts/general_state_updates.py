def s_update_action_type(params, substep, state_history, previous_state, policy_input):
    action_type = policy_input.get('action_type')
    if action_type is None:
        return 'action_type', ''
    return 'action_type', action_type


def s_update_action_status(params, substep, state_history, previous_state, policy_input):
    return 'action_status', previous_state['world'].last_outcome
